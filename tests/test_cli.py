"""Tests for slack_emoji_stats.cli module."""

from __future__ import annotations

import json

import pytest

from slack_emoji_stats.cli import main
from slack_emoji_stats.store import SessionStorage


@pytest.fixture
def session_path(tmp_path) -> str:
    """Session file location."""
    return str(tmp_path / "session.json")


@pytest.fixture
def payload_file(tmp_path, admin_list_payload: dict) -> str:
    """Saved emoji.adminList response."""
    path = tmp_path / "response.json"
    path.write_text(json.dumps(admin_list_payload), encoding="utf-8")
    return str(path)


@pytest.fixture
def curl_file(tmp_path, chrome_curl: str) -> str:
    """Saved curl command."""
    path = tmp_path / "curl.txt"
    path.write_text(chrome_curl, encoding="utf-8")
    return str(path)


class TestParseCommand:
    """Tests for the parse subcommand."""

    def test_masked_output(self, curl_file: str, capsys) -> None:
        """Should print masked JSON and exit 0."""
        assert main(["parse", "--file", curl_file]) == 0
        data = json.loads(capsys.readouterr().out)

        assert data["workspace"] == "acme"
        assert data["token"] == "xoxc-1111-..."

    def test_show_secrets(self, curl_file: str, capsys) -> None:
        """Should print the raw token on request."""
        main(["parse", "--file", curl_file, "--show-secrets"])
        assert json.loads(capsys.readouterr().out)["token"] == "xoxc-1111-2222-3333-abcdef"

    def test_invalid_exit_code(self, capsys) -> None:
        """Should exit 1 for an invalid command."""
        assert main(["parse", "curl nothing"]) == 1


class TestNormalizeCommand:
    """Tests for the normalize subcommand."""

    def test_prints_canonical(self, postman_curl: str, capsys) -> None:
        """Should print the canonical command."""
        assert main(["normalize", postman_curl]) == 0
        assert capsys.readouterr().out.startswith("curl --request POST")

    def test_invalid(self, capsys) -> None:
        """Should report the error on stderr."""
        assert main(["normalize", "curl nothing"]) == 1
        assert "Missing URL" in capsys.readouterr().err


class TestIngestCommand:
    """Tests for the ingest subcommand."""

    def test_saves_session(self, session_path: str, payload_file: str, curl_file: str, chrome_curl: str) -> None:
        """Should store records, workspace and the command."""
        assert main(["--storage", session_path, "-q", "ingest", payload_file, "--curl-file", curl_file]) == 0

        storage = SessionStorage(session_path)
        assert storage.get("workspace") == "acme"
        assert storage.get("emojiCount") == "5"
        assert storage.curl_command == chrome_curl.strip()

    def test_auth_expired(self, tmp_path, session_path: str, capsys) -> None:
        """Should exit 2 for expired authentication."""
        path = tmp_path / "error.json"
        path.write_text(json.dumps({"ok": False, "error": "invalid_auth"}), encoding="utf-8")

        assert main(["--storage", session_path, "ingest", str(path)]) == 2
        assert "fresh curl command" in capsys.readouterr().err

    def test_missing_file(self, session_path: str, capsys) -> None:
        """Should exit 1 for a missing payload file."""
        assert main(["--storage", session_path, "ingest", "/nonexistent/response.json"]) == 1
        assert "Error" in capsys.readouterr().err


class TestStatsCommands:
    """Tests for the stats and leaderboard subcommands."""

    def test_stats_from_session(
        self, session_path: str, payload_file: str, now: int, capsys
    ) -> None:
        """Should read records saved by ingest."""
        main(["--storage", session_path, "-q", "ingest", payload_file, "-w", "acme"])
        capsys.readouterr()

        assert main(["--storage", session_path, "-q", "stats", "--now", str(now)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["total_emojis"] == 4
        assert data["total_creators"] == 3

    def test_leaderboard_json(self, payload_file: str, now: int, capsys) -> None:
        """Should print ranked rows from a records file."""
        assert main(["leaderboard", "--records", payload_file, "--now", str(now), "--json"]) == 0
        rows = json.loads(capsys.readouterr().out)

        assert [(r["user_id"], r["rank"]) for r in rows] == [("U1", 1), ("U2", 2), ("U3", 3)]

    def test_leaderboard_active_limit(self, payload_file: str, now: int, capsys) -> None:
        """Should filter active users and cut to the limit."""
        main([
            "leaderboard", "--records", payload_file, "--now", str(now),
            "--active-days", "28", "--limit", "1",
        ])
        out = capsys.readouterr().out.strip().splitlines()

        assert len(out) == 1
        assert "Alice" in out[0]

    def test_records_array_file(self, tmp_path, sample_records: list[dict], now: int, capsys) -> None:
        """Should accept a plain JSON array of records."""
        path = tmp_path / "records.json"
        path.write_text(json.dumps(sample_records), encoding="utf-8")

        assert main(["stats", "--records", str(path), "--now", str(now)]) == 0
        assert json.loads(capsys.readouterr().out)["total_emojis"] == 4

    def test_error_payload_as_records(self, tmp_path, capsys) -> None:
        """Should exit 1 when the records file is a Slack error."""
        path = tmp_path / "error.json"
        path.write_text(json.dumps({"ok": False, "error": "ratelimited"}), encoding="utf-8")

        assert main(["stats", "--records", str(path)]) == 1
        assert "ratelimited" in capsys.readouterr().err
