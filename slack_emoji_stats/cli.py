"""
Command Line Interface

Usage:
    python -m slack_emoji_stats parse < curl.txt
    python -m slack_emoji_stats normalize "curl 'https://acme.slack.com/api/emoji.adminList' ..."
    python -m slack_emoji_stats ingest response.json --curl-file curl.txt
    python -m slack_emoji_stats stats
    python -m slack_emoji_stats leaderboard --days 30 --limit 10
"""

import argparse
import json
import sys
import time

from .config_manager import DashboardConfig
from .decoder import CurlCommandNormalizer, CurlCommandParser
from .exceptions import SlackEmojiStatsError
from .parsers import normalize_emoji_payload
from .stats import calculate_emoji_stats, get_user_leaderboard, is_active, rank_leaderboard
from .stats.engine import DAY
from .store import EmojiRecordStore, SessionStorage


def _read_text(value, file_path=None):
    """Command text from an argument, a file, or stdin ('-' or missing)"""
    if file_path:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    if value is None or value == '-':
        return sys.stdin.read()
    return value


def _load_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _load_store(args, config):
    """Store filled from --records (array or Slack payload) or the session file"""
    store = EmojiRecordStore()
    if args.records:
        data = _load_json(args.records)
        if isinstance(data, list):
            data = {"emoji": data}
        result = normalize_emoji_payload(data)
        result.raise_for_error()
        store.set_records(result.records)
    else:
        SessionStorage(config.storage_path, verbose=config.verbose).load_into(store)
    return store


def cmd_parse(args, config):
    parsed = CurlCommandParser().parse(_read_text(args.curl, args.file))
    shown = parsed if args.show_secrets else parsed.masked()
    print(json.dumps(shown.to_dict(), indent=2))
    return 0 if parsed.is_valid else 1


def cmd_normalize(args, config):
    command = _read_text(args.curl, args.file)
    parser = CurlCommandParser()
    parsed = parser.parse(command)
    if not parsed.is_valid:
        print(f"Error: {parsed.error}", file=sys.stderr)
        return 1
    print(CurlCommandNormalizer(parser).normalize(command))
    return 0


def cmd_ingest(args, config):
    result = normalize_emoji_payload(_load_json(args.payload))
    if result.error:
        print(f"Error: {result.message}", file=sys.stderr)
        return 2 if result.is_auth_expired else 1
    if not result.records:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    curl_command = None
    workspace = args.workspace
    if args.curl_file:
        curl_command = _read_text(None, args.curl_file).strip()
        workspace = workspace or CurlCommandParser().parse(curl_command).workspace

    workspace = workspace or "slack-workspace"
    storage = SessionStorage(config.storage_path, verbose=config.verbose)
    storage.save_fetch(result.records, workspace, curl_command)
    if config.verbose:
        print(f"Loaded {len(result.records)} emojis from {workspace} ({result.shape.value})")
    return 0


def cmd_stats(args, config):
    store = _load_store(args, config)
    now = args.now if args.now is not None else int(time.time())
    stats = calculate_emoji_stats(store.records, now)
    print(json.dumps(stats.to_dict(), indent=2))
    return 0


def cmd_leaderboard(args, config):
    store = _load_store(args, config)
    now = args.now if args.now is not None else int(time.time())

    records = store.records
    if args.days:
        records = store.filter_by_date_range(now - args.days * DAY, now)

    leaderboard = get_user_leaderboard(records, now)
    include = is_active(now, args.active_days) if args.active_days else None
    ranked = rank_leaderboard(leaderboard, include)
    if args.limit:
        ranked = ranked[:args.limit]

    if args.json:
        print(json.dumps([row.to_dict() for row in ranked], indent=2))
        return 0

    for row in ranked:
        name = row.user_display_name or row.user_id
        print(
            f"{row.rank:>4}. {name:<30} {row.emoji_count:>6}  "
            f"{row.l4wepw:>6.2f}/wk  {row.l4wepw_change:>+8.1f}%"
        )
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="slack_emoji_stats",
        description="Slack custom emoji stats from a captured curl command",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m slack_emoji_stats parse --file curl.txt
  python -m slack_emoji_stats normalize < curl.txt
  python -m slack_emoji_stats ingest response.json --curl-file curl.txt
  python -m slack_emoji_stats leaderboard --days 90 --active-days 28 --limit 20
        """
    )
    parser.add_argument(
        "--storage",
        help="Session file (default: $SLACK_EMOJI_STORAGE or ~/.slack_emoji_stats.json)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("parse", "Show what was extracted from a curl command"),
        ("normalize", "Print the canonical emoji.adminList curl command"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("curl", nargs="?", help="Curl command (default: read stdin)")
        p.add_argument("-f", "--file", help="Read the curl command from a file")
        if name == "parse":
            p.add_argument("--show-secrets", action="store_true", help="Do not mask token and cookie")

    p = sub.add_parser("ingest", help="Store emojis from a saved Slack API response")
    p.add_argument("payload", help="JSON file with the emoji.adminList / emoji.list response")
    p.add_argument("-w", "--workspace", help="Workspace name (default: from --curl-file)")
    p.add_argument("--curl-file", help="Curl command that produced the response; saved for refresh")

    for name, help_text in (
        ("stats", "Workspace-wide emoji stats"),
        ("leaderboard", "Emoji creators ranked by count"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--records", help="JSON file with records or a Slack response (default: session file)")
        p.add_argument("--now", type=int, help="Reference time in Unix seconds (default: now)")
        if name == "leaderboard":
            p.add_argument("--days", type=int, help="Only count emojis from the last N days")
            p.add_argument("--active-days", type=int, help="Rank only users active in the last N days")
            p.add_argument("--limit", type=int, help="Show the top N users")
            p.add_argument("--json", action="store_true", help="Print JSON")

    args = parser.parse_args(argv)
    config = DashboardConfig(storage_path=args.storage, verbose=not args.quiet)

    handlers = {
        "parse": cmd_parse,
        "normalize": cmd_normalize,
        "ingest": cmd_ingest,
        "stats": cmd_stats,
        "leaderboard": cmd_leaderboard,
    }

    try:
        return handlers[args.command](args, config)
    except (OSError, ValueError, SlackEmojiStatsError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
