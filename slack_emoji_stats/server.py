"""
FastAPI Server for Slack Emoji Stats

Provides API endpoints for:
- Parsing and normalizing captured curl commands
- Loading emoji payloads into the session store
- Date-filtered records, workspace stats and the leaderboard
"""

import time
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config_manager import DashboardConfig
from .decoder import CurlCommandNormalizer, CurlCommandParser, build_slack_request
from .exceptions import StorageError
from .parsers import normalize_emoji_payload
from .stats import (
    calculate_emoji_stats,
    get_user_leaderboard,
    is_active,
    rank_leaderboard,
)
from .stats.engine import DAY
from .store import EmojiRecordStore, SessionStorage


# Request Models
class CurlInput(BaseModel):
    curl_command: str


class IngestInput(BaseModel):
    payload: Dict[str, Any]
    workspace: Optional[str] = None
    curl_command: Optional[str] = None  # Saved for refresh when ingestion succeeds


class RecordsInput(BaseModel):
    records: List[Dict[str, Any]]
    workspace: Optional[str] = None


class ModeInput(BaseModel):
    demo: bool


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else now


def create_app(
    store: Optional[EmojiRecordStore] = None,
    storage: Optional[SessionStorage] = None,
) -> FastAPI:
    """
    Build the API app around a record store.

    Args:
        store: Session store; a new empty one when None
        storage: Optional persistence; loaded into the store on startup and
                 written after every successful ingest

    Returns:
        FastAPI application
    """
    app = FastAPI(title="Slack Emoji Stats API")

    # Enable CORS for the local dashboard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        store = EmojiRecordStore()
        if storage is not None:
            storage.load_into(store)

    app.state.store = store
    app.state.storage = storage
    parser = CurlCommandParser()
    normalizer = CurlCommandNormalizer(parser)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/parse")
    async def parse_curl(input: CurlInput):
        """Parse a curl command; secrets are masked in the response."""
        parsed = parser.parse(input.curl_command)
        return {"success": parsed.is_valid, "data": parsed.masked().to_dict()}

    @app.post("/api/normalize")
    async def normalize_curl(input: CurlInput):
        """Return the canonical emoji.adminList curl command."""
        parsed = parser.parse(input.curl_command)
        if not parsed.is_valid:
            raise HTTPException(status_code=400, detail=parsed.error)
        return {"success": True, "curl_command": normalizer.normalize(input.curl_command)}

    @app.post("/api/request")
    async def build_request(input: CurlInput):
        """Build the request descriptor for the dispatch layer."""
        request = build_slack_request(input.curl_command)
        if not request.url:
            raise HTTPException(status_code=400, detail="Missing URL")
        return {"success": True, "request": request.to_dict()}

    @app.post("/api/ingest")
    async def ingest_payload(input: IngestInput):
        """Load a Slack emoji response into the store."""
        result = normalize_emoji_payload(input.payload)

        if result.error:
            status = 401 if result.is_auth_expired else 400
            raise HTTPException(
                status_code=status,
                detail={"error": result.error, "message": result.message},
            )

        if not result.records:
            return {"success": False, "message": result.message, "count": 0}

        workspace = input.workspace
        if not workspace and input.curl_command:
            workspace = parser.parse(input.curl_command).workspace
        workspace = workspace or "slack-workspace"

        # persist first so a failed write leaves the session untouched
        if app.state.storage is not None:
            try:
                app.state.storage.save_fetch(result.records, workspace, input.curl_command)
            except StorageError as e:
                raise HTTPException(status_code=500, detail=f"Could not save session: {e}")
        app.state.store.set_records(result.records, workspace=workspace)

        return {
            "success": True,
            "workspace": workspace,
            "shape": result.shape.value,
            "count": len(result.records),
        }

    @app.put("/api/records")
    async def replace_records(input: RecordsInput):
        """Replace the real records wholesale."""
        app.state.store.set_records(input.records, workspace=input.workspace)
        return {"success": True, "count": len(input.records)}

    @app.get("/api/records")
    async def get_records(start: Optional[float] = None, end: Optional[float] = None):
        """Records of the active source, optionally limited to a date range."""
        store = app.state.store
        if start is None and end is None:
            records = store.records
        else:
            records = store.filter_by_date_range(
                start if start is not None else 0,
                end if end is not None else time.time(),
            )
        return {
            "source": store.source.value,
            "workspace": store.workspace,
            "count": len(records),
            "emoji": [r.to_dict() for r in records],
        }

    @app.get("/api/stats")
    async def get_stats(now: Optional[int] = None):
        """Workspace-wide stats for the active source."""
        now = _now(now)
        stats = calculate_emoji_stats(app.state.store.records, now)
        return {"now": now, "stats": stats.to_dict()}

    @app.get("/api/leaderboard")
    async def get_leaderboard(
        now: Optional[int] = None,
        days: Optional[int] = None,
        active_days: Optional[int] = None,
    ):
        """
        Ranked leaderboard.

        ``days`` limits the emojis counted to the last N days; ``active_days``
        ranks only users who created an emoji in the last N days.
        """
        now = _now(now)
        store = app.state.store
        if days is not None:
            if days <= 0:
                raise HTTPException(status_code=400, detail="days must be positive")
            records = store.filter_by_date_range(now - days * DAY, now)
        else:
            records = store.records

        leaderboard = get_user_leaderboard(records, now)
        include = is_active(now, active_days) if active_days else None
        ranked = rank_leaderboard(leaderboard, include)
        return {"now": now, "count": len(ranked), "leaderboard": [row.to_dict() for row in ranked]}

    @app.post("/api/mode")
    async def set_mode(input: ModeInput):
        """Switch between demo and real data."""
        store = app.state.store
        if not input.demo and not store.has_real_data:
            raise HTTPException(status_code=409, detail="No real emoji data loaded")
        store.use_demo_data(input.demo)
        return {"success": True, "source": store.source.value}

    @app.post("/api/clear")
    async def clear_data():
        """Forget the real records and the saved session."""
        app.state.store.clear()
        if app.state.storage is not None:
            app.state.storage.clear()
        return {"success": True, "source": app.state.store.source.value}

    return app


def create_default_app() -> FastAPI:
    """App backed by the configured session file."""
    config = DashboardConfig()
    return create_app(storage=SessionStorage(config.storage_path, verbose=config.verbose))
