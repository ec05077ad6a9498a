#!/usr/bin/env python
"""
Run the API Server

Starts the FastAPI server for Slack emoji stats.

Usage:
    python run_server.py

The server runs on http://127.0.0.1:8000 unless SLACK_EMOJI_API_HOST or
SLACK_EMOJI_API_PORT say otherwise.

Endpoints:
    GET  /api/health       - Health check
    POST /api/parse        - Parse a curl command (secrets masked)
    POST /api/normalize    - Canonical emoji.adminList curl command
    POST /api/request      - Request descriptor for the dispatch layer
    POST /api/ingest       - Load a Slack emoji response
    PUT  /api/records      - Replace records
    GET  /api/records      - Records, optionally date filtered
    GET  /api/stats        - Workspace stats
    GET  /api/leaderboard  - Ranked creators
    POST /api/mode         - Switch demo / real data
    POST /api/clear        - Forget records and the saved session
"""

import uvicorn

from slack_emoji_stats.config_manager import DashboardConfig

config = DashboardConfig()
uvicorn.run(
    "slack_emoji_stats.server:create_default_app",
    factory=True,
    host=config.server_host,
    port=config.server_port,
    reload=False,
)
