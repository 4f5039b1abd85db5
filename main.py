"""
Backend entry point.

Serves the calendar export API: single-event .ics downloads and tokenised
subscription feeds (ICS and Google Calendar JSON).

Run with: python main.py [--port PORT]
"""

import logging
import sys
from pathlib import Path

# Set up import paths before any local imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")  # Local overrides (gitignored)
load_dotenv()  # Fallback to .env

import sentry_sdk
from fastapi import FastAPI

from better_together.config import (
    check_required_env_vars,
    get_api_port,
    get_sentry_dsn,
    is_dev_mode,
)
from web_api.routes.calendar import router as calendar_router

logging.basicConfig(
    level=logging.DEBUG if is_dev_mode() else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if get_sentry_dsn():
    sentry_sdk.init(dsn=get_sentry_dsn(), send_default_pii=False)
    logger.info("Sentry error reporting enabled")

_, _warnings = check_required_env_vars()
for warning in _warnings:
    logger.warning(warning)

app = FastAPI(title="Better Together Calendar API")

# Include routers
app.include_router(calendar_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Better Together Calendar Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: API_PORT or 8000)",
    )
    args = parser.parse_args()

    # Pass app object directly (not string) to avoid module reimport issues
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
