"""
FastAPI Server for runlens

Read-only JSON views of the training-run analytics for the dashboard UI.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from analytics.dashboard import Dashboard
from cloud.supabase_store import SupabaseStore
from core.config import Config, get_config
from core.errors import FetchError, SnapshotUnavailable
from daemon.refresher import SnapshotRefresher

logger = logging.getLogger("runlens.api")

# Global instances
config: Optional[Config] = None
refresher: Optional[SnapshotRefresher] = None
server_started_at: Optional[datetime] = None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_refresher() -> SnapshotRefresher:
    if refresher is None:
        raise HTTPException(status_code=503, detail="Snapshot refresher is not running")
    return refresher


def _dashboard(limit: Optional[int] = None) -> Dashboard:
    if limit is not None and limit < 0:
        raise HTTPException(status_code=422, detail="limit must be >= 0")
    try:
        return _require_refresher().dashboard(limit)
    except SnapshotUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    global config, refresher, server_started_at

    # Startup
    logger.info("Starting runlens API...")
    config = get_config()
    store = SupabaseStore.from_config(config)
    refresher = SnapshotRefresher.from_config(store, config)
    if config.api.refresh_on_startup:
        refresher.start()
    server_started_at = datetime.now(timezone.utc)
    logger.info("runlens API started")

    yield

    # Shutdown
    if refresher is not None:
        refresher.stop()
    refresher = None
    server_started_at = None

    logger.info("Shutting down runlens API...")


app = FastAPI(
    title="runlens API",
    description="Training-run analytics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ==================== REST Endpoints ====================

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "timestamp": utc_now_iso()}


@app.get("/api/status")
async def get_status():
    """Refresher state: last fetch, last error, counts"""
    status = _require_refresher().status()
    status["server_started_at"] = server_started_at.isoformat() if server_started_at else None
    return status


@app.post("/api/refresh")
async def refresh_snapshot():
    """Fetch a new snapshot now"""
    active = _require_refresher()
    try:
        snapshot = await active.refresh_async()
    except FetchError as e:
        logger.error(f"Manual refresh failed: {e}")
        raise HTTPException(status_code=503, detail=f"Store fetch failed: {e}")
    return {
        "status": "ok",
        "records": len(snapshot.records),
        "weekly_rows": len(snapshot.weekly),
        "fetched_at": snapshot.fetched_at.isoformat(),
    }


@app.get("/api/dashboard")
async def get_dashboard(limit: Optional[int] = None):
    """All derived views in one payload"""
    payload = _dashboard(limit).to_dict()
    payload["generatedAt"] = utc_now_iso()
    return payload


@app.get("/api/runs/best")
async def get_best_runs(limit: Optional[int] = None):
    view = _dashboard(limit)
    return [run.to_dict() for run in view.best_runs]


@app.get("/api/runs/errors")
async def get_error_summary():
    return _dashboard().errors.to_dict()


@app.get("/api/weekly")
async def get_weekly_progression():
    return _dashboard().weekly.to_dict()


@app.get("/api/configuration")
async def get_configuration_summary():
    return _dashboard().configuration.to_dict()


@app.get("/api/synthesis")
async def get_synthesis():
    view = _dashboard()
    payload = view.synthesis.to_dict()
    payload["assistants"] = [a.to_dict() for a in view.assistants]
    return payload


def run_server(host: str = "127.0.0.1", port: int = 8430):
    import uvicorn

    uvicorn.run(app, host=host, port=port)
