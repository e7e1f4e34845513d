from datetime import timedelta
from typing import Annotated
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from iptv_proxy.config import CustomSettings
from iptv_proxy.dependencies import get_orchestrator, get_scheduler, get_settings
from iptv_proxy.schemas import RefreshResponse, StatusResponse
from iptv_proxy.services.scheduler_service import UpdateScheduler
from iptv_proxy.services.snapshot_store import SnapshotStore, get_snapshot_store
from iptv_proxy.services.update_service import UpdateOrchestrator


logger = logging.getLogger(__name__)

main_router = APIRouter()

PLAYLIST_MEDIA_TYPE = "application/vnd.apple.mpegurl"
GUIDE_MEDIA_TYPE = "application/xml"
INITIALIZING_MESSAGE = "Service initializing, please wait..."


@main_router.get("/")
async def root(
    store: Annotated[SnapshotStore, Depends(get_snapshot_store)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> dict:
    """Root endpoint with service information"""
    snapshot = store.current

    return {
        "service": "IPTV Proxy",
        "version": "0.1.0",
        "last_update": snapshot.last_update.isoformat() if snapshot.last_update else None,
        "channels_count": len(snapshot.channels),
        "port": config.port,
        "endpoints": {
            "playlist": "/playlist.m3u8 - M3U8 playlist",
            "epg": "/epg.xml - XMLTV program guide",
            "status": "/status - Update status",
            "refresh": "/refresh - Manually trigger an update (POST)",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check(
    scheduler: Annotated[UpdateScheduler, Depends(get_scheduler)],
) -> dict:
    """Health check endpoint"""
    next_run = scheduler.get_next_run_time()
    return {
        "status": "ok",
        "scheduler_running": scheduler.running,
        "next_update": next_run.isoformat() if next_run else None
    }


@main_router.get("/playlist.m3u8")
async def playlist(
    request: Request,
    store: Annotated[SnapshotStore, Depends(get_snapshot_store)],
) -> Response:
    """Serve the last published M3U8 playlist"""
    logger.info("M3U8 playlist requested from %s", request.client.host if request.client else "unknown")
    snapshot = store.current
    if not snapshot.playlist_text:
        return Response(INITIALIZING_MESSAGE, status_code=503, media_type="text/plain")

    return Response(
        snapshot.playlist_text,
        media_type=PLAYLIST_MEDIA_TYPE,
        headers={"Content-Disposition": 'inline; filename="playlist.m3u8"'},
    )


@main_router.get("/epg.xml")
async def guide(
    request: Request,
    store: Annotated[SnapshotStore, Depends(get_snapshot_store)],
) -> Response:
    """Serve the last published XMLTV guide"""
    logger.info("EPG requested from %s", request.client.host if request.client else "unknown")
    snapshot = store.current
    if not snapshot.guide_text:
        return Response(INITIALIZING_MESSAGE, status_code=503, media_type="text/plain")

    return Response(
        snapshot.guide_text,
        media_type=GUIDE_MEDIA_TYPE,
        headers={"Content-Disposition": 'inline; filename="epg.xml"'},
    )


@main_router.get("/status", response_model=StatusResponse)
async def status(
    store: Annotated[SnapshotStore, Depends(get_snapshot_store)],
    orchestrator: Annotated[UpdateOrchestrator, Depends(get_orchestrator)],
    scheduler: Annotated[UpdateScheduler, Depends(get_scheduler)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> StatusResponse:
    """Update status: last/next update, channel count and configuration"""
    snapshot = store.current
    next_update = (
        snapshot.last_update + timedelta(minutes=config.update_interval)
        if snapshot.last_update else None
    )
    next_run = scheduler.get_next_run_time()

    return StatusResponse(
        status="running",
        last_update=snapshot.last_update.isoformat() if snapshot.last_update else None,
        next_update=next_update.isoformat() if next_update else None,
        next_scheduled_update=next_run.isoformat() if next_run else None,
        updating=orchestrator.is_updating(),
        channels_count=len(snapshot.channels),
        update_interval_minutes=config.update_interval,
        epg_hours=config.epg_hours,
    )


@main_router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    request: Request,
    orchestrator: Annotated[UpdateOrchestrator, Depends(get_orchestrator)],
):
    """
    Manually trigger a catalog update

    Returns 200 with the new last_update on success, 429 if an update is
    already running and 500 if the update failed.
    """
    logger.info("Manual refresh requested from %s", request.client.host if request.client else "unknown")
    outcome = await orchestrator.run_update()

    if outcome.status == "busy":
        return JSONResponse(
            status_code=429,
            content=RefreshResponse(
                status="busy",
                message="Update already in progress, please wait for it to complete",
            ).model_dump(),
        )

    if outcome.status == "failed":
        return JSONResponse(
            status_code=500,
            content=RefreshResponse(
                status="failed",
                message=outcome.error or "Update failed",
            ).model_dump(),
        )

    return RefreshResponse(
        status="success",
        message="Data updated successfully",
        last_update=outcome.last_update.isoformat() if outcome.last_update else None,
        channels_count=outcome.channels_count,
    )
