from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from iptv_proxy.config import setup_logging
from iptv_proxy.dependencies import get_orchestrator, get_scheduler

from iptv_proxy.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("="*60)
    logger.info("Starting IPTV Proxy...")
    logger.info("="*60)

    try:
        # Initial update; a failure leaves the service up with an empty snapshot
        logger.info("Running initial update...")
        outcome = await get_orchestrator().run_update()
        if outcome.status == "success":
            logger.info("Initial update completed: %s channels", outcome.channels_count)
        else:
            logger.error("Initial update failed: %s", outcome.error)

        logger.info("Starting scheduler...")
        get_scheduler().start()
        logger.info("Scheduler started successfully")

        logger.info("="*60)
        logger.info("IPTV Proxy started successfully")
        logger.info("="*60)
    except Exception as e:
        logger.error("="*60)
        logger.error(f"Failed to start IPTV Proxy: {e}", exc_info=True)
        logger.error("="*60)
        raise

    yield

    logger.info("="*60)
    logger.info("Shutting down IPTV Proxy...")
    logger.info("="*60)

    try:
        get_scheduler().shutdown()
        logger.info("Scheduler stopped")
    except Exception as e:
        logger.error(f"Error during scheduler shutdown: {e}", exc_info=True)

    logger.info("="*60)
    logger.info("IPTV Proxy stopped")
    logger.info("="*60)


app = FastAPI(
    title="IPTV Proxy",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(main_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors; the published snapshot keeps being served"""
    logger.error(f"Unhandled error for {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
