"""
Ground station HTTP API
Read-only observation of the receiver plus start/stop control
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from groundstation.api.routes import router
from groundstation.config import settings
from groundstation.station import GroundStation, load_default_classifier

logger = logging.getLogger(__name__)


def create_app(station: Optional[GroundStation] = None, autostart: bool = False) -> FastAPI:
    """
    Build the API around a station.

    Args:
        station: Station to expose; one with the default classifier is built if omitted
        autostart: Start streaming when the application starts
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # STARTUP
        logger.info("=" * 60)
        logger.info("STARTING GROUND STATION API")
        logger.info("=" * 60)

        if app.state.station is None:
            app.state.station = GroundStation(classifier=load_default_classifier())

        if autostart:
            app.state.station.start()

        logger.info("SERVICE READY - device %s:%d", settings.network.host, settings.network.port)

        yield

        # SHUTDOWN
        logger.info("Shutting down ground station API...")
        app.state.station.close()
        logger.info("Device stream closed")

    app = FastAPI(
        title="Ground Station Receiver",
        description="Telemetry and video receiver status API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.station = station

    # CORS - Allow a dashboard to poll the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app
