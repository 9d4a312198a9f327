"""
Status and control routes
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status

from groundstation.api.schemas import ControlResponse, StatusResponse
from groundstation.config import settings
from groundstation.state.models import ConnectionStatus
from groundstation.station import GroundStation

router = APIRouter()


def get_station(request: Request) -> GroundStation:
    return request.app.state.station


@router.get("/", tags=["System"])
def root():
    """Root endpoint - basic info"""
    return {
        "service": "Ground Station Receiver",
        "device": f"{settings.network.host}:{settings.network.port}",
        "endpoints": {
            "health": "/health",
            "status": "/status",
            "start": "/stream/start",
            "stop": "/stream/stop",
            "docs": "/docs",
        },
    }


@router.get("/health", tags=["System"])
def health_check(request: Request, response: Response):
    """
    Liveness check. Reports 503 while the device link is in ERROR.
    """
    connection = get_station(request).status

    health_status = {
        "status": "healthy",
        "service": "groundstation",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "connection": connection.value,
    }

    if connection is ConnectionStatus.ERROR:
        health_status["status"] = "degraded"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return health_status


@router.get("/status", response_model=StatusResponse, tags=["Stream"])
def stream_status(request: Request):
    """Latest value of every published field"""
    return get_station(request).state.snapshot()


@router.post("/stream/start", response_model=ControlResponse, tags=["Stream"])
def start_stream(request: Request):
    """Begin connecting to the device (no-op if already connecting or connected)"""
    station = get_station(request)
    accepted = station.start()
    return {"accepted": accepted, "status": station.status.value}


@router.post("/stream/stop", response_model=ControlResponse, tags=["Stream"])
def stop_stream(request: Request):
    """Request a graceful disconnect (returns before teardown completes)"""
    station = get_station(request)
    accepted = station.status in (ConnectionStatus.CONNECTING, ConnectionStatus.CONNECTED)
    station.stop()
    return {"accepted": accepted, "status": station.status.value}
