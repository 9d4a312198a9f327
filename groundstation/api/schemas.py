"""
Pydantic schemas for API responses
These mirror StreamState.snapshot() - they are NOT the state models themselves
"""
from typing import Optional

from pydantic import BaseModel, Field


class VideoInfo(BaseModel):
    width: int
    height: int
    received_at: float = Field(..., description="Monotonic time the frame was decoded")


class CentroidInfo(BaseModel):
    x: float
    y: float


class PressureInfo(BaseModel):
    pressure: float = Field(..., description="Pressure in hPa")
    altitude: float = Field(..., description="Barometric altitude in meters")


class GpsInfo(BaseModel):
    latitude: float
    longitude: float


class BatteryInfo(BaseModel):
    voltage: float
    percentage: int


class ClassificationInfo(BaseModel):
    label: str
    score: float


class StatusResponse(BaseModel):
    """
    Schema for the full receiver status
    """
    status: str
    signal: str
    video: Optional[VideoInfo] = None
    centroid: Optional[CentroidInfo] = None
    pressure: PressureInfo
    gps: GpsInfo
    battery: BatteryInfo
    classifications: list[ClassificationInfo]

    class Config:
        json_schema_extra = {
            "example": {
                "status": "connected",
                "signal": "good",
                "video": {"width": 320, "height": 240, "received_at": 1234.5},
                "centroid": {"x": 120.0, "y": 80.0},
                "pressure": {"pressure": 1009.8, "altitude": 29.0},
                "gps": {"latitude": 12.345, "longitude": -78.91},
                "battery": {"voltage": 3.7, "percentage": 50},
                "classifications": [{"label": "person", "score": 0.87}],
            }
        }


class ControlResponse(BaseModel):
    """
    Schema for start/stop responses
    """
    accepted: bool = Field(..., description="Whether the request changed anything")
    status: str
