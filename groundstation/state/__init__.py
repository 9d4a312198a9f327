"""
Stream State

Everything the receiver publishes to collaborators.

Components:
- models: Published value types (ConnectionStatus, SignalLevel, samples)
- stream_state: Observable single-source-of-truth container
"""

from groundstation.state.models import (
    BatterySample,
    CentroidSample,
    Classification,
    ConnectionStatus,
    GpsSample,
    PressureSample,
    SignalLevel,
    VideoFrame,
    FRAME_WIDTH,
    FRAME_HEIGHT,
    FRAME_SIZE,
)
from groundstation.state.stream_state import StreamState, MAX_CLASSIFICATIONS

__all__ = [
    "BatterySample",
    "CentroidSample",
    "Classification",
    "ConnectionStatus",
    "GpsSample",
    "PressureSample",
    "SignalLevel",
    "VideoFrame",
    "FRAME_WIDTH",
    "FRAME_HEIGHT",
    "FRAME_SIZE",
    "StreamState",
    "MAX_CLASSIFICATIONS",
]
