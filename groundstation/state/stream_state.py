"""
Stream State

Single source of truth for everything the receiver publishes.

Writers:
- StreamReader: connection status, video frame, telemetry samples
- ProcessingGate: classifications
- SignalSampler: signal level

Each field has exactly one writer at a time. Readers may observe any
published value but must not assume two fields read together are from
the same instant.
"""

import logging
import threading
from typing import Any, Callable, Optional

from groundstation.state.models import (
    BatterySample,
    CentroidSample,
    Classification,
    ConnectionStatus,
    GpsSample,
    PressureSample,
    SignalLevel,
    VideoFrame,
)


logger = logging.getLogger(__name__)

MAX_CLASSIFICATIONS = 5

Listener = Callable[[str, Any], None]


class StreamState:
    """
    Observable container for the latest value of every message kind.

    Writes go through set_* methods which publish to listeners after the
    value is stored. Listeners run on the writer's thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []

        self._status = ConnectionStatus.DISCONNECTED
        self._video_frame: Optional[VideoFrame] = None
        self._centroid: Optional[CentroidSample] = None
        self._pressure = PressureSample()
        self._gps = GpsSample()
        self._battery = BatterySample()
        self._classifications: tuple[Classification, ...] = ()
        self._signal = SignalLevel.NONE

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def video_frame(self) -> Optional[VideoFrame]:
        return self._video_frame

    @property
    def centroid(self) -> Optional[CentroidSample]:
        return self._centroid

    @property
    def pressure(self) -> PressureSample:
        return self._pressure

    @property
    def gps(self) -> GpsSample:
        return self._gps

    @property
    def battery(self) -> BatterySample:
        return self._battery

    @property
    def classifications(self) -> tuple[Classification, ...]:
        return self._classifications

    @property
    def signal(self) -> SignalLevel:
        return self._signal

    def snapshot(self) -> dict:
        """Plain-data view of every field (video pixels omitted)."""
        video = self._video_frame
        centroid = self._centroid
        pressure = self._pressure

        return {
            "status": self._status.value,
            "signal": self._signal.value,
            "video": None
            if video is None
            else {
                "width": video.width,
                "height": video.height,
                "received_at": video.received_at,
            },
            "centroid": None if centroid is None else {"x": centroid.x, "y": centroid.y},
            "pressure": {
                "pressure": pressure.pressure,
                "altitude": pressure.derived_altitude,
            },
            "gps": {"latitude": self._gps.latitude, "longitude": self._gps.longitude},
            "battery": {
                "voltage": self._battery.voltage,
                "percentage": self._battery.percentage,
            },
            "classifications": [
                {"label": c.label, "score": c.score} for c in self._classifications
            ],
        }

    # -------------------------------------------------------------------------
    # Writers
    # -------------------------------------------------------------------------

    def set_status(self, status: ConnectionStatus) -> None:
        previous = self._status
        self._status = status
        if previous is not status:
            logger.info("Connection status: %s -> %s", previous.value, status.value)
        self._publish("status", status)

    def set_video_frame(self, frame: VideoFrame) -> None:
        self._video_frame = frame
        self._publish("video_frame", frame)

    def set_centroid(self, centroid: Optional[CentroidSample]) -> None:
        self._centroid = centroid
        self._publish("centroid", centroid)

    def set_pressure(self, pressure: PressureSample) -> None:
        self._pressure = pressure
        self._publish("pressure", pressure)

    def set_gps(self, gps: GpsSample) -> None:
        self._gps = gps
        self._publish("gps", gps)

    def set_battery(self, battery: BatterySample) -> None:
        self._battery = battery
        self._publish("battery", battery)

    def set_classifications(self, results) -> None:
        """Replace the previous results wholesale (never merged)."""
        self._classifications = tuple(results)[:MAX_CLASSIFICATIONS]
        self._publish("classifications", self._classifications)

    def set_signal(self, level: SignalLevel) -> None:
        self._signal = level
        self._publish("signal", level)

    def reset_telemetry(self) -> None:
        """
        Clear the transient telemetry after a connection ends.

        The video frame and classifications are left as they are.
        """
        self.set_centroid(None)
        self.set_gps(GpsSample())
        self.set_pressure(PressureSample())
        self.set_battery(BatterySample())

    def _publish(self, field_name: str, value: Any) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(field_name, value)
            except Exception as e:
                logger.error("State listener failed on %s: %s", field_name, e, exc_info=True)
