"""
Stream State Data Models

Defines the values published by the receiver and read by collaborators.

Key Types:
- ConnectionStatus: Lifecycle of one connection attempt
- SignalLevel: Coarse link quality derived from RSSI
- VideoFrame: One decoded RGB565 raster from the device camera
- CentroidSample, PressureSample, GpsSample, BatterySample: Telemetry readings
- Classification: One (label, score) pair from the classifier
"""

from dataclasses import dataclass
from enum import Enum

import cv2
import numpy as np

FRAME_WIDTH = 320
FRAME_HEIGHT = 240
BYTES_PER_PIXEL = 2  # RGB565
FRAME_SIZE = FRAME_WIDTH * FRAME_HEIGHT * BYTES_PER_PIXEL  # = 153600 bytes

# Standard atmosphere at sea level (hPa)
PRESSURE_STANDARD_ATMOSPHERE = 1013.25

BATTERY_EMPTY_VOLTAGE = 3.2
BATTERY_FULL_VOLTAGE = 4.2


class ConnectionStatus(Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class SignalLevel(Enum):
    NONE = "none"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass(frozen=True)
class VideoFrame:
    """
    A single camera frame received from the device.

    Attributes:
        pixels: Packed RGB565 words, shape (240, 320), dtype uint16.
                Red in the high 5 bits, blue in the low 5 bits.
        received_at: Monotonic time the frame was decoded (seconds)
    """

    pixels: np.ndarray
    received_at: float = 0.0

    def __post_init__(self):
        assert self.pixels.shape == (
            FRAME_HEIGHT,
            FRAME_WIDTH,
        ), f"pixels must be {FRAME_HEIGHT}x{FRAME_WIDTH}, got {self.pixels.shape}"
        assert self.pixels.dtype == np.uint16, f"pixels must be uint16, got {self.pixels.dtype}"

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def to_bgr(self) -> np.ndarray:
        """
        Expand the packed raster to an 8-bit BGR image.

        OpenCV reads a 2-channel uint8 image as little-endian 565 words,
        which is exactly the byte order the device sends.

        Returns:
            (240, 320, 3) uint8 BGR image
        """
        packed = self.pixels.astype("<u2").view(np.uint8).reshape(
            self.height, self.width, BYTES_PER_PIXEL
        )
        return cv2.cvtColor(packed, cv2.COLOR_BGR5652BGR)


@dataclass(frozen=True)
class CentroidSample:
    x: float
    y: float


@dataclass(frozen=True)
class PressureSample:
    pressure: float = 0.0  # hPa

    @property
    def derived_altitude(self) -> float:
        """
        Altitude in meters from the standard barometric formula.

            h = 44330 * (1 - (p / p0) ^ (1 / 5.255))

        where p0 is the standard sea-level pressure. Never stored, always
        recomputed from the pressure reading.
        """
        return 44330.0 * (
            1.0 - (self.pressure / PRESSURE_STANDARD_ATMOSPHERE) ** (1.0 / 5.255)
        )


@dataclass(frozen=True)
class GpsSample:
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class BatterySample:
    voltage: float = 0.0
    percentage: int = 0

    @classmethod
    def from_voltage(cls, voltage: float) -> "BatterySample":
        """Linear charge estimate between the empty and full cell voltages."""
        fraction = (voltage - BATTERY_EMPTY_VOLTAGE) / (
            BATTERY_FULL_VOLTAGE - BATTERY_EMPTY_VOLTAGE
        )
        percentage = max(0, min(100, int(round(fraction * 100))))
        return cls(voltage=voltage, percentage=percentage)


@dataclass(frozen=True)
class Classification:
    label: str
    score: float

    def __repr__(self) -> str:
        return f"Classification({self.label!r}, {self.score:.2f})"
