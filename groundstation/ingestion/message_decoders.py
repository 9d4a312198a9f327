"""
Message Decoders

Pure functions from a frame payload to a typed value.

Payload formats (from the device firmware):
============================================

  VIDEO     (1)  153600 bytes, RGB565 little-endian words, 320x240 row-major
  CENTROID  (2)  "X:<num>,Y:<num>"       e.g. "X:120,Y:80"
  PRESSURE  (3)  "P:<num>"               e.g. "P:1009.8"   (hPa)
  GPS       (4)  "LAT:<num>,LON:<num>"   e.g. "LAT:12.345,LON:-78.910"
  BATTERY   (5)  "V:<num>"               e.g. "V:3.70"

Every decoder raises DecodeError on a malformed payload and never lets any
other exception escape, so one bad message can only cost its own update.
"""

import math
import time
from typing import Callable, Optional

import numpy as np

from groundstation.ingestion.models import MessageType
from groundstation.state.models import (
    FRAME_HEIGHT,
    FRAME_SIZE,
    FRAME_WIDTH,
    BatterySample,
    CentroidSample,
    GpsSample,
    PressureSample,
    VideoFrame,
)


class DecodeError(ValueError):
    """A payload did not match the format of its message type."""


def decode_video(payload: bytes, received_at: Optional[float] = None) -> VideoFrame:
    if len(payload) != FRAME_SIZE:
        raise DecodeError(
            f"Video payload is {len(payload)} bytes, expected {FRAME_SIZE}"
        )

    # "<u2" = little-endian unsigned 16-bit; copy so the frame owns its memory
    pixels = (
        np.frombuffer(payload, dtype="<u2")
        .reshape(FRAME_HEIGHT, FRAME_WIDTH)
        .astype(np.uint16)
    )

    return VideoFrame(
        pixels=pixels,
        received_at=time.monotonic() if received_at is None else received_at,
    )


def decode_centroid(payload: bytes) -> CentroidSample:
    x, y = _parse_fields(payload, ("X", "Y"))
    return CentroidSample(x=x, y=y)


def decode_pressure(payload: bytes) -> PressureSample:
    (pressure,) = _parse_fields(payload, ("P",))
    if pressure <= 0:
        raise DecodeError(f"Pressure must be positive, got {pressure}")
    return PressureSample(pressure=pressure)


def decode_gps(payload: bytes) -> GpsSample:
    latitude, longitude = _parse_fields(payload, ("LAT", "LON"))
    return GpsSample(latitude=latitude, longitude=longitude)


def decode_battery(payload: bytes) -> BatterySample:
    (voltage,) = _parse_fields(payload, ("V",))
    return BatterySample.from_voltage(voltage)


DECODERS: dict[MessageType, Callable[[bytes], object]] = {
    MessageType.VIDEO: decode_video,
    MessageType.CENTROID: decode_centroid,
    MessageType.PRESSURE: decode_pressure,
    MessageType.GPS: decode_gps,
    MessageType.BATTERY: decode_battery,
}


def _parse_fields(payload: bytes, keys: tuple[str, ...]) -> tuple[float, ...]:
    """
    Parse "K1:<num>,K2:<num>,..." with exactly the given keys, in order.

    Surrounding whitespace and trailing NUL padding (C strings from the
    firmware) are ignored. Numbers must be finite.
    """
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Payload is not UTF-8: {payload[:32]!r}") from e

    text = text.strip().rstrip("\x00").strip()
    parts = text.split(",")

    if len(parts) != len(keys):
        raise DecodeError(f"Expected {len(keys)} fields in {text!r}")

    values = []
    for part, key in zip(parts, keys):
        name, sep, raw = part.partition(":")
        if not sep or name.strip() != key:
            raise DecodeError(f"Expected '{key}:<num>' in {text!r}")
        try:
            value = float(raw.strip())
        except ValueError as e:
            raise DecodeError(f"Non-numeric value for {key} in {text!r}") from e
        if not math.isfinite(value):
            raise DecodeError(f"Non-finite value for {key} in {text!r}")
        values.append(value)

    return tuple(values)
