"""
Binary Protocol Encoder for Mock Device TCP Streaming

Encodes video frames and telemetry into marker-delimited wire frames.

Frame Structure:
    - START_MARKER: 3 bytes (0xAABBCC, big-endian)
    - type: 1 byte (unsigned char, ProtocolConfig.TYPE_*)
    - length: 4 bytes (unsigned int, little-endian)
    - payload: [length] bytes
    - END_MARKER: 3 bytes (0xDDEEFF, big-endian)

Telemetry payloads are ASCII text:
    centroid  "X:<num>,Y:<num>"
    pressure  "P:<num>"
    gps       "LAT:<num>,LON:<num>"
    battery   "V:<num>"

Functions:
    pack_message(message_type, payload)
        - Wrap a payload in markers and header

    pack_video(frame)
        - Convert a BGR image to RGB565 and wrap it as a video frame

    pack_centroid / pack_pressure / pack_gps / pack_battery
        - Format and wrap one telemetry reading
"""

import struct

import cv2
import numpy as np

from mock_device_streamer.config import ProtocolConfig

HEADER_FORMAT = "<BI"  # type, length (little-endian)


def pack_message(message_type, payload):
    """
    Wrap a payload into a single wire frame.

    Args:
        message_type: Type byte (0-255)
        payload: bytes (or str, encoded as UTF-8)

    Returns:
        bytes: Frame ready for TCP transmission

    Raises:
        ValueError: If the type does not fit a byte
    """
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    if not 0 <= message_type <= 0xFF:
        raise ValueError(f"message_type must fit in one byte, got {message_type}")

    return (
        ProtocolConfig.START_MARKER.to_bytes(3, "big")
        + struct.pack(HEADER_FORMAT, message_type, len(payload))
        + payload
        + ProtocolConfig.END_MARKER.to_bytes(3, "big")
    )


def encode_rgb565(frame):
    """
    Convert a BGR image to the device's raw RGB565 byte layout.

    Args:
        frame: numpy array BGR image (240x320x3)

    Returns:
        bytes: FRAME_SIZE bytes, little-endian 16-bit words
    """
    expected = (ProtocolConfig.FRAME_HEIGHT, ProtocolConfig.FRAME_WIDTH, 3)
    if frame is None or frame.shape != expected:
        raise ValueError(f"frame must be {expected}, got {None if frame is None else frame.shape}")

    packed = cv2.cvtColor(frame, cv2.COLOR_BGR2BGR565)  # (H, W, 2) uint8
    return np.ascontiguousarray(packed).tobytes()


def pack_video(frame):
    return pack_message(ProtocolConfig.TYPE_VIDEO, encode_rgb565(frame))


def pack_centroid(x, y):
    return pack_message(ProtocolConfig.TYPE_CENTROID, f"X:{x:.0f},Y:{y:.0f}")


def pack_pressure(pressure):
    return pack_message(ProtocolConfig.TYPE_PRESSURE, f"P:{pressure:.2f}")


def pack_gps(latitude, longitude):
    return pack_message(ProtocolConfig.TYPE_GPS, f"LAT:{latitude:.6f},LON:{longitude:.6f}")


def pack_battery(voltage):
    return pack_message(ProtocolConfig.TYPE_BATTERY, f"V:{voltage:.2f}")
