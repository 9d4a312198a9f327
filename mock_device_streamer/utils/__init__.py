"""
Mock Device Streamer Utilities Package

This package contains utility modules for the device streaming service:
- frame_generator: Synthetic camera frames
- protocol_encoder: Encode frames and telemetry into wire frames
"""

from .frame_generator import generate_frame, block_center
from .protocol_encoder import (
    pack_message,
    encode_rgb565,
    pack_video,
    pack_centroid,
    pack_pressure,
    pack_gps,
    pack_battery,
)

__all__ = [
    'generate_frame',
    'block_center',
    'pack_message',
    'encode_rgb565',
    'pack_video',
    'pack_centroid',
    'pack_pressure',
    'pack_gps',
    'pack_battery',
]
