"""
Ingestion Stage

Receives the device byte stream and turns it into published state.

Components:
- models: Frame outcomes and the MessageType set
- frame_codec: Marker-anchored framing and resynchronization
- message_decoders: Payload -> typed value, one decoder per MessageType
- stream_reader: TCP connection lifecycle and dispatch

Usage:
    from groundstation.ingestion import FrameCodec, Frame
    from groundstation.ingestion import StreamReader
"""

from groundstation.ingestion.models import (
    DecodeOutcome,
    EndOfStream,
    Frame,
    MessageType,
    Resync,
)

from groundstation.ingestion.frame_codec import (
    FrameCodec,
    START_MARKER,
    END_MARKER,
    MAX_PAYLOAD_SIZE,
)

from groundstation.ingestion.message_decoders import (
    DECODERS,
    DecodeError,
    decode_video,
    decode_centroid,
    decode_pressure,
    decode_gps,
    decode_battery,
)

from groundstation.ingestion.stream_reader import StreamReader

__all__ = [
    # Models
    "DecodeOutcome",
    "EndOfStream",
    "Frame",
    "MessageType",
    "Resync",
    # Codec
    "FrameCodec",
    "START_MARKER",
    "END_MARKER",
    "MAX_PAYLOAD_SIZE",
    # Decoders
    "DECODERS",
    "DecodeError",
    "decode_video",
    "decode_centroid",
    "decode_pressure",
    "decode_gps",
    "decode_battery",
    # Reader
    "StreamReader",
]
