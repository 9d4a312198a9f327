"""
Protocol Configuration

Binary protocol constants for TCP frame encoding.
These constants are used by protocol_encoder.py and must match
the receiver's frame_codec expectations.
"""


class ProtocolConfig:
    """Protocol configuration constants"""

    # Frame markers (3 bytes each, big-endian on the wire)
    START_MARKER = 0xAABBCC
    END_MARKER = 0xDDEEFF

    # Message type codes
    TYPE_VIDEO = 1
    TYPE_CENTROID = 2
    TYPE_PRESSURE = 3
    TYPE_GPS = 4
    TYPE_BATTERY = 5

    # Camera frame geometry (QVGA, RGB565)
    FRAME_WIDTH = 320
    FRAME_HEIGHT = 240
    FRAME_SIZE = FRAME_WIDTH * FRAME_HEIGHT * 2  # 153600 bytes

    # Largest LENGTH the receiver accepts
    MAX_PAYLOAD_SIZE = 200_000
