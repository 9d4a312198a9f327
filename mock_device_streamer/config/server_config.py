"""
Server Configuration

Network and timing settings for the mock device.
"""


class ServerConfig:
    """Server configuration constants"""

    # Same endpoint as the real device access point, but bound locally
    HOST = "0.0.0.0"
    PORT = 8888

    # Video frames per second (the ESP32 camera streams ~10 FPS raw QVGA)
    FPS = 10
    FRAME_INTERVAL = 1.0 / FPS

    # Telemetry messages (centroid, pressure, GPS, battery) per second
    TELEMETRY_RATE = 1.0

    # Garbage bytes injected between frames (0 = clean stream)
    GARBAGE_BYTES = 0

    # Log progress every N video frames
    PROGRESS_LOG_INTERVAL = 50
