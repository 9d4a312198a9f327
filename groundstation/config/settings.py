import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class NetworkConfig:
    """Network configuration for the device stream."""

    host: str = os.getenv("GS_DEVICE_HOST", "192.168.4.1")  # Device access point
    port: int = int(os.getenv("GS_DEVICE_PORT", "8888"))
    read_timeout: float = float(os.getenv("GS_READ_TIMEOUT", "5.0"))  # Inactivity bound (seconds)
    stop_join_timeout: float = 6.0  # How long stop() waits for the reader thread


@dataclass
class GateConfig:
    """Classification throttling configuration."""

    min_interval: float = 0.25  # Minimum seconds between classifier invocations


@dataclass
class SignalConfig:
    """Link quality sampling configuration."""

    interval: float = 2.0  # Seconds between RSSI samples
    interface: str = os.getenv("GS_WIFI_INTERFACE", "")  # Empty = first wireless interface


@dataclass
class DetectionConfig:
    """Classifier configuration."""

    weights_file: str = os.getenv("GS_WEIGHTS_FILE", "detect.pt")  # YOLO weights filename (in weights/)
    conf_threshold: float = 0.5  # Minimum score kept
    max_results: int = 5  # Results kept per frame
    imgsz: int = 320  # Matches the device frame width
    device: str = os.getenv("GS_DETECTION_DEVICE", "cpu")  # "cuda" or "cpu"


@dataclass
class ApiConfig:
    """HTTP status API configuration."""

    host: str = os.getenv("GS_API_HOST", "0.0.0.0")
    port: int = int(os.getenv("GS_API_PORT", "8080"))
    cors_origins: list = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )


class Settings:
    """
    Root settings container with Singleton Pattern.

    Sub-configurations:
    - network: device connection settings
    - gate: classification throttling
    - signal: RSSI sampling
    - detection: YOLO classifier settings
    - api: HTTP status API
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if Settings._initialized:
            return

        self.network = NetworkConfig()
        self.gate = GateConfig()
        self.signal = SignalConfig()
        self.detection = DetectionConfig()
        self.api = ApiConfig()

        Settings._initialized = True

    @property
    def base_dir(self) -> Path:
        """Base directory of the groundstation package."""
        return Path(__file__).parent.parent

    @property
    def weights_dir(self) -> Path:
        return self.base_dir / "weights"

    @property
    def weights_path(self) -> Path:
        """Get full path to YOLO weights file."""
        return self.weights_dir / self.detection.weights_file


# Every module imports this same object
settings = Settings()


if __name__ == "__main__":
    import logging

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s | %(levelname)-7s | %(message)s"
    )
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Ground Station Configuration")
    logger.info("=" * 60)
    logger.info("Device: %s:%d (read timeout %.1fs)", settings.network.host,
                settings.network.port, settings.network.read_timeout)
    logger.info("Gate interval: %.3fs", settings.gate.min_interval)
    logger.info("Signal interval: %.1fs", settings.signal.interval)
    logger.info("Weights path: %s (exists=%s)", settings.weights_path,
                settings.weights_path.exists())
    logger.info("API: %s:%d", settings.api.host, settings.api.port)
