"""
Ground Station

Wires the receiver together and exposes the collaborator surface:
read-only StreamState plus start() and stop().
"""

import logging
from typing import Optional

from groundstation.config import settings
from groundstation.detection.processing_gate import Classifier, ProcessingGate
from groundstation.ingestion.stream_reader import StreamReader
from groundstation.link.rssi import WirelessRssiReader
from groundstation.link.sampler import RssiReader, SignalSampler
from groundstation.state.models import ConnectionStatus
from groundstation.state.stream_state import StreamState


logger = logging.getLogger(__name__)


def load_default_classifier() -> Optional[Classifier]:
    """
    Load the YOLO classifier from the configured weights.

    Returns None when the model cannot be loaded; the station then runs
    without classification.
    """
    try:
        from groundstation.detection.yolo_detector import YOLODetector

        return YOLODetector().detect
    except Exception as e:
        logger.error("Error setting up classifier: %s", e)
        return None


class GroundStation:
    def __init__(
        self,
        classifier: Optional[Classifier] = None,
        rssi_reader: Optional[RssiReader] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        read_timeout: Optional[float] = None,
        state: Optional[StreamState] = None,
    ):
        self.state = state or StreamState()
        self.gate = ProcessingGate(classifier, self.state)
        self.sampler = SignalSampler(
            rssi_reader or WirelessRssiReader(settings.signal.interface), self.state
        )
        self.reader = StreamReader(
            self.state,
            self.gate,
            self.sampler,
            host=host,
            port=port,
            read_timeout=read_timeout,
        )

    @property
    def status(self) -> ConnectionStatus:
        return self.state.status

    def start(self) -> bool:
        return self.reader.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self.reader.stop(timeout=timeout)

    def close(self) -> None:
        """Stop streaming and release the classification worker."""
        self.reader.stop(timeout=settings.network.stop_join_timeout)
        self.gate.shutdown(wait=False)
