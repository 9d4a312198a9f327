"""
Signal Sampler

Periodically classifies link quality while a connection attempt is live.

Thresholds (dBm):
    rssi >= -55  -> EXCELLENT
    rssi >= -67  -> GOOD
    rssi >= -80  -> FAIR
    otherwise    -> POOR

A missing reading counts as -100 (POOR). Stopping resets the level to NONE.
"""

import logging
import threading
from typing import Callable, Optional

from groundstation.config import settings
from groundstation.state.models import SignalLevel
from groundstation.state.stream_state import StreamState


logger = logging.getLogger(__name__)

MISSING_RSSI = -100

RssiReader = Callable[[], Optional[int]]


def classify_rssi(rssi: Optional[int]) -> SignalLevel:
    if rssi is None:
        rssi = MISSING_RSSI

    if rssi >= -55:
        return SignalLevel.EXCELLENT
    if rssi >= -67:
        return SignalLevel.GOOD
    if rssi >= -80:
        return SignalLevel.FAIR
    return SignalLevel.POOR


class SignalSampler:
    """
    Background task writing SignalLevel to StreamState every `interval` seconds.

    Threading:
        - start() spawns a daemon thread that samples immediately, then on cadence
        - stop() signals the thread, waits for it, then publishes NONE
        - the sampler is the only writer of the signal field
    """

    def __init__(
        self,
        rssi_reader: RssiReader,
        state: StreamState,
        interval: Optional[float] = None,
    ):
        self.rssi_reader = rssi_reader
        self.state = state
        self.interval = settings.signal.interval if interval is None else interval

        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

        self.samples_taken = 0

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.is_running():
                return

            # One event per run; an abandoned thread keeps its own, already set
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="SignalSampler",
                daemon=True,
            )
            self._thread.start()

        logger.info("Signal sampler started (every %.1fs)", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval + 1.0 if timeout is None else timeout)
            if thread.is_alive():
                logger.warning("Signal sampler still busy reading RSSI, abandoning it")

        self.state.set_signal(SignalLevel.NONE)

        if thread is not None:
            logger.info("Signal sampler stopped (%d samples)", self.samples_taken)

    def sample_once(self) -> SignalLevel:
        level = self._read_level()
        self.state.set_signal(level)
        return level

    def _read_level(self) -> SignalLevel:
        try:
            rssi = self.rssi_reader()
        except Exception as e:
            logger.warning("RSSI read failed: %s", e)
            rssi = None

        level = classify_rssi(rssi)
        self.samples_taken += 1

        logger.debug("RSSI %s dBm -> %s", rssi, level.value)
        return level

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            level = self._read_level()
            # A reading that outlived stop() is stale
            if stop_event.is_set():
                break
            self.state.set_signal(level)
            stop_event.wait(self.interval)
