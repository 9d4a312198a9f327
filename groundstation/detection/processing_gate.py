"""
Processing Gate

Single-flight, rate-limited hand-off from the read loop to the classifier.

Problem:
- Classification can be slower than the device frame rate
- The read loop must never wait on it
- Overlapping classifier calls would pile up work and race on results

Solution:
- One busy flag: while a call is in flight, newer frames are dropped
  (freshness over completeness, nothing is queued)
- Independently, at most one invocation per min_interval
- The call runs on a single background worker; offer() only checks
  two fields under a lock and submits
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional

import numpy as np

from groundstation.config import settings
from groundstation.state.models import Classification, VideoFrame
from groundstation.state.stream_state import StreamState


logger = logging.getLogger(__name__)

Classifier = Callable[[np.ndarray], list[Classification]]


class ProcessingGate:
    """
    Forwards selected video frames to the classifier.

    Contract:
        offer(frame, now) drops the frame when a call is in flight, or when
        less than min_interval has passed since the last invocation. Otherwise
        it marks the gate busy, records now as the invocation time and
        schedules the classifier. The busy flag is cleared when the call ends,
        whether it succeeded or not.

    Threading:
        - offer() is called from the read loop and never blocks on the call
        - the classifier runs on a dedicated single-thread executor
        - results are written to StreamState from the worker thread
    """

    def __init__(
        self,
        classifier: Optional[Classifier],
        state: StreamState,
        min_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.classifier = classifier
        self.state = state
        self.min_interval = (
            settings.gate.min_interval if min_interval is None else min_interval
        )
        self.clock = clock

        self._lock = threading.Lock()
        self._busy = False
        self._last_invocation: Optional[float] = None
        self._future: Optional[Future] = None
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ProcessingGate"
        )

        # Statistics
        self.frames_offered = 0
        self.frames_dropped = 0
        self.invocations = 0
        self.failures = 0

    @property
    def busy(self) -> bool:
        return self._busy

    def offer(self, frame: VideoFrame, now: Optional[float] = None) -> bool:
        """
        Offer a frame for classification.

        Args:
            frame: The decoded video frame
            now: Current monotonic time; read from the clock if omitted

        Returns:
            True if a classification was scheduled, False if the frame was dropped
        """
        if now is None:
            now = self.clock()

        with self._lock:
            self.frames_offered += 1

            if self.classifier is None or self._busy:
                self.frames_dropped += 1
                return False

            if (
                self._last_invocation is not None
                and now - self._last_invocation < self.min_interval
            ):
                self.frames_dropped += 1
                return False

            self._busy = True
            self._last_invocation = now
            self.invocations += 1

        try:
            self._future = self._executor.submit(self._classify, frame)
        except RuntimeError:
            # Executor already shut down
            with self._lock:
                self._busy = False
            logger.warning("Processing gate is shut down, dropping frame")
            return False

        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the in-flight classification (if any) has finished.

        Returns:
            True if nothing is in flight any more
        """
        future = self._future
        if future is None:
            return True
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        logger.info(
            "Processing gate stopped (offered=%d, dropped=%d, invocations=%d, failures=%d)",
            self.frames_offered,
            self.frames_dropped,
            self.invocations,
            self.failures,
        )

    def _classify(self, frame: VideoFrame) -> None:
        try:
            start_time = time.perf_counter()
            results = list(self.classifier(frame.to_bgr()))
            elapsed = time.perf_counter() - start_time

            self.state.set_classifications(results)

            logger.debug(
                "Classification finished: %d results in %.1fms",
                len(results),
                elapsed * 1000,
            )

        except Exception as e:
            self.failures += 1
            logger.error("Error during classification: %s", e, exc_info=True)

        finally:
            with self._lock:
                self._busy = False
