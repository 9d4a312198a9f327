"""
Stream Reader

Owns the TCP connection to the device, drives the FrameCodec and routes
decoded frames to the message decoders.

Connection lifecycle:
    DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED | ERROR
    (CONNECTING -> DISCONNECTED | ERROR when the connect itself fails)

- stop flag set, or the device closes the stream cleanly -> DISCONNECTED
- socket failure or read timeout while the stop flag is clear -> ERROR
- socket failure after stop() was requested -> DISCONNECTED

On every terminal transition the signal sampler is stopped and the
centroid, GPS, pressure and battery samples are reset. The video frame
and classifications are kept.
"""

import logging
import socket
import threading
from typing import Callable, Optional

from groundstation.config import settings
from groundstation.detection.processing_gate import ProcessingGate
from groundstation.ingestion.frame_codec import FrameCodec
from groundstation.ingestion.message_decoders import DECODERS, DecodeError
from groundstation.ingestion.models import EndOfStream, Frame, MessageType, Resync
from groundstation.link.sampler import SignalSampler
from groundstation.state.models import ConnectionStatus
from groundstation.state.stream_state import StreamState


logger = logging.getLogger(__name__)

Opener = Callable[[tuple[str, int], float], socket.socket]


# =============================================================================
# STREAM READER
# =============================================================================


class StreamReader:
    """
    Receives the multiplexed device stream and keeps StreamState current.

    Threading:
        - start() spawns a background thread for one connection attempt
        - stop() sets a cooperative flag; the loop notices it at the next
          frame or at the read timeout, whichever comes first
        - decoding and dispatch happen sequentially on the reader thread
    """

    def __init__(
        self,
        state: StreamState,
        gate: ProcessingGate,
        sampler: SignalSampler,
        host: Optional[str] = None,
        port: Optional[int] = None,
        read_timeout: Optional[float] = None,
        opener: Opener = socket.create_connection,
    ):
        self.state = state
        self.gate = gate
        self.sampler = sampler

        # Load from config
        self.host = settings.network.host if host is None else host
        self.port = settings.network.port if port is None else port
        self.read_timeout = (
            settings.network.read_timeout if read_timeout is None else read_timeout
        )
        self.opener = opener

        self._handlers = {
            MessageType.VIDEO: self._on_video,
            MessageType.CENTROID: self.state.set_centroid,
            MessageType.PRESSURE: self.state.set_pressure,
            MessageType.GPS: self.state.set_gps,
            MessageType.BATTERY: self.state.set_battery,
        }
        missing = (set(MessageType) - set(self._handlers)) | (set(MessageType) - set(DECODERS))
        if missing:
            raise RuntimeError(f"No handler for message types: {sorted(missing)}")

        # Threading control
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._start_lock = threading.Lock()

        # Connection state
        self._socket: Optional[socket.socket] = None

        # Statistics (per connection attempt)
        self.frames_received = 0
        self.decode_failures = 0
        self.unknown_types = 0
        self.resyncs = 0

    def start(self) -> bool:
        """
        Begin connecting. Ignored while a connection attempt is already live.

        Returns:
            True if a new connection attempt was started
        """
        with self._start_lock:
            if self.state.status in (
                ConnectionStatus.CONNECTING,
                ConnectionStatus.CONNECTED,
            ) or self.is_running():
                logger.warning("Stream reader already running")
                return False

            self._stop_event.clear()
            self.frames_received = 0
            self.decode_failures = 0
            self.unknown_types = 0
            self.resyncs = 0

            self.state.set_status(ConnectionStatus.CONNECTING)
            self.sampler.start()

            self._thread = threading.Thread(
                target=self._run,
                name="StreamReader",
                daemon=True,  # Thread exits when main program exits
            )
            self._thread.start()

        logger.info("Started stream reader for %s:%d", self.host, self.port)
        return True

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Request a graceful teardown.

        Args:
            timeout: If given, wait up to this long for the reader thread to exit
        """
        if not self._stop_event.is_set():
            logger.info("Stopping stream reader")
        self._stop_event.set()

        thread = self._thread
        if timeout is not None and thread is not None and thread.is_alive():
            thread.join(timeout=timeout)

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)

    # -------------------------------------------------------------------------
    # Reader thread
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        """
        Main receive loop (runs in background thread) for one connection attempt.
        """
        final_status = ConnectionStatus.DISCONNECTED

        try:
            self._connect()
            if self._stop_event.is_set():
                logger.info("Stop requested while connecting")
                return

            self.state.set_status(ConnectionStatus.CONNECTED)
            self._receive_loop()

        except OSError as e:
            # socket.timeout is an OSError too
            if self._stop_event.is_set():
                logger.info("Connection closed during shutdown: %s", e)
            else:
                logger.error("Connection to %s:%d failed: %s", self.host, self.port, e)
                final_status = ConnectionStatus.ERROR

        except Exception as e:
            logger.error("Stream reader error: %s", e, exc_info=True)
            final_status = ConnectionStatus.ERROR

        finally:
            self._disconnect()
            self.sampler.stop()
            self.state.reset_telemetry()
            self.state.set_status(final_status)

            logger.info(
                "Stream reader stopped (frames=%d, resyncs=%d, decode_failures=%d, unknown_types=%d)",
                self.frames_received,
                self.resyncs,
                self.decode_failures,
                self.unknown_types,
            )

    def _connect(self) -> None:
        logger.info("Connecting to device at %s:%d", self.host, self.port)

        self._socket = self.opener((self.host, self.port), self.read_timeout)
        self._socket.settimeout(self.read_timeout)

        logger.info("Connected to device at %s:%d", self.host, self.port)

    def _disconnect(self) -> None:
        if self._socket:
            try:
                self._socket.close()
            except OSError as e:
                logger.debug("Error closing device socket: %s", e)
            finally:
                self._socket = None

    def _receive_loop(self) -> None:
        with self._socket.makefile("rb") as source:
            codec = FrameCodec(source)

            for outcome in codec:
                if isinstance(outcome, Frame):
                    self.dispatch(outcome)
                elif isinstance(outcome, Resync):
                    self.resyncs += 1
                elif isinstance(outcome, EndOfStream):
                    logger.info("End of stream reached cleanly")

                if self._stop_event.is_set():
                    break

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, frame: Frame) -> None:
        """Decode one frame and publish the result. Never raises on bad payloads."""
        try:
            message_type = MessageType(frame.type)
        except ValueError:
            self.unknown_types += 1
            logger.warning("Unknown data type received: %d", frame.type)
            return

        try:
            value = DECODERS[message_type](frame.payload)
        except DecodeError as e:
            self.decode_failures += 1
            logger.warning("Failed to decode %s message: %s", message_type.name, e)
            return

        self.frames_received += 1
        self._handlers[message_type](value)

        logger.debug("Dispatched %s (%d bytes)", message_type.name, len(frame.payload))

    def _on_video(self, video_frame) -> None:
        self.state.set_video_frame(video_frame)
        self.gate.offer(video_frame)
