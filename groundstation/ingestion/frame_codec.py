"""
Frame Codec

Turns a byte-oriented source into a sequence of validated frames.

Wire Format:
============

┌─────────────────────────────────────────────────────────────┐
│ START_MARKER │ 3 bytes │ 0xAABBCC (big-endian)              │
│ TYPE         │ 1 byte  │ unsigned char                      │
│ LENGTH       │ 4 bytes │ unsigned int, LITTLE-endian        │
│ PAYLOAD      │ [LENGTH] bytes                               │
│ END_MARKER   │ 3 bytes │ 0xDDEEFF (big-endian)              │
└─────────────────────────────────────────────────────────────┘

Resynchronization:
- Scan one byte at a time through a 24-bit rolling window until it
  equals START_MARKER. After corruption the scan realigns on the next
  marker occurrence, at worst discarding bytes up to an accidental
  marker collision.
- A LENGTH outside (0, MAX_PAYLOAD_SIZE] or a bad END_MARKER abandons
  the attempt and scanning restarts. Payload already consumed is lost;
  there is no byte-level backtracking.
- A short read anywhere means the source is exhausted.

The codec does no I/O policy of its own: timeouts and socket errors
raised by the source propagate to the caller.
"""

import logging
import struct
from typing import BinaryIO, Iterator, Optional

from groundstation.ingestion.models import DecodeOutcome, EndOfStream, Frame, Resync


logger = logging.getLogger(__name__)

START_MARKER = 0xAABBCC
END_MARKER = 0xDDEEFF
MARKER_SIZE = 3
MARKER_MASK = 0xFFFFFF

# B = unsigned char (1 byte)        → type
# <I = little-endian uint (4 bytes) → length
HEADER_FORMAT = "<BI"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # = 5 bytes

# Slightly above the largest legitimate payload (a 153600-byte video frame)
MAX_PAYLOAD_SIZE = 200_000


class FrameCodec:
    """
    Pull-based decoder over a blocking byte source.

    The source is any object whose read(n) returns up to n bytes and
    returns fewer only when the stream has ended (socket.makefile("rb"),
    io.BytesIO, a file opened in binary mode).

    Usage:
        codec = FrameCodec(sock.makefile("rb"))
        for outcome in codec:
            if isinstance(outcome, Frame):
                dispatch(outcome)

    The iterator yields every outcome, ending with exactly one EndOfStream.
    frames() is a convenience view that yields only Frames.
    """

    def __init__(self, source: BinaryIO):
        self.source = source

        # Statistics
        self.frames_decoded = 0
        self.resyncs = 0
        self.bytes_skipped = 0

    def __iter__(self) -> Iterator[DecodeOutcome]:
        while True:
            outcome = self.next_outcome()
            yield outcome
            if isinstance(outcome, EndOfStream):
                return

    def frames(self) -> Iterator[Frame]:
        for outcome in self:
            if isinstance(outcome, Frame):
                yield outcome

    def next_outcome(self) -> DecodeOutcome:
        """
        Read until one frame attempt completes.

        Returns:
            Frame on success, Resync on a framing violation,
            EndOfStream when the source is exhausted
        """
        # Step 1: Scan for START_MARKER
        if not self._scan_for_start():
            return EndOfStream()

        # Step 2: Read TYPE and LENGTH
        header = self._read_exact(HEADER_SIZE)
        if header is None:
            return EndOfStream()
        frame_type, length = struct.unpack(HEADER_FORMAT, header)

        if not 0 < length <= MAX_PAYLOAD_SIZE:
            return self._resync("invalid length", frame_type, length)

        # Step 3: Read the payload
        payload = self._read_exact(length)
        if payload is None:
            return EndOfStream()

        # Step 4: Verify END_MARKER
        end = self._read_exact(MARKER_SIZE)
        if end is None:
            return EndOfStream()
        if int.from_bytes(end, "big") != END_MARKER:
            return self._resync("invalid end marker", frame_type, length)

        # Step 5: Emit
        self.frames_decoded += 1
        return Frame(type=frame_type, payload=payload)

    def _scan_for_start(self) -> bool:
        window = 0
        scanned = 0

        while window != START_MARKER:
            byte = self.source.read(1)
            if not byte:
                self.bytes_skipped += scanned
                return False
            window = ((window << 8) | byte[0]) & MARKER_MASK
            scanned += 1

        skipped = scanned - MARKER_SIZE
        if skipped > 0:
            self.bytes_skipped += skipped
            logger.debug("Skipped %d bytes before start marker", skipped)

        return True

    def _read_exact(self, num_bytes: int) -> Optional[bytes]:
        """
        Read exactly num_bytes from the source.

        A single read() may legitimately return fewer bytes than asked
        (raw sockets, unbuffered pipes), so keep reading until the count
        is met or the source reports end of stream.

        Returns:
            The bytes, or None if the source ended first
        """
        chunks = []
        bytes_remaining = num_bytes

        while bytes_remaining > 0:
            chunk = self.source.read(bytes_remaining)
            if not chunk:
                return None
            chunks.append(chunk)
            bytes_remaining -= len(chunk)

        return b"".join(chunks)

    def _resync(self, reason: str, frame_type: int, length: int) -> Resync:
        self.resyncs += 1
        logger.warning(
            "Framing violation (%s) for type %d, length %d. Resyncing...",
            reason,
            frame_type,
            length,
        )
        return Resync(reason=reason, frame_type=frame_type, length=length)
