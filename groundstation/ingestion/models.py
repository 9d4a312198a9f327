"""
Ingestion Stage Data Models

Defines the values produced by the frame codec and consumed by the reader.

Key Types:
- MessageType: The closed set of message kinds the device sends
- Frame: One complete marker-delimited unit from the byte stream
- Resync: A framing violation; the codec went back to scanning for START
- EndOfStream: The byte source ran dry (peer closed, possibly mid-frame)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class MessageType(IntEnum):
    VIDEO = 1
    CENTROID = 2
    PRESSURE = 3
    GPS = 4
    BATTERY = 5


@dataclass(frozen=True)
class Frame:
    """
    A validated frame. Transient: lives only until it has been dispatched.

    Attributes:
        type: Raw type byte (0-255); not every value is a known MessageType
        payload: Exactly LENGTH bytes from the wire
    """

    type: int
    payload: bytes

    def __repr__(self) -> str:
        return f"Frame(type={self.type}, payload={len(self.payload)} bytes)"


@dataclass(frozen=True)
class Resync:
    """
    A frame attempt was abandoned and scanning restarted.

    Attributes:
        reason: Short description of the violation
        frame_type: Type byte of the abandoned attempt
        length: Declared LENGTH of the abandoned attempt
    """

    reason: str
    frame_type: int
    length: int


@dataclass(frozen=True)
class EndOfStream:
    pass


DecodeOutcome = Union[Frame, Resync, EndOfStream]
