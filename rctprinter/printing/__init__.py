"""Printer protocol framing and command transmission."""

from .protocol import ErrorEvent, ErrorKind, checksum, decode_status, frame
from .transmitter import BatchState, CommandTransmitter

__all__ = [
    "BatchState",
    "CommandTransmitter",
    "ErrorEvent",
    "ErrorKind",
    "checksum",
    "decode_status",
    "frame",
]
