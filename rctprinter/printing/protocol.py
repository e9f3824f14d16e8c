"""Wire format of the receipt printer.

Every command travels as::

    ESC 'P' | payload | checksum | ESC '\\' | DLE

The checksum is a running XOR of the payload seeded with 0xFF. Payload
bytes are sent as-is; the printer firmware does not define any escaping.

Replies may contain status bytes of the form ``01110xxx``. Bit 0 flags a
printing mechanism fault and bit 1 flags paper out; any other byte in a
reply is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

FRAME_START = b"\x1bP"
FRAME_END = b"\x1b\\\x10"
FRAME_OVERHEAD = len(FRAME_START) + 1 + len(FRAME_END)
CHECKSUM_SEED = 0xFF

STATUS_MASK = 0b11111000
STATUS_PATTERN = 0b01110000
STATUS_MECHANISM_ERROR = 0x01
STATUS_PAPER_OUT = 0x02


class ErrorKind(Enum):
    MECHANISM_ERROR = "mechanism_error"
    PAPER_OUT = "paper_out"
    WRITE_INCOMPLETE = "write_incomplete"
    DEVICE_ERROR = "device_error"
    PORT_ERROR = "port_error"


# Replace entries to localize the status descriptions.
MESSAGES = {
    ErrorKind.MECHANISM_ERROR: "Printing mechanism error",
    ErrorKind.PAPER_OUT: "Paper out",
}


@dataclass(frozen=True)
class ErrorEvent:
    """A single user-facing error produced while printing."""

    kind: ErrorKind
    description: str

    def __str__(self) -> str:
        return self.description


def checksum(payload: bytes) -> int:
    """Return the single-byte XOR checksum of *payload*."""

    value = CHECKSUM_SEED
    for byte in bytes(payload):
        value ^= byte
    return value


def frame(payload: bytes) -> bytes:
    """Wrap *payload* in the printer's preamble, checksum and terminator."""

    payload = bytes(payload)
    return FRAME_START + payload + bytes([checksum(payload)]) + FRAME_END


def is_status_byte(byte: int) -> bool:
    return (byte & STATUS_MASK) == STATUS_PATTERN


def decode_status(data: bytes) -> list[ErrorEvent]:
    """Translate the status bytes found in a reply into error events.

    A single status byte may carry both flags; the mechanism fault is then
    reported before paper out.
    """

    events: list[ErrorEvent] = []
    for byte in bytes(data):
        if not is_status_byte(byte):
            continue
        if byte & STATUS_MECHANISM_ERROR:
            events.append(_status_event(ErrorKind.MECHANISM_ERROR))
        if byte & STATUS_PAPER_OUT:
            events.append(_status_event(ErrorKind.PAPER_OUT))
    return events


def write_incomplete(written: int, expected: int) -> ErrorEvent:
    return ErrorEvent(
        ErrorKind.WRITE_INCOMPLETE,
        f"Did not write all bytes. Wrote {written} byte(s) from {expected}.",
    )


def _status_event(kind: ErrorKind) -> ErrorEvent:
    return ErrorEvent(kind, MESSAGES[kind])
