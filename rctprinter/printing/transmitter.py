"""Sequential command transmission with status decoding."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Iterable, Optional

from ..errors import PortError
from ..transport.port_session import DeviceError, PortSession
from .protocol import ErrorEvent, ErrorKind, decode_status, frame, write_incomplete

_LOGGER = logging.getLogger(__name__)

DEFAULT_REPLY_TIMEOUT_MS = 1000

ErrorEventCallback = Callable[[ErrorEvent], None]


class BatchState(Enum):
    IDLE = "idle"
    SENDING = "sending"
    ABORTED = "aborted"
    DONE = "done"


class CommandTransmitter:
    """Drive a batch of commands through a :class:`PortSession`.

    Commands are framed and written one at a time. After each write the
    transmitter waits up to ``reply_timeout_ms`` for the printer to answer
    and decodes any status bytes in the reply. As soon as the batch has
    collected an error no further command is sent.
    """

    def __init__(
        self,
        session: PortSession,
        *,
        reply_timeout_ms: int = DEFAULT_REPLY_TIMEOUT_MS,
        on_error: Optional[ErrorEventCallback] = None,
    ) -> None:
        self.session = session
        self.reply_timeout_ms = reply_timeout_ms
        self._on_error = on_error
        self._state = BatchState.IDLE
        self._position = 0
        self._buffer: Optional[list[ErrorEvent]] = None
        self._write_failed = False
        self._lock = threading.Lock()
        session.add_error_listener(self._handle_device_error)

    @property
    def state(self) -> BatchState:
        return self._state

    @property
    def position(self) -> int:
        """Index of the command currently (or last) being sent."""
        return self._position

    def send_all(self, commands: Iterable[bytes]) -> list[ErrorEvent]:
        """Send *commands* in order and return the errors they produced."""

        errors: list[ErrorEvent] = []
        with self._lock:
            self._buffer = errors
        self._position = 0
        try:
            for index, command in enumerate(commands):
                if errors:
                    self._state = BatchState.ABORTED
                    _LOGGER.warning(
                        "Aborting batch before command %d after %d error(s)",
                        index,
                        len(errors),
                    )
                    return list(errors)
                self._state = BatchState.SENDING
                self._position = index
                self._send_one(command)
            if errors:
                self._state = BatchState.ABORTED
            else:
                self._state = BatchState.DONE
            return list(errors)
        finally:
            with self._lock:
                self._buffer = None

    def _send_one(self, command: bytes) -> None:
        data = frame(command)
        self._write_failed = False
        try:
            written = self.session.write(data)
        except PortError as exc:
            self._record(ErrorEvent(ErrorKind.PORT_ERROR, str(exc)))
            return
        # A device error published during the write already describes the fault.
        if written != len(data) and not self._write_failed:
            self._record(write_incomplete(written, len(data)))
        if self.session.wait_for_reply(self.reply_timeout_ms):
            for event in decode_status(self.session.read_available()):
                self._record(event)

    def _handle_device_error(self, error: DeviceError) -> None:
        self._write_failed = True
        self._record(ErrorEvent(ErrorKind.DEVICE_ERROR, error.description))

    def _record(self, event: ErrorEvent) -> None:
        _LOGGER.error("Printer error: %s", event.description)
        with self._lock:
            if self._buffer is not None:
                self._buffer.append(event)
        if self._on_error:
            self._on_error(event)
