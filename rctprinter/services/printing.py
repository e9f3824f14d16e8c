"""Print job orchestration used by the GUI."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

from ..errors import PortError
from ..printing import CommandTransmitter, ErrorEvent, ErrorKind
from ..printing.transmitter import DEFAULT_REPLY_TIMEOUT_MS
from ..transport import PortConfig, PortSession

_LOGGER = logging.getLogger(__name__)

CompleteCallback = Callable[[list[ErrorEvent]], None]
ErrorCallback = Callable[[ErrorEvent], None]


class PrintService:
    """Open the printer port, send a job and close the port again.

    Only one job runs at a time; the session is shared between jobs and is
    always closed when a job finishes.
    """

    def __init__(
        self,
        session: Optional[PortSession] = None,
        *,
        reply_timeout_ms: int = DEFAULT_REPLY_TIMEOUT_MS,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.session = session or PortSession()
        self.transmitter = CommandTransmitter(
            self.session, reply_timeout_ms=reply_timeout_ms, on_error=on_error
        )
        self._on_error = on_error
        self._lock = threading.Lock()
        self._start_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_busy(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def print_job(
        self, config: PortConfig, commands: Sequence[bytes]
    ) -> list[ErrorEvent]:
        """Send *commands* to the printer on *config* and return the errors."""

        with self._lock:
            try:
                self.session.open(config)
            except PortError as exc:
                event = ErrorEvent(
                    ErrorKind.PORT_ERROR,
                    f"Could not open port {config.name}: {exc.diagnostic}",
                )
                if self._on_error:
                    self._on_error(event)
                return [event]
            try:
                _LOGGER.info(
                    "Sending %d command(s) to %s", len(commands), config.name
                )
                errors = self.transmitter.send_all(commands)
            finally:
                self.session.close()
        if errors:
            _LOGGER.error("Print job on %s failed with %d error(s)", config.name, len(errors))
        else:
            _LOGGER.info("Print job on %s completed", config.name)
        return errors

    def print_job_async(
        self,
        config: PortConfig,
        commands: Sequence[bytes],
        *,
        on_complete: Optional[CompleteCallback] = None,
    ) -> threading.Thread:
        """Run :meth:`print_job` on a worker thread.

        Raises:
            RuntimeError: If another job is still running.
        """

        commands = list(commands)

        def worker() -> None:
            errors = self.print_job(config, commands)
            if on_complete:
                on_complete(errors)

        with self._start_lock:
            if self.is_busy:
                raise RuntimeError("A print job is already running")
            thread = threading.Thread(target=worker, name="PrintService", daemon=True)
            self._thread = thread
            thread.start()
        return thread

    def wait(self, timeout: Optional[float] = None) -> None:
        thread = self._thread
        if thread:
            thread.join(timeout)
