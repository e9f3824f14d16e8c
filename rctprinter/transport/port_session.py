"""Serial port session used by the printer driver."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import serial

from ..errors import PortError
from .port_config import PortConfig

_LOGGER = logging.getLogger(__name__)
_POLL_INTERVAL = 0.01


class SessionState(Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass(frozen=True)
class DeviceError:
    """Error reported by the device while the session was open."""

    description: str
    fatal: bool


ErrorCallback = Callable[[DeviceError], None]


class PortSession:
    """Owns a single serial handle and its open/closed lifecycle.

    The handle is created once and reconfigured on every :meth:`open`, so
    the session always reflects the last config it was asked to apply.
    Device failures seen during I/O are published to the registered error
    listeners. Resource loss closes the session before the listeners run.
    """

    def __init__(
        self,
        serial_factory: Callable[[], serial.Serial] = serial.Serial,
        *,
        write_timeout: float = 1.0,
    ) -> None:
        self._serial = serial_factory()
        self._serial.timeout = 0
        self._serial.write_timeout = write_timeout
        self._config: Optional[PortConfig] = None
        self._listeners: list[ErrorCallback] = []
        self._listeners_lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._serial.is_open)

    @property
    def state(self) -> SessionState:
        return SessionState.OPEN if self.is_open else SessionState.CLOSED

    @property
    def config(self) -> Optional[PortConfig]:
        """The config applied by the most recent :meth:`open` call."""
        return self._config

    def open(self, config: PortConfig) -> None:
        """Apply *config* and open the port for reading and writing.

        Raises:
            PortError: If the device cannot be opened.
        """
        if self.is_open:
            _LOGGER.debug("Reopening %s with a new configuration", config.name)
            self.close()
        try:
            config.apply_to(self._serial)
            self._serial.open()
        except (serial.SerialException, OSError, ValueError) as exc:
            _LOGGER.error("Failed to open %s: %s", config.name, exc)
            raise PortError(str(exc), port=config.name) from exc
        self._config = config
        _LOGGER.info(
            "Opened serial port %s at %s bps", config.name, config.baud_rate
        )

    def close(self) -> None:
        if not self.is_open:
            return
        try:
            self._serial.close()
        finally:
            _LOGGER.info("Closed serial port %s", self._serial.port)

    def write(self, data: bytes) -> int:
        """Write *data* once and return the number of bytes the driver accepted.

        Raises:
            PortError: If the session is not open.
        """
        if not self.is_open:
            raise PortError("Serial port not open", port=self._port_name)
        try:
            count = self._serial.write(data)
        except serial.SerialTimeoutException as exc:
            self._report(exc, fatal=False)
            return 0
        except (serial.SerialException, OSError) as exc:
            self._report(exc, fatal=True)
            return 0
        if count is None:
            count = len(data)
        _LOGGER.debug("TX (%d bytes): %s", count, bytes(data).hex(" "))
        return count

    def wait_for_reply(self, timeout_ms: int) -> bool:
        """Block up to *timeout_ms* until incoming data is available."""
        deadline = time.time() + timeout_ms / 1000.0
        while self.is_open:
            try:
                if self._serial.in_waiting:
                    return True
            except (serial.SerialException, OSError) as exc:
                self._report(exc, fatal=True)
                return False
            if time.time() >= deadline:
                return False
            time.sleep(_POLL_INTERVAL)
        return False

    def read_available(self) -> bytes:
        """Return whatever has been received since the last read."""
        if not self.is_open:
            return b""
        try:
            pending = self._serial.in_waiting
            data = self._serial.read(pending) if pending else b""
        except (serial.SerialException, OSError) as exc:
            self._report(exc, fatal=True)
            return b""
        if data:
            _LOGGER.debug("RX (%d bytes): %s", len(data), data.hex(" "))
        return bytes(data)

    def add_error_listener(self, callback: ErrorCallback) -> None:
        if not callback:
            return
        with self._listeners_lock:
            self._listeners.append(callback)

    def remove_error_listener(self, callback: ErrorCallback) -> None:
        with self._listeners_lock:
            try:
                self._listeners.remove(callback)
            except ValueError:
                pass

    @property
    def _port_name(self) -> Optional[str]:
        return self._config.name if self._config else None

    def _report(self, exc: BaseException, *, fatal: bool) -> None:
        description = str(exc) or exc.__class__.__name__
        if fatal:
            _LOGGER.error("Serial device lost on %s: %s", self._port_name, description)
            try:
                self.close()
            except (serial.SerialException, OSError):
                _LOGGER.debug("Close after device loss failed", exc_info=True)
        else:
            _LOGGER.warning("Serial device error on %s: %s", self._port_name, description)
        self._dispatch(DeviceError(description=description, fatal=fatal))

    def _dispatch(self, error: DeviceError) -> None:
        with self._listeners_lock:
            callbacks = list(self._listeners)
        for callback in callbacks:
            try:
                callback(error)
            except Exception:
                _LOGGER.debug("Serial error callback failed", exc_info=True)

    def __enter__(self) -> "PortSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"PortSession({self._port_name!r}, {self.state.value})"
