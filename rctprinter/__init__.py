"""Serial receipt printer driver.

The GUI hands a :class:`PortConfig` and a list of raw commands to
:class:`PrintService` and shows the returned error descriptions.
"""

from __future__ import annotations

from .errors import PortError, PrinterError
from .printing import CommandTransmitter, ErrorEvent, ErrorKind
from .services import PortService, PrintService
from .transport import PortConfig, PortSession

__version__ = "0.7.1"
__all__ = [
    "CommandTransmitter",
    "ErrorEvent",
    "ErrorKind",
    "PortConfig",
    "PortError",
    "PortService",
    "PortSession",
    "PrintService",
    "PrinterError",
]
