"""Services that sit between the UI layer and the printer driver."""

from .printing import PrintService
from .system import PortSelection, PortService

__all__ = ["PortSelection", "PortService", "PrintService"]
