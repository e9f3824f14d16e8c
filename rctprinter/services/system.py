"""Serial port discovery decoupled from the GUI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import serial.tools.list_ports


@dataclass
class PortSelection:
    """Snapshot of available ports and the recommended selection."""

    ports: List[str]
    selected: Optional[str]


class PortService:
    """Provide serial port listing helpers for the port chooser."""

    def list_ports(self) -> List[str]:
        return sorted(port.device for port in serial.tools.list_ports.comports())

    def build_selection(self, current: Optional[str]) -> PortSelection:
        """Return the list of ports and a suggested selection.

        Args:
            current: Current selection maintained by the caller.
        """

        ports = self.list_ports()
        normalized = (current or "").strip()
        if normalized and normalized in ports:
            selected = normalized
        else:
            selected = ports[0] if ports else None
        return PortSelection(ports=ports, selected=selected)
