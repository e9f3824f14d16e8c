"""Exceptions raised by the printer driver."""

from __future__ import annotations

from typing import Optional


class PrinterError(Exception):
    """Base exception for rctprinter errors."""


class PortError(PrinterError):
    """The serial port could not be opened or used."""

    def __init__(self, message: str, *, port: Optional[str] = None) -> None:
        self.port = port
        self.diagnostic = message
        if port:
            message = f"{port}: {message}"
        super().__init__(message)
