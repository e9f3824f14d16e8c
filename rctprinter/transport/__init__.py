"""Serial transport layer for rctprinter."""

from .port_config import DataBits, FlowControl, Parity, PortConfig, StopBits
from .port_session import DeviceError, PortSession, SessionState

__all__ = [
    "DataBits",
    "DeviceError",
    "FlowControl",
    "Parity",
    "PortConfig",
    "PortSession",
    "SessionState",
    "StopBits",
]
