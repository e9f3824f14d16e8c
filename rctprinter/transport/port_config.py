"""Serial line settings supplied by the caller when opening a port."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

import serial

DEFAULT_BAUDRATE = 9600


class DataBits(IntEnum):
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8

    @property
    def serial_value(self) -> int:
        return {
            DataBits.FIVE: serial.FIVEBITS,
            DataBits.SIX: serial.SIXBITS,
            DataBits.SEVEN: serial.SEVENBITS,
            DataBits.EIGHT: serial.EIGHTBITS,
        }[self]


class Parity(Enum):
    NONE = "none"
    EVEN = "even"
    ODD = "odd"
    MARK = "mark"
    SPACE = "space"

    @property
    def serial_value(self) -> str:
        return {
            Parity.NONE: serial.PARITY_NONE,
            Parity.EVEN: serial.PARITY_EVEN,
            Parity.ODD: serial.PARITY_ODD,
            Parity.MARK: serial.PARITY_MARK,
            Parity.SPACE: serial.PARITY_SPACE,
        }[self]


class StopBits(Enum):
    ONE = 1.0
    ONE_AND_HALF = 1.5
    TWO = 2.0

    @property
    def serial_value(self) -> float:
        return {
            StopBits.ONE: serial.STOPBITS_ONE,
            StopBits.ONE_AND_HALF: serial.STOPBITS_ONE_POINT_FIVE,
            StopBits.TWO: serial.STOPBITS_TWO,
        }[self]


class FlowControl(Enum):
    NONE = "none"
    HARDWARE = "hardware"
    SOFTWARE = "software"


@dataclass(frozen=True)
class PortConfig:
    """Immutable description of how a serial port should be opened."""

    name: str
    baud_rate: int = DEFAULT_BAUDRATE
    data_bits: DataBits = DataBits.EIGHT
    parity: Parity = Parity.NONE
    stop_bits: StopBits = StopBits.ONE
    flow_control: FlowControl = FlowControl.NONE

    def apply_to(self, ser: Any) -> None:
        """Copy every setting onto an unopened ``serial.Serial`` instance."""

        ser.port = self.name
        ser.baudrate = self.baud_rate
        ser.bytesize = self.data_bits.serial_value
        ser.parity = self.parity.serial_value
        ser.stopbits = self.stop_bits.serial_value
        ser.rtscts = self.flow_control is FlowControl.HARDWARE
        ser.xonxoff = self.flow_control is FlowControl.SOFTWARE
