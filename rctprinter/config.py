"""Configuration helpers for rctprinter."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Type, TypeVar

from .settings import CONFIG_FILE
from .transport import DataBits, FlowControl, Parity, PortConfig, StopBits
from .transport.port_config import DEFAULT_BAUDRATE

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=Enum)


def _ensure_parent(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Directory creation failures will surface during write; keep silent here.
        pass


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_enum(enum_type: Type[_E], value: Any, default: _E) -> _E:
    try:
        return enum_type(value)
    except ValueError:
        return default


@dataclass
class AppConfig:
    port_name: str = ""
    baud_rate: int = DEFAULT_BAUDRATE
    data_bits: int = DataBits.EIGHT.value
    parity: str = Parity.NONE.value
    stop_bits: float = StopBits.ONE.value
    flow_control: str = FlowControl.NONE.value
    reply_timeout_ms: int = 1000

    def to_port_config(self) -> PortConfig:
        """Build the :class:`PortConfig` described by these preferences."""

        defaults = AppConfig()
        return PortConfig(
            name=self.port_name,
            baud_rate=self.baud_rate,
            data_bits=_coerce_enum(DataBits, self.data_bits, DataBits(defaults.data_bits)),
            parity=_coerce_enum(Parity, self.parity, Parity(defaults.parity)),
            stop_bits=_coerce_enum(StopBits, self.stop_bits, StopBits(defaults.stop_bits)),
            flow_control=_coerce_enum(
                FlowControl, self.flow_control, FlowControl(defaults.flow_control)
            ),
        )


def load_config(path: str | Path = CONFIG_FILE) -> AppConfig:
    """Load configuration data from *path* or return defaults on failure."""

    defaults = AppConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return defaults

    try:
        raw = json.loads(cfg_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.error("Config file %s contains invalid JSON: %s", cfg_path, exc)
        return defaults
    except OSError as exc:
        logger.error("Could not read config file %s: %s", cfg_path, exc)
        return defaults

    if not isinstance(raw, dict):
        logger.error("Config file %s did not contain an object", cfg_path)
        return defaults

    data = asdict(defaults)
    data["port_name"] = str(raw.get("port_name", data["port_name"]))
    data["baud_rate"] = max(1, _coerce_int(raw.get("baud_rate"), defaults.baud_rate))
    data["data_bits"] = _coerce_enum(
        DataBits, _coerce_int(raw.get("data_bits"), defaults.data_bits), DataBits.EIGHT
    ).value
    data["parity"] = _coerce_enum(Parity, raw.get("parity"), Parity.NONE).value
    try:
        stop_bits = float(raw.get("stop_bits", defaults.stop_bits))
    except (TypeError, ValueError):
        stop_bits = defaults.stop_bits
    data["stop_bits"] = _coerce_enum(StopBits, stop_bits, StopBits.ONE).value
    data["flow_control"] = _coerce_enum(
        FlowControl, raw.get("flow_control"), FlowControl.NONE
    ).value
    data["reply_timeout_ms"] = max(
        0, _coerce_int(raw.get("reply_timeout_ms"), defaults.reply_timeout_ms)
    )

    return AppConfig(**data)


def save_config(config: AppConfig, path: str | Path = CONFIG_FILE) -> None:
    """Persist *config* to *path*, logging errors without raising."""

    cfg_path = Path(path)
    _ensure_parent(cfg_path)
    try:
        cfg_path.write_text(json.dumps(asdict(config), indent=4), encoding="utf-8")
    except OSError as exc:
        logger.error("Could not write config file %s: %s", cfg_path, exc)
