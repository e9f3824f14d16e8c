"""Command line entry point for rctprinter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from .config import load_config, save_config
from .services import PortService, PrintService
from .settings import CONFIG_FILE, configure_logging

app = typer.Typer(add_completion=False)

_CR_MARKER = "<CR>"


def encode_command(text: str, encoding: str = "utf-8") -> bytes:
    """Turn a command written on the command line into raw printer bytes."""

    return text.replace(_CR_MARKER, "\r").encode(encoding)


@app.command()
def ports(
    config: Path = typer.Option(Path(CONFIG_FILE), help="Configuration file"),
) -> None:
    """List the serial ports available on this machine."""

    cfg = load_config(config)
    selection = PortService().build_selection(cfg.port_name)
    if not selection.ports:
        typer.echo("No serial ports found")
        return
    for name in selection.ports:
        marker = "*" if name == selection.selected else " "
        typer.echo(f"{marker} {name}")


@app.command()
def send(
    commands: List[str] = typer.Argument(..., help="Printer commands, <CR> marks a carriage return"),
    port: Optional[str] = typer.Option(None, help="Serial port name"),
    baud: Optional[int] = typer.Option(None, help="Baud rate"),
    timeout_ms: Optional[int] = typer.Option(None, help="Reply wait per command in ms"),
    encoding: str = typer.Option("utf-8", help="Text encoding of the commands"),
    config: Path = typer.Option(Path(CONFIG_FILE), help="Configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log serial traffic"),
) -> None:
    """Send COMMANDS to the printer and report any printer errors."""

    configure_logging(level=logging.DEBUG if verbose else logging.INFO, force=verbose)
    cfg = load_config(config)
    if port:
        cfg.port_name = port
    if baud:
        cfg.baud_rate = baud
    if timeout_ms is not None:
        cfg.reply_timeout_ms = max(0, timeout_ms)
    if not cfg.port_name:
        typer.echo("No serial port configured; pass --port", err=True)
        raise typer.Exit(code=2)

    payloads = [encode_command(text, encoding) for text in commands]
    service = PrintService(reply_timeout_ms=cfg.reply_timeout_ms)
    errors = service.print_job(cfg.to_port_config(), payloads)
    if errors:
        for event in errors:
            typer.echo(str(event), err=True)
        raise typer.Exit(code=1)

    save_config(cfg, config)
    typer.echo(f"Sent {len(payloads)} command(s) to {cfg.port_name}")


def main() -> int:
    app()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
