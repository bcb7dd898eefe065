"""Shared CLI utilities for skillwisp commands."""

import logging
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.spinner import Spinner

from skillwisp.config import SkillwispConfig
from skillwisp.core.paths import InstallScope
from skillwisp.core.resource import ResourceKind, coerce_kind
from skillwisp.exceptions import ConfigError

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich when --verbose is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_config() -> SkillwispConfig:
    try:
        return SkillwispConfig.from_env()
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def parse_kind(value: str) -> ResourceKind:
    try:
        return coerce_kind(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def scope_from_flag(global_install: bool) -> InstallScope:
    return InstallScope.GLOBAL if global_install else InstallScope.LOCAL


@contextmanager
def fetch_spinner(text: str = "Fetching..."):
    """Show spinner during fetch operation."""
    with Live(Spinner("dots", text=text), console=console, transient=True):
        yield
