"""Shared utilities for siteremap CLI modules."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.console import Console

from siteremap.core.config import RemapConfig, get_config
from siteremap.models.container import VolumeMapping
from siteremap.services.remap import PathValidator, RemapOrchestrator, StatusReporter
from siteremap.services.runtime import DockerRuntime
from siteremap.services.sites import SiteStarter, SiteStore


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get("SITEREMAP_MOCK") == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands."""
    from siteremap.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def confirm_action(message: str, yes_flag: bool = False, mock: bool = False) -> bool:
    """Prompt user for confirmation unless --yes or mock mode.

    Args:
        message: Confirmation message to display
        yes_flag: Skip prompt if True (from --yes flag)
        mock: Skip prompt if True (mock mode)

    Returns:
        True if confirmed, False otherwise
    """
    if yes_flag or mock:
        return True
    return typer.confirm(message)


def load_mappings_file(path: Path) -> List[VolumeMapping]:
    """Load volume mappings from a YAML file.

    Expected format::

        volumes:
          - source: /Users/me/Sites/blog
            dest: /app/public

    Raises:
        typer.BadParameter: If the file is missing or malformed
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise typer.BadParameter(f"Cannot read {path}: {e}", param_name="file")

    entries = data.get('volumes') if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise typer.BadParameter(f"{path} must contain a 'volumes' list", param_name="file")

    mappings = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise typer.BadParameter(f"Invalid volume entry in {path}: {entry!r}", param_name="file")
        mappings.append(VolumeMapping(
            source=str(entry.get('source') or ''),
            dest=str(entry.get('dest') or ''),
        ))
    return mappings


def parse_volume_options(values: List[str]) -> List[VolumeMapping]:
    """Parse repeated ``--volume SOURCE:DEST`` options."""
    mappings = []
    for value in values:
        try:
            mappings.append(VolumeMapping.parse(value))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_name="volume")
    return mappings


def get_runtime(mock: Optional[bool] = None) -> DockerRuntime:
    """Return a DockerRuntime with mock defaults."""
    if mock is None:
        mock = is_mock()
    return DockerRuntime(mock=mock)


def get_site_store(config: Optional[RemapConfig] = None) -> SiteStore:
    config = config or get_config()
    return SiteStore(config.sites_file)


def build_orchestrator(runtime: DockerRuntime, store: SiteStore, console: Console,
                       yes_flag: bool = False,
                       config: Optional[RemapConfig] = None) -> RemapOrchestrator:
    """Wire the orchestrator with CLI collaborators."""
    config = config or get_config()
    mock = runtime.mock

    def confirm(message: str) -> bool:
        console.print(f"\n[yellow]⚠[/yellow] {message}\n")
        return confirm_action("Remap volumes?", yes_flag=yes_flag, mock=mock)

    def send_event(event: str, site_id: str, status: str) -> None:
        console.print(f"[dim]{site_id}: {status}[/dim]")

    def notify(title: str, message: str) -> None:
        print_success(console, f"{title}: {message}")

    return RemapOrchestrator(
        runtime=runtime,
        site_store=store,
        site_starter=SiteStarter(runtime, timeout=config.site_start_timeout),
        confirm=confirm,
        validator=PathValidator.from_config(config),
        reporter=StatusReporter(send_event=send_event, notify=notify),
    )


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    console.print(f"[yellow]{prefix}[/yellow] {message}")
