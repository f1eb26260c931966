"""Site and volume remap CLI commands."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from siteremap.cli_support import (
    build_orchestrator,
    get_runtime,
    get_site_store,
    load_mappings_file,
    parse_volume_options,
    print_error,
    print_success,
    print_warning,
    setup_file_logging,
)
from siteremap.core.config import get_config
from siteremap.core.lock import LockError, site_lock
from siteremap.models.container import ContainerSnapshot, VolumeMapping
from siteremap.models.site import Site, SiteStatus
from siteremap.services.remap import (
    ContainerInspector,
    InspectError,
    PathValidator,
    RemapState,
    ValidationError,
    format_violations,
)
from siteremap.services.sites import SiteStore


def _mounts_table(title: str, mounts: List[VolumeMapping]) -> Table:
    table = Table(title=title)
    table.add_column("Host Source", style="cyan")
    table.add_column("Container Destination")
    for mount in mounts:
        table.add_row(mount.source, mount.dest)
    return table


def _print_snapshot(console: Console, snapshot: ContainerSnapshot) -> None:
    console.print(_mounts_table(f"Volumes of {snapshot.container_id}", list(snapshot.mounts)))

    ports = Table(title="Published ports")
    ports.add_column("Host")
    ports.add_column("Container")
    for port in snapshot.ports:
        ports.add_row(port.host_port, port.key)
    console.print(ports)
    console.print(f"[dim]Command: {' '.join(snapshot.entrypoint_cmd)}[/dim]")


def _load_site(console: Console, site_id: str, store: Optional[SiteStore] = None) -> Site:
    site = (store or get_site_store()).get_site(site_id)
    if site is None:
        print_error(console, f"Site '{site_id}' not found")
        raise typer.Exit(1)
    return site


def register_remap_commands(root: typer.Typer, console: Console) -> None:
    """Attach site and remap commands to the main CLI."""

    @root.command("sites")
    def sites_command() -> None:
        """List known sites."""
        sites = get_site_store().list_sites()
        if not sites:
            console.print("[dim]No sites registered[/dim]")
            return

        table = Table(title="Sites")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Status")
        table.add_column("Container")
        table.add_column("Images", justify="right")
        for site in sites:
            table.add_row(site.id, site.name, site.status.value, site.container[:12],
                          str(len(site.image_lineage)))
        console.print(table)

    @root.command("register")
    def register_command(
        site_id: str = typer.Argument(..., help="New site identifier."),
        container: str = typer.Option(..., "--container", "-c", help="Container backing the site."),
        name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name."),
        path: Optional[str] = typer.Option(None, "--path", help="Site directory on the host."),
    ) -> None:
        """Register an existing container as a site."""
        config = get_config()
        runtime = get_runtime()
        try:
            snapshot = ContainerInspector(runtime, config.platform).snapshot(container)
        except InspectError as exc:
            print_error(console, str(exc))
            raise typer.Exit(1) from exc

        running = runtime.is_running(container)
        site = Site(
            id=site_id,
            name=name or site_id,
            container=container,
            entrypoint_cmd=list(snapshot.entrypoint_cmd),
            status=SiteStatus.RUNNING if running else SiteStatus.STOPPED,
            path=path,
        )
        try:
            get_site_store().add_site(site)
        except ValueError as exc:
            print_error(console, str(exc))
            raise typer.Exit(1) from exc
        except OSError as exc:
            print_error(console, f"Could not save site: {exc}")
            raise typer.Exit(1) from exc

        print_success(console, f"Registered site '{site_id}' ({site.status.value})")

    @root.command("show")
    def show_command(
        site_id: str = typer.Argument(..., help="Site identifier."),
    ) -> None:
        """Show the current volumes and ports of a site."""
        site = _load_site(console, site_id)
        inspector = ContainerInspector(get_runtime(), get_config().platform)
        try:
            snapshot = inspector.snapshot(site.container)
        except InspectError as exc:
            print_error(console, str(exc))
            raise typer.Exit(1) from exc

        console.print(f"[bold]{site.name}[/bold] ({site.status.value})")
        _print_snapshot(console, snapshot)

    @root.command("lineage")
    def lineage_command(
        site_id: str = typer.Argument(..., help="Site identifier."),
    ) -> None:
        """Show the images committed by earlier remaps, oldest first."""
        site = _load_site(console, site_id)
        if not site.image_lineage:
            console.print("[dim]No remaps recorded[/dim]")
            return
        for index, image_id in enumerate(site.image_lineage, start=1):
            console.print(f"{index:>3}  {image_id}")

    @root.command("remap")
    def remap_command(
        site_id: str = typer.Argument(..., help="Site identifier."),
        volume: Optional[List[str]] = typer.Option(
            None, "--volume", "-v", help="Volume mapping SOURCE:DEST (repeatable).", metavar="SOURCE:DEST"
        ),
        file: Optional[Path] = typer.Option(None, "--file", "-f", help="YAML file with a 'volumes' list."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Write a detailed log here."),
        verbose: bool = typer.Option(False, "--verbose", help="Verbose logging."),
    ) -> None:
        """Replace the site's container with one using the given volumes.

        The new list replaces all existing volumes; mounts not listed are dropped.
        """
        if log_file or verbose:
            setup_file_logging(log_file=log_file, verbose=verbose)

        mappings = []
        if file:
            mappings.extend(load_mappings_file(file))
        if volume:
            mappings.extend(parse_volume_options(volume))
        if not mappings:
            print_error(console, "Provide at least one --volume or a --file")
            raise typer.Exit(2)

        config = get_config()
        runtime = get_runtime()

        try:
            with site_lock(site_id, lock_dir=config.sites_file.parent / "locks"):
                # Read the record only once no other remap of this site can change it
                store = get_site_store(config)
                site = _load_site(console, site_id, store)
                if not runtime.is_running(site.container):
                    print_error(console, f"Site '{site_id}' is not running. Start the site to remap volumes.")
                    raise typer.Exit(1)

                try:
                    snapshot = ContainerInspector(runtime, config.platform).snapshot(site.container)
                except InspectError as exc:
                    print_error(console, str(exc))
                    raise typer.Exit(1) from exc

                console.print(_mounts_table("Current volumes", list(snapshot.mounts)))
                console.print(_mounts_table("New volumes", mappings))

                orchestrator = build_orchestrator(runtime, store, console, yes_flag=yes, config=config)
                outcome = orchestrator.remap(site, snapshot, mappings)
        except LockError as exc:
            print_error(console, str(exc))
            raise typer.Exit(1) from exc

        if outcome.succeeded:
            console.print(f"[dim]Container: {outcome.site.container}[/dim]")
            console.print(f"[dim]Image: {outcome.image_id}[/dim]")
            if outcome.leftover_container:
                print_warning(console, f"Original container left in place: {outcome.leftover_container}")
            return

        if outcome.state == RemapState.CANCELLED:
            if isinstance(outcome.error, ValidationError):
                roots = PathValidator.from_config(config).allowed_roots
                print_error(console, format_violations(outcome.error.violations, roots))
            else:
                print_warning(console, str(outcome.error))
            raise typer.Exit(1)

        print_error(console, f"Remap failed: {outcome.error}")
        if outcome.image_id:
            print_warning(console, f"Committed image left in place: {outcome.image_id}")
        if outcome.container_id:
            print_warning(console, f"Replacement container left in place: {outcome.container_id}")
        print_warning(console, "No changes were rolled back; check the site's containers manually.")
        raise typer.Exit(1)
