#!/usr/bin/env python3
"""siteremap CLI - remap the host volumes of a running site."""

import typer
from rich.console import Console

from siteremap.cli_remap_commands import register_remap_commands

app = typer.Typer(
    name="siteremap",
    help="""siteremap - change a site's bind mounts without losing its container

Commits the running container, recreates it with the new volumes and the
same ports, and records the new container and image against the site.

Quick start:
  siteremap sites                                  # Known sites
  siteremap show blog                              # Current volumes and ports
  siteremap remap blog -v /Users/me/blog:/app/public  # Replace the volumes
""",
    add_completion=False,
)

console = Console()

register_remap_commands(app, console)

if __name__ == "__main__":
    app()
