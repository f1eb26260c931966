"""siteremap runtime configuration and settings."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from siteremap.models.platform import PathPlatform

DEFAULT_USER_ROOTS = {
    PathPlatform.POSIX: "/Users",
    PathPlatform.DRIVE_LETTER: "C:\\Users",
}


def _default_sites_file() -> Path:
    return Path.home() / ".siteremap" / "sites.json"


@dataclass
class RemapConfig:
    """Runtime configuration for remap operations.

    Attributes:
        platform: Path rule family used for validation and bind formatting
        home_dir: Directory that ``~`` resolves to
        user_root: Root every source path must live under (per-user root)
        external_root: Second allowed source root on POSIX (external volumes)
        sites_file: JSON file holding the site records
        docker_binary: Container runtime CLI executable
        site_start_timeout: Seconds to wait for a started site to report running (default: 30)
        command_timeout: Timeout in seconds for a single runtime command (default: 120)
    """

    platform: PathPlatform = field(default_factory=PathPlatform.current)
    home_dir: Path = field(default_factory=Path.home)
    user_root: Optional[str] = None  # Defaults per platform
    external_root: str = "/Volumes"
    sites_file: Path = field(default_factory=_default_sites_file)
    docker_binary: str = "docker"
    site_start_timeout: int = 30
    command_timeout: int = 120

    def __post_init__(self):
        if self.user_root is None:
            self.user_root = DEFAULT_USER_ROOTS[self.platform]

    @classmethod
    def from_env(cls) -> "RemapConfig":
        """Create config from environment variables.

        Environment variables:
            SITEREMAP_PLATFORM: posix or drive-letter
            SITEREMAP_HOME: Home directory for ``~`` expansion
            SITEREMAP_USER_ROOT: Per-user source root
            SITEREMAP_EXTERNAL_ROOT: External volumes source root
            SITEREMAP_SITES_FILE: Site records file
            SITEREMAP_DOCKER: Runtime CLI executable
            SITEREMAP_START_TIMEOUT: Site start timeout in seconds
            SITEREMAP_COMMAND_TIMEOUT: Runtime command timeout in seconds

        Returns:
            RemapConfig instance with values from environment or defaults
        """
        platform_name = os.getenv("SITEREMAP_PLATFORM")
        platform = PathPlatform.parse(platform_name) if platform_name else PathPlatform.current()

        home = os.getenv("SITEREMAP_HOME")
        sites_file = os.getenv("SITEREMAP_SITES_FILE")

        return cls(
            platform=platform,
            home_dir=Path(home) if home else Path.home(),
            user_root=os.getenv("SITEREMAP_USER_ROOT"),
            external_root=os.getenv("SITEREMAP_EXTERNAL_ROOT", cls.external_root),
            sites_file=Path(sites_file) if sites_file else _default_sites_file(),
            docker_binary=os.getenv("SITEREMAP_DOCKER", cls.docker_binary),
            site_start_timeout=int(
                os.getenv("SITEREMAP_START_TIMEOUT", cls.site_start_timeout)
            ),
            command_timeout=int(
                os.getenv("SITEREMAP_COMMAND_TIMEOUT", cls.command_timeout)
            ),
        )


# Global config instance (can be overridden)
_config: Optional[RemapConfig] = None


def get_config() -> RemapConfig:
    """Get the global siteremap configuration.

    Returns:
        RemapConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = RemapConfig.from_env()
    return _config


def set_config(config: Optional[RemapConfig]):
    """Set the global siteremap configuration.

    Args:
        config: RemapConfig instance to use globally (None re-reads the environment)
    """
    global _config
    _config = config
