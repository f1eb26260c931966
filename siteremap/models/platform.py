"""Host path platform families."""
import sys
from enum import Enum


class PathPlatform(str, Enum):
    """Path rule family of the machine running the site containers."""
    POSIX = "posix"
    DRIVE_LETTER = "drive-letter"

    @classmethod
    def current(cls) -> "PathPlatform":
        """Detect the platform family of the running interpreter."""
        return cls.DRIVE_LETTER if sys.platform == "win32" else cls.POSIX

    @classmethod
    def parse(cls, value: str) -> "PathPlatform":
        """Parse a platform name, accepting a few common aliases."""
        normalized = value.strip().lower()
        if normalized in ("win32", "windows", "drive-letter", "drive_letter"):
            return cls.DRIVE_LETTER
        if normalized in ("posix", "darwin", "linux", "macos"):
            return cls.POSIX
        raise ValueError(f"Unknown path platform: {value}")
