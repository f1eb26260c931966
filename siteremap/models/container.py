"""Container-side models captured before a remap."""
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class VolumeMapping:
    """A single host -> container bind request."""
    source: str
    dest: str

    @classmethod
    def parse(cls, value: str) -> "VolumeMapping":
        """Parse a ``SOURCE:DEST`` string.

        The split happens on the last colon that starts a container path so
        drive-letter sources like ``C:\\Users\\me:/app`` keep their drive.
        """
        index = value.rfind(":/")
        if index == 1 and value[0].isalpha():
            # Only a drive letter precedes the colon, so there is no destination
            index = -1
        if index <= 0:
            raise ValueError(f"Volume must be SOURCE:DEST, got '{value}'")
        return cls(source=value[:index], dest=value[index + 1:])

    def __str__(self) -> str:
        return f"{self.source}:{self.dest}"


@dataclass(frozen=True)
class PortBinding:
    """One published port. container_port carries no protocol suffix."""
    host_port: str
    container_port: int

    @property
    def key(self) -> str:
        """Runtime port key, e.g. ``80/tcp``."""
        return f"{self.container_port}/tcp"


@dataclass(frozen=True)
class ContainerSnapshot:
    """Read-only capture of a container taken before it is mutated."""
    container_id: str
    entrypoint_cmd: Tuple[str, ...]
    mounts: Tuple[VolumeMapping, ...] = field(default_factory=tuple)
    ports: Tuple[PortBinding, ...] = field(default_factory=tuple)
