"""Container inspection for remap snapshots."""
from siteremap.core.logger import get_logger
from siteremap.models.container import ContainerSnapshot, VolumeMapping
from siteremap.models.platform import PathPlatform
from siteremap.services.runtime.base import ContainerRuntime, RuntimeCommandError
from .errors import InspectError
from .paths import from_runtime_path
from .ports import parse_ports

logger = get_logger(__name__)


class ContainerInspector:
    """Reads a container's mounts, entrypoint command and ports."""

    def __init__(self, runtime: ContainerRuntime, platform: PathPlatform):
        self.runtime = runtime
        self.platform = platform

    def snapshot(self, container_id: str) -> ContainerSnapshot:
        """Capture a container before it is mutated.

        Args:
            container_id: Container to inspect

        Returns:
            ContainerSnapshot with native mount sources

        Raises:
            InspectError: If the lookup fails or the metadata is malformed
        """
        try:
            metadata = self.runtime.inspect(container_id)
        except RuntimeCommandError as e:
            raise InspectError(container_id, str(e)) from e

        if not isinstance(metadata, dict):
            raise InspectError(container_id, "metadata is not an object")

        path = metadata.get('Path')
        if not isinstance(path, str) or not path:
            raise InspectError(container_id, "missing entrypoint path")

        args = metadata.get('Args') or []
        if not isinstance(args, list):
            raise InspectError(container_id, "entrypoint args are not a list")

        raw_mounts = metadata.get('Mounts') or []
        if not isinstance(raw_mounts, list):
            raise InspectError(container_id, "mounts are not a list")

        mounts = []
        for mount in raw_mounts:
            if not isinstance(mount, dict) or not mount.get('Source') or not mount.get('Destination'):
                raise InspectError(container_id, f"malformed mount entry: {mount!r}")
            mounts.append(VolumeMapping(
                source=from_runtime_path(mount['Source'], self.platform),
                dest=mount['Destination'],
            ))

        snapshot = ContainerSnapshot(
            container_id=container_id,
            entrypoint_cmd=tuple([path, *[str(arg) for arg in args]]),
            mounts=tuple(mounts),
            ports=tuple(parse_ports(metadata)),
        )
        logger.debug(f"Snapshot of {container_id}: {len(mounts)} mounts, {len(snapshot.ports)} ports")
        return snapshot
