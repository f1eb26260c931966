"""Site records tracked by the site store."""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class SiteStatus(str, Enum):
    """Externally visible site status."""
    STOPPED = "stopped"
    PROVISIONING = "provisioning"
    RUNNING = "running"


@dataclass
class Site:
    """A logical site whose identity survives container replacement.

    Attributes:
        id: Site identifier
        name: Human readable site name
        container: ID of the container currently backing the site
        entrypoint_cmd: Command the site container runs
        image_lineage: Append-only history of images committed by remaps
        status: Current site status
        path: Site directory on the host (used as default mapping source)
    """
    id: str
    name: str
    container: str
    entrypoint_cmd: List[str] = field(default_factory=list)
    image_lineage: List[str] = field(default_factory=list)
    status: SiteStatus = SiteStatus.STOPPED
    path: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.status == SiteStatus.RUNNING

    def with_replacement(self, container_id: str, image_id: str) -> "Site":
        """Return a copy pointing at a new container with the image appended."""
        return replace(
            self,
            container=container_id,
            entrypoint_cmd=list(self.entrypoint_cmd),
            image_lineage=[*self.image_lineage, image_id],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'container': self.container,
            'entrypoint_cmd': list(self.entrypoint_cmd),
            'image_lineage': list(self.image_lineage),
            'status': self.status.value,
            'path': self.path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Site":
        """Build a site from a stored record.

        Older records keep their lineage under ``clonedImage``, either as a
        single image id or as a list.
        """
        lineage = data.get('image_lineage')
        if lineage is None:
            legacy = data.get('clonedImage')
            if isinstance(legacy, str) and legacy:
                lineage = [legacy]
            elif isinstance(legacy, list):
                lineage = list(legacy)
            else:
                lineage = []

        entrypoint = data.get('entrypoint_cmd') or []
        if isinstance(entrypoint, str):
            entrypoint = [entrypoint]

        return cls(
            id=str(data['id']),
            name=data.get('name') or str(data['id']),
            container=data['container'],
            entrypoint_cmd=list(entrypoint),
            image_lineage=list(lineage),
            status=SiteStatus(data.get('status', SiteStatus.STOPPED.value)),
            path=data.get('path'),
        )
