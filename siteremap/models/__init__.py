"""Data models for siteremap."""
from siteremap.models.container import ContainerSnapshot, PortBinding, VolumeMapping
from siteremap.models.platform import PathPlatform
from siteremap.models.site import Site, SiteStatus

__all__ = [
    'ContainerSnapshot',
    'PathPlatform',
    'PortBinding',
    'Site',
    'SiteStatus',
    'VolumeMapping',
]
