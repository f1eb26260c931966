"""Site collaborators used by the remap workflow.

- SiteStore: persists site records
- SiteStarter: starts a site's container and waits for it
"""
from .lifecycle import SiteStarter
from .store import SiteStore

__all__ = ['SiteStarter', 'SiteStore']
