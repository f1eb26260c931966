"""Site record persistence."""
import fcntl
import json
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from siteremap.core.config import get_config
from siteremap.core.logger import get_logger
from siteremap.models.site import Site
from siteremap.services.remap.errors import PersistenceError

logger = get_logger(__name__)


class SiteStore:
    """JSON file of site records keyed by site id.

    Records are only ever replaced whole; ``update_site`` never merges
    fields into an existing record. Writes re-read the file under an
    exclusive lock so stores in other processes never revert each other's
    records.
    """

    def __init__(self, sites_file: Optional[Path] = None):
        """Initialize site store.

        Args:
            sites_file: Path to the sites file. Defaults to config sites_file
        """
        self.sites_file = Path(sites_file) if sites_file else get_config().sites_file
        self.state = self._load()

    def _load(self) -> dict:
        if not self.sites_file.exists():
            return self._empty_state()

        try:
            with open(self.sites_file, 'r') as f:
                state = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load sites file: {e}, using empty state")
            return self._empty_state()

        if not isinstance(state.get('sites'), dict):
            logger.warning(f"Sites file {self.sites_file} has no 'sites' table, using empty state")
            return self._empty_state()

        logger.debug(f"Loaded {len(state['sites'])} sites from {self.sites_file}")
        return state

    def _empty_state(self) -> dict:
        return {
            "version": "1.0",
            "updated_at": datetime.now().isoformat(),
            "sites": {},
        }

    def save(self) -> None:
        """Write the sites file atomically.

        Raises:
            OSError: If the file cannot be written
        """
        try:
            self.sites_file.parent.mkdir(parents=True, exist_ok=True)
            self.state["updated_at"] = datetime.now().isoformat()

            # Write to temp, then rename
            temp_file = self.sites_file.with_suffix('.tmp')
            with open(temp_file, 'w') as f:
                json.dump(self.state, f, indent=2)
            temp_file.replace(self.sites_file)
        except (IOError, OSError) as e:
            logger.error(f"Failed to save sites file: {e}")
            raise

        logger.debug(f"Saved sites to {self.sites_file}")

    @contextmanager
    def _exclusive(self):
        """Hold the sites file lock and refresh state from disk."""
        lock_file = self.sites_file.with_suffix('.lock')
        lock_file.parent.mkdir(parents=True, exist_ok=True)
        with open(lock_file, 'a+') as lock_fd:
            fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX)
            try:
                self.state = self._load()
                yield
            finally:
                fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)

    def get_site(self, site_id: str) -> Optional[Site]:
        record = self.state['sites'].get(site_id)
        if record is None:
            return None
        return Site.from_dict(dict(record, id=site_id))

    def list_sites(self) -> List[Site]:
        return [self.get_site(site_id) for site_id in sorted(self.state['sites'])]

    def add_site(self, site: Site) -> None:
        """Register a new site.

        Raises:
            ValueError: If a site with the same id exists
        """
        with self._exclusive():
            if site.id in self.state['sites']:
                raise ValueError(f"Site '{site.id}' already exists")
            self.state['sites'][site.id] = site.to_dict()
            self.save()

    def update_site(self, site_id: str, site: Site) -> None:
        """Replace a site record wholesale and save.

        Raises:
            PersistenceError: If the site is unknown or the file cannot be written
        """
        try:
            with self._exclusive():
                if site_id not in self.state['sites']:
                    raise PersistenceError(site_id, KeyError(f"unknown site '{site_id}'"))

                previous = self.state['sites'][site_id]
                self.state['sites'][site_id] = site.to_dict()
                try:
                    self.save()
                except OSError:
                    self.state['sites'][site_id] = previous
                    raise
        except OSError as e:
            raise PersistenceError(site_id, e) from e

