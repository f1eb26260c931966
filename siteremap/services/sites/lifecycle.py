"""Starting sites after their container has been replaced."""
import time
from typing import Optional

from siteremap.core.config import get_config
from siteremap.core.logger import get_logger
from siteremap.models.site import Site
from siteremap.services.remap.errors import SiteStartError
from siteremap.services.runtime.base import ContainerRuntime

logger = get_logger(__name__)


class SiteStarter:
    """Starts a site's container and waits until it reports running."""

    def __init__(self, runtime: ContainerRuntime, timeout: Optional[int] = None,
                 poll_interval: float = 1.0):
        """Initialize starter.

        Args:
            runtime: Container runtime client
            timeout: Seconds to wait for running state (uses config default if None)
            poll_interval: Seconds between state checks
        """
        self.runtime = runtime
        self.timeout = timeout if timeout is not None else get_config().site_start_timeout
        self.poll_interval = poll_interval

    def start_site(self, site: Site) -> None:
        """Start the site's container and block until it is running.

        Raises:
            RuntimeCommandError: If the runtime refuses to start the container
            SiteStartError: If the container is not running within the timeout
        """
        logger.info(f"Starting site '{site.id}' (container {site.container})")
        self.runtime.start(site.container)

        deadline = time.monotonic() + self.timeout
        while True:
            if self.runtime.is_running(site.container):
                logger.info(f"Site '{site.id}' is running")
                return

            if time.monotonic() >= deadline:
                break
            time.sleep(self.poll_interval)

        logger.warning(f"Site '{site.id}' not running after {self.timeout}s")
        raise SiteStartError(site.id, f"container {site.container} not running after {self.timeout}s")
