"""Site status events and completion notification."""
from typing import Callable, Optional

from siteremap.core.logger import get_logger
from siteremap.models.site import Site, SiteStatus

logger = get_logger(__name__)

STATUS_EVENT = "updateSiteStatus"

EventSink = Callable[[str, str, str], None]
Notifier = Callable[[str, str], None]


def _log_event(event: str, site_id: str, status: str) -> None:
    logger.info(f"{event}: site '{site_id}' is {status}")


def _log_notification(title: str, message: str) -> None:
    logger.info(f"{title}: {message}")


class StatusReporter:
    """Forwards remap lifecycle changes to external sinks.

    Args:
        send_event: Called as ``send_event(event, site_id, status)``
        notify: Called as ``notify(title, message)``
    """

    def __init__(self, send_event: Optional[EventSink] = None, notify: Optional[Notifier] = None):
        self.send_event = send_event or _log_event
        self.notify = notify or _log_notification

    def provisioning(self, site: Site) -> None:
        self.send_event(STATUS_EVENT, site.id, SiteStatus.PROVISIONING.value)

    def running(self, site: Site) -> None:
        self.send_event(STATUS_EVENT, site.id, SiteStatus.RUNNING.value)

    def completed(self, site: Site) -> None:
        self.notify("Volumes Remapped", f"Volumes for {site.name} have been remapped.")
