"""Published port discovery for a running container."""
from typing import Dict, List

from siteremap.core.logger import get_logger
from siteremap.models.container import PortBinding
from siteremap.services.runtime.base import ContainerRuntime, RuntimeCommandError

logger = get_logger(__name__)


def parse_ports(metadata: Dict) -> List[PortBinding]:
    """Extract published ports from container metadata.

    Entries that are missing, empty or malformed are skipped; whatever
    parses is returned in runtime order.

    Args:
        metadata: Container metadata as returned by the runtime

    Returns:
        List of PortBinding (possibly empty)
    """
    network = metadata.get('NetworkSettings') if isinstance(metadata, dict) else None
    ports = network.get('Ports') if isinstance(network, dict) else None
    if not isinstance(ports, dict):
        logger.debug("Container exposes no port metadata")
        return []

    bindings = []
    for port_key, slots in ports.items():
        if not isinstance(slots, list) or not slots:
            logger.debug(f"Port {port_key} is not published, skipping")
            continue

        first = slots[0]
        host_port = first.get('HostPort') if isinstance(first, dict) else None
        if host_port in (None, ''):
            logger.warning(f"Port {port_key} has no host port, skipping")
            continue

        number, _, protocol = str(port_key).partition('/')
        if protocol and protocol != 'tcp':
            # PortBinding keys are always tcp
            logger.debug(f"Port {port_key} is not tcp, skipping")
            continue

        try:
            container_port = int(number)
        except ValueError:
            logger.warning(f"Unrecognised port key '{port_key}', skipping")
            continue

        bindings.append(PortBinding(host_port=str(host_port), container_port=container_port))

    return bindings


class PortCollector:
    """Reads a container's current published ports."""

    def __init__(self, runtime: ContainerRuntime):
        self.runtime = runtime

    def collect(self, container_id: str) -> List[PortBinding]:
        """Return the published ports of a container.

        Never raises: a failed lookup yields an empty list.
        """
        try:
            metadata = self.runtime.inspect(container_id)
        except RuntimeCommandError as e:
            logger.warning(f"Could not read ports of container {container_id}: {e}")
            return []

        ports = parse_ports(metadata)
        logger.info(
            f"Container {container_id} publishes "
            f"{', '.join(f'{p.host_port}->{p.key}' for p in ports) or 'no ports'}"
        )
        return ports
