"""Docker runtime driven through the docker CLI."""
import copy
import json
import subprocess
from itertools import count
from typing import Dict, List

from siteremap.core.config import get_config
from siteremap.core.logger import get_logger
from .base import ContainerRuntime, RuntimeCommandError

logger = get_logger(__name__)

# Metadata returned for every container in mock mode
MOCK_CONTAINER = {
    'Path': '/entrypoint.sh',
    'Args': [],
    'State': {'Running': True},
    'Mounts': [
        {
            'Type': 'bind',
            'Source': '/Users/demo/Local Sites/blog/app/public',
            'Destination': '/app/public',
        },
    ],
    'NetworkSettings': {
        'Ports': {
            '80/tcp': [{'HostIp': '0.0.0.0', 'HostPort': '4000'}],
            '3306/tcp': [{'HostIp': '0.0.0.0', 'HostPort': '4001'}],
        },
    },
}


class DockerRuntime(ContainerRuntime):
    """Container runtime backed by the ``docker`` command line client."""

    def __init__(self, binary: str = None, timeout: int = None, mock: bool = False):
        """Initialize docker runtime.

        Args:
            binary: docker executable (defaults to config docker_binary)
            timeout: Per-command timeout in seconds (defaults to config command_timeout)
            mock: If True, log commands instead of running them
        """
        super().__init__(mock)
        config = get_config()
        self.binary = binary or config.docker_binary
        self.timeout = timeout if timeout is not None else config.command_timeout
        self._mock_ids = count(1)

    def inspect(self, container_id: str) -> Dict:
        """Return ``docker inspect`` output for one container."""
        cmd = [self.binary, 'inspect', '--type', 'container', container_id]

        if self.mock:
            logger.info(f"MOCK: Would run: {' '.join(cmd)}")
            return dict(copy.deepcopy(MOCK_CONTAINER), Id=container_id)

        output = self._run(cmd)
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise RuntimeCommandError(cmd, f"invalid inspect output: {e}")

        if not isinstance(data, list) or not data:
            raise RuntimeCommandError(cmd, "no such container")
        return data[0]

    def commit(self, container_id: str) -> str:
        """Commit a container and return the new image ID."""
        cmd = [self.binary, 'commit', container_id]

        if self.mock:
            logger.info(f"MOCK: Would run: {' '.join(cmd)}")
            return f"sha256:mock{next(self._mock_ids):04d}"

        image_id = self._run(cmd).strip()
        logger.info(f"Committed container {container_id} to image {image_id}")
        return image_id

    def kill(self, container_id: str) -> None:
        """Kill a running container."""
        self._run_or_log([self.binary, 'kill', container_id])

    def create_container(self, spec: Dict) -> str:
        """Create a container from an API style create spec."""
        cmd = self.build_create_command(spec)

        if self.mock:
            logger.info(f"MOCK: Would run: {' '.join(cmd)}")
            return f"mock-container-{next(self._mock_ids)}"

        container_id = self._run(cmd).strip()
        logger.info(f"Created container {container_id} from image {spec['Image']}")
        return container_id

    def remove(self, container_id: str) -> None:
        """Remove a container."""
        self._run_or_log([self.binary, 'rm', container_id])

    def start(self, container_id: str) -> None:
        """Start a container."""
        self._run_or_log([self.binary, 'start', container_id])

    def build_create_command(self, spec: Dict) -> List[str]:
        """Translate a create spec into a ``docker create`` command line.

        Args:
            spec: Dict with Image, Cmd, Tty, ExposedPorts and HostConfig

        Returns:
            Command list ready for subprocess
        """
        host_config = spec.get('HostConfig', {})
        cmd = [self.binary, 'create']

        if spec.get('Tty'):
            cmd.append('--tty')

        for port_key in spec.get('ExposedPorts', {}):
            cmd.extend(['--expose', port_key])

        for port_key, bindings in host_config.get('PortBindings', {}).items():
            for binding in bindings:
                cmd.extend(['--publish', f"{binding['HostPort']}:{port_key}"])

        for bind in host_config.get('Binds', []):
            cmd.extend(['--volume', bind])

        cmd.append(spec['Image'])

        command = spec.get('Cmd') or []
        if isinstance(command, str):
            command = [command]
        cmd.extend(command)

        return cmd

    def _run_or_log(self, cmd: List[str]) -> None:
        if self.mock:
            logger.info(f"MOCK: Would run: {' '.join(cmd)}")
            return
        self._run(cmd)

    def _run(self, cmd: List[str]) -> str:
        """Run a docker command and return its stdout.

        Raises:
            RuntimeCommandError: On non-zero exit, timeout or missing binary
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {' '.join(cmd)}: {e.stderr}")
            raise RuntimeCommandError(cmd, e.stderr or str(e)) from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"Command timed out after {self.timeout}s: {' '.join(cmd)}")
            raise RuntimeCommandError(cmd, f"timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise RuntimeCommandError(cmd, f"{self.binary} not found") from e

        return result.stdout
