"""Abstract base class for container runtimes."""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class RuntimeCommandError(Exception):
    """Raised when the container runtime rejects or fails a command."""

    def __init__(self, command: List[str], detail: str):
        self.command = list(command)
        self.detail = detail.strip() if detail else ''
        super().__init__(f"{' '.join(self.command)}: {self.detail or 'command failed'}")


class ContainerRuntime(ABC):
    """Interface the remap workflow consumes from a container runtime."""

    def __init__(self, mock: bool = False):
        """Initialize runtime.

        Args:
            mock: If True, simulate operations without making real changes
        """
        self.mock = mock

    @abstractmethod
    def inspect(self, container_id: str) -> Dict:
        """Return the runtime's raw metadata for a container.

        Raises:
            RuntimeCommandError: If the container cannot be inspected
        """
        pass

    @abstractmethod
    def commit(self, container_id: str) -> str:
        """Commit the container's current filesystem to a new image.

        Returns:
            ID of the new image
        """
        pass

    @abstractmethod
    def kill(self, container_id: str) -> None:
        """Stop a running container immediately."""
        pass

    @abstractmethod
    def create_container(self, spec: Dict) -> str:
        """Create (but do not start) a container.

        Args:
            spec: Create spec with Image, Cmd, Tty, ExposedPorts and
                HostConfig (Binds, PortBindings)

        Returns:
            ID of the new container
        """
        pass

    @abstractmethod
    def remove(self, container_id: str) -> None:
        """Remove a stopped container."""
        pass

    @abstractmethod
    def start(self, container_id: str) -> None:
        """Start a created or stopped container."""
        pass

    def is_running(self, container_id: str) -> Optional[bool]:
        """Return whether the container reports itself running.

        Returns:
            True/False from runtime state, None if the state is unreadable
        """
        try:
            info = self.inspect(container_id)
        except RuntimeCommandError:
            return None
        state = info.get('State') if isinstance(info, dict) else None
        if not isinstance(state, dict):
            return None
        return bool(state.get('Running'))
