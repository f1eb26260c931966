"""Errors raised or reported by the remap workflow."""
from typing import List, Optional


class RemapError(Exception):
    """Base class for all remap errors."""
    pass


class ValidationError(RemapError):
    """One or more proposed volume mappings broke the path rules."""

    def __init__(self, violations: List):
        self.violations = list(violations)
        super().__init__(
            "Invalid paths provided:\n" + "\n".join(f"  - {v}" for v in self.violations)
        )


class ConfirmationDeclined(RemapError):
    """The user declined the irreversible remap."""

    def __init__(self, site_id: str):
        self.site_id = site_id
        super().__init__(f"Remap of site '{site_id}' was cancelled")


class ContainerRuntimeError(RemapError):
    """A runtime call failed during one pipeline step.

    Attributes:
        step: Step that failed (commit, stop, create, remove, start)
        cause: Underlying exception
    """

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"{step} failed: {cause}")


class PersistenceError(RemapError):
    """The site store could not save the updated site record."""

    def __init__(self, site_id: str, cause: Optional[Exception] = None):
        self.site_id = site_id
        self.cause = cause
        message = f"Failed to save site '{site_id}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class InspectError(RemapError):
    """Container metadata could not be read or was malformed."""

    def __init__(self, container_id: str, reason: str):
        self.container_id = container_id
        self.reason = reason
        super().__init__(f"Cannot inspect container {container_id}: {reason}")


class SiteStartError(RemapError):
    """A started site did not come up."""

    def __init__(self, site_id: str, reason: str):
        self.site_id = site_id
        self.reason = reason
        super().__init__(f"Site '{site_id}' did not start: {reason}")


class InvalidTransition(RemapError):
    """An event was fed to a state that does not accept it."""

    def __init__(self, state, event):
        self.state = state
        self.event = event
        super().__init__(f"Event '{event.value}' is not valid in state '{state.value}'")
