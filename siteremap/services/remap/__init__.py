"""Volume remap workflow.

- PathValidator: validates proposed host/container path pairs
- ContainerInspector: captures a container's mounts, entrypoint and ports
- PortCollector: reads published ports, tolerating partial metadata
- RemapOrchestrator: drives commit, stop, recreate, persist, cleanup, start
- StatusReporter: emits status events and the completion notification
"""
from .errors import (
    ConfirmationDeclined,
    ContainerRuntimeError,
    InspectError,
    InvalidTransition,
    PersistenceError,
    RemapError,
    SiteStartError,
    ValidationError,
)
from .inspector import ContainerInspector
from .orchestrator import CONFIRM_MESSAGE, RemapOrchestrator, RemapOutcome
from .paths import PathValidator, PathViolation, format_violations, make_home_normalizer
from .ports import PortCollector
from .state_machine import Effect, Event, RemapState, advance
from .status import StatusReporter

__all__ = [
    'CONFIRM_MESSAGE',
    'ConfirmationDeclined',
    'ContainerInspector',
    'ContainerRuntimeError',
    'Effect',
    'Event',
    'InspectError',
    'InvalidTransition',
    'PathValidator',
    'PathViolation',
    'PersistenceError',
    'PortCollector',
    'RemapError',
    'RemapOrchestrator',
    'RemapOutcome',
    'RemapState',
    'SiteStartError',
    'StatusReporter',
    'ValidationError',
    'advance',
    'format_violations',
    'make_home_normalizer',
]
