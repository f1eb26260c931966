"""Remap state machine.

States advance linearly. ``advance`` is a pure function from (state, event)
to the next state plus the effects the driver must perform on entering it:

    idle -> validating -> awaiting_confirmation -> committing
         -> port_discovery -> stopping -> recreating -> persisting
         -> starting -> cleaning_up -> completed

REJECT ends validation or confirmation in ``cancelled``; FAIL ends any step
from committing through starting in ``failed``. Cleanup cannot fail the run:
a container that could not be removed is reported as a leftover.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import InvalidTransition


class RemapState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTING = "committing"
    PORT_DISCOVERY = "port_discovery"
    STOPPING = "stopping"
    RECREATING = "recreating"
    PERSISTING = "persisting"
    STARTING = "starting"
    CLEANING_UP = "cleaning_up"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RemapState.COMPLETED, RemapState.CANCELLED, RemapState.FAILED)


class Event(str, Enum):
    ADVANCE = "advance"
    REJECT = "reject"
    FAIL = "fail"


class Effect(str, Enum):
    """Side effects requested from the driver."""
    VALIDATE = "validate"
    REQUEST_CONFIRMATION = "request_confirmation"
    REPORT_PROVISIONING = "report_provisioning"
    COMMIT = "commit"
    COLLECT_PORTS = "collect_ports"
    STOP = "stop"
    CREATE = "create"
    PERSIST = "persist"
    REMOVE_ORIGINAL = "remove_original"
    START = "start"
    REPORT_RUNNING = "report_running"
    NOTIFY = "notify"


_NEXT = {
    RemapState.IDLE: RemapState.VALIDATING,
    RemapState.VALIDATING: RemapState.AWAITING_CONFIRMATION,
    RemapState.AWAITING_CONFIRMATION: RemapState.COMMITTING,
    RemapState.COMMITTING: RemapState.PORT_DISCOVERY,
    RemapState.PORT_DISCOVERY: RemapState.STOPPING,
    RemapState.STOPPING: RemapState.RECREATING,
    RemapState.RECREATING: RemapState.PERSISTING,
    RemapState.PERSISTING: RemapState.STARTING,
    RemapState.STARTING: RemapState.CLEANING_UP,
    RemapState.CLEANING_UP: RemapState.COMPLETED,
}

_ENTRY_EFFECTS = {
    RemapState.VALIDATING: (Effect.VALIDATE,),
    RemapState.AWAITING_CONFIRMATION: (Effect.REQUEST_CONFIRMATION,),
    RemapState.COMMITTING: (Effect.REPORT_PROVISIONING, Effect.COMMIT),
    RemapState.PORT_DISCOVERY: (Effect.COLLECT_PORTS,),
    RemapState.STOPPING: (Effect.STOP,),
    RemapState.RECREATING: (Effect.CREATE,),
    RemapState.PERSISTING: (Effect.PERSIST,),
    RemapState.STARTING: (Effect.START,),
    RemapState.CLEANING_UP: (Effect.REMOVE_ORIGINAL,),
    RemapState.COMPLETED: (Effect.REPORT_RUNNING, Effect.NOTIFY),
}

# States whose step may be declined without side effects
_REJECTABLE = (RemapState.VALIDATING, RemapState.AWAITING_CONFIRMATION)

# States whose failure ends the run
_FALLIBLE = (
    RemapState.COMMITTING,
    RemapState.PORT_DISCOVERY,
    RemapState.STOPPING,
    RemapState.RECREATING,
    RemapState.PERSISTING,
    RemapState.STARTING,
)


@dataclass(frozen=True)
class Transition:
    state: RemapState
    effects: Tuple[Effect, ...] = ()


def advance(state: RemapState, event: Event) -> Transition:
    """Compute the next state and the effects of entering it.

    Raises:
        InvalidTransition: If the event is not accepted in this state
    """
    if state.is_terminal:
        raise InvalidTransition(state, event)

    if event == Event.ADVANCE:
        next_state = _NEXT[state]
        return Transition(next_state, _ENTRY_EFFECTS.get(next_state, ()))

    if event == Event.REJECT and state in _REJECTABLE:
        return Transition(RemapState.CANCELLED)

    if event == Event.FAIL and state in _FALLIBLE:
        return Transition(RemapState.FAILED)

    raise InvalidTransition(state, event)
