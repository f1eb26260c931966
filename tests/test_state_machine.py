"""Tests for the remap state machine transitions."""
import pytest

from siteremap.services.remap import Effect, Event, InvalidTransition, RemapState, advance

LINEAR = [
    RemapState.IDLE,
    RemapState.VALIDATING,
    RemapState.AWAITING_CONFIRMATION,
    RemapState.COMMITTING,
    RemapState.PORT_DISCOVERY,
    RemapState.STOPPING,
    RemapState.RECREATING,
    RemapState.PERSISTING,
    RemapState.STARTING,
    RemapState.CLEANING_UP,
    RemapState.COMPLETED,
]


def test_advance_walks_states_in_order():
    state = RemapState.IDLE
    visited = [state]
    while not state.is_terminal:
        state = advance(state, Event.ADVANCE).state
        visited.append(state)

    assert visited == LINEAR


@pytest.mark.parametrize('state,effects', [
    (RemapState.VALIDATING, (Effect.VALIDATE,)),
    (RemapState.AWAITING_CONFIRMATION, (Effect.REQUEST_CONFIRMATION,)),
    (RemapState.COMMITTING, (Effect.REPORT_PROVISIONING, Effect.COMMIT)),
    (RemapState.CLEANING_UP, (Effect.REMOVE_ORIGINAL,)),
    (RemapState.COMPLETED, (Effect.REPORT_RUNNING, Effect.NOTIFY)),
])
def test_entry_effects(state, effects):
    previous = LINEAR[LINEAR.index(state) - 1]
    assert advance(previous, Event.ADVANCE).effects == effects


@pytest.mark.parametrize('state', [RemapState.VALIDATING, RemapState.AWAITING_CONFIRMATION])
def test_reject_cancels_before_side_effects(state):
    transition = advance(state, Event.REJECT)
    assert transition.state == RemapState.CANCELLED
    assert transition.effects == ()


@pytest.mark.parametrize('state', LINEAR[3:9])
def test_fail_from_any_runtime_step(state):
    assert advance(state, Event.FAIL).state == RemapState.FAILED


@pytest.mark.parametrize('state', LINEAR[3:10])
def test_runtime_steps_cannot_be_rejected(state):
    with pytest.raises(InvalidTransition):
        advance(state, Event.REJECT)


def test_validation_cannot_fail():
    with pytest.raises(InvalidTransition):
        advance(RemapState.VALIDATING, Event.FAIL)


@pytest.mark.parametrize('state', [RemapState.COMPLETED, RemapState.CANCELLED, RemapState.FAILED])
def test_terminal_states_accept_nothing(state):
    assert state.is_terminal
    for event in Event:
        with pytest.raises(InvalidTransition):
            advance(state, event)


def test_cleanup_cannot_fail_the_run():
    with pytest.raises(InvalidTransition):
        advance(RemapState.CLEANING_UP, Event.FAIL)


def test_start_precedes_cleanup():
    assert advance(RemapState.PERSISTING, Event.ADVANCE).state == RemapState.STARTING
    assert advance(RemapState.STARTING, Event.ADVANCE).effects == (Effect.REMOVE_ORIGINAL,)
