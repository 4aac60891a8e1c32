"""Wizard state machine: a pure reducer and the store that applies it.

Stages cycle Person -> Garment -> Result and back. No stage is terminal.
Events that are not allowed in the current state leave it unchanged.
"""

import logging
from functools import singledispatch

from ..models.events import (
    GarmentGenerationFailed,
    GarmentSelected,
    GarmentsGenerated,
    GarmentUploaded,
    GenerationFinished,
    GenerationStarted,
    HistoryRestored,
    NavigatedTo,
    PersonUploaded,
    Reset,
    RetryGarment,
    TryOnCompleted,
    TryOnFailed,
    TryOnRequested,
    WizardEvent,
)
from ..models.wizard import GenerationStatus, WizardStage, WizardState


logger = logging.getLogger(__name__)


def _update_selection(state: WizardState, **changes) -> WizardState:
    return state.model_copy(update={"selection": state.selection.model_copy(update=changes)})


@singledispatch
def apply_event(event: WizardEvent, state: WizardState) -> WizardState:
    """Return the state after `event`. Never mutates `state`."""
    raise TypeError(f"Unknown wizard event: {type(event).__name__}")


@apply_event.register
def _(event: PersonUploaded, state: WizardState) -> WizardState:
    state = _update_selection(state, person_image=event.image, result_image=None)
    return state.model_copy(update={"stage": WizardStage.GARMENT})


@apply_event.register
def _(event: GarmentUploaded, state: WizardState) -> WizardState:
    state = state.model_copy(update={"pool": state.pool.model_copy(update={"uploaded": event.image})})
    return _update_selection(state, garment_image=event.image)


@apply_event.register
def _(event: GarmentSelected, state: WizardState) -> WizardState:
    if not state.pool.contains(event.image):
        logger.debug("Ignoring selection of a garment outside the pool")
        return state
    return _update_selection(state, garment_image=event.image)


@apply_event.register
def _(event: GarmentsGenerated, state: WizardState) -> WizardState:
    if not event.images:
        return state
    state = state.model_copy(update={
        "pool": state.pool.with_generated(event.images),
        "last_failure": None,
    })
    return _update_selection(state, garment_image=event.images[-1])


@apply_event.register
def _(event: GarmentGenerationFailed, state: WizardState) -> WizardState:
    return state.model_copy(update={"last_failure": event.message})


@apply_event.register
def _(event: NavigatedTo, state: WizardState) -> WizardState:
    if event.stage is WizardStage.PERSON:
        return state.model_copy(update={"stage": WizardStage.PERSON})
    if event.stage is WizardStage.GARMENT and state.selection.person_image is not None:
        return state.model_copy(update={"stage": WizardStage.GARMENT})
    logger.debug("Navigation to %s not allowed from %s", event.stage.value, state.stage.value)
    return state


@apply_event.register
def _(event: TryOnRequested, state: WizardState) -> WizardState:
    if state.stage is not WizardStage.GARMENT or not state.can_try_on or state.in_flight:
        logger.debug("Try-on request ignored in stage %s", state.stage.value)
        return state
    return state.model_copy(update={"stage": WizardStage.RESULT, "last_failure": None})


@apply_event.register
def _(event: TryOnCompleted, state: WizardState) -> WizardState:
    # Applied whatever the current stage is: the latest response wins.
    state = state.model_copy(update={"last_failure": None})
    return _update_selection(state, result_image=event.image)


@apply_event.register
def _(event: TryOnFailed, state: WizardState) -> WizardState:
    return state.model_copy(update={"last_failure": event.message})


@apply_event.register
def _(event: RetryGarment, state: WizardState) -> WizardState:
    if state.stage is not WizardStage.RESULT:
        return state
    return state.model_copy(update={"stage": WizardStage.GARMENT})


@apply_event.register
def _(event: Reset, state: WizardState) -> WizardState:
    if state.stage is not WizardStage.RESULT:
        return state
    state = state.model_copy(update={
        "stage": WizardStage.PERSON,
        "pool": state.pool.model_copy(update={"uploaded": None}),
        "last_failure": None,
    })
    return _update_selection(state, person_image=None, garment_image=None, result_image=None)


@apply_event.register
def _(event: HistoryRestored, state: WizardState) -> WizardState:
    return _update_selection(state, result_image=event.image)


@apply_event.register
def _(event: GenerationStarted, state: WizardState) -> WizardState:
    return state.model_copy(update={"status": GenerationStatus.IN_FLIGHT})


@apply_event.register
def _(event: GenerationFinished, state: WizardState) -> WizardState:
    return state.model_copy(update={"status": GenerationStatus.IDLE})


class WizardStore:
    """Single owner of the wizard state.

    Each dispatch replaces the snapshot in one assignment, so readers never
    see a half-applied event.
    """

    def __init__(self, state: WizardState | None = None):
        self._state = state or WizardState()

    @property
    def state(self) -> WizardState:
        return self._state

    def dispatch(self, event: WizardEvent) -> WizardState:
        self._state = apply_event(event, self._state)
        return self._state
