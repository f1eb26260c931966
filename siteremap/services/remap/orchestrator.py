"""Volume remap orchestration.

Drives the state machine in ``state_machine`` through the steps in ``steps``.
The pipeline is best-effort forward progress: a failure after the image is
committed leaves whatever was produced so far (image, stopped or running
original, created replacement) in place. Nothing is retried or rolled back;
the outcome reports what exists so it can be remediated by hand.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from siteremap.core.logger import get_logger
from siteremap.models.container import ContainerSnapshot, VolumeMapping
from siteremap.models.site import Site
from siteremap.services.runtime.base import ContainerRuntime
from . import steps
from .errors import ConfirmationDeclined, RemapError, ValidationError
from .paths import PathValidator
from .ports import PortCollector
from .state_machine import Effect, Event, RemapState, advance
from .status import StatusReporter
from .steps import RemapContext, StepResult

logger = get_logger(__name__)

CONFIRM_MESSAGE = """Are you sure you want to remap the volumes for this site? \
There may be inadvertent effects if volumes aren't mapped correctly.

Last but not least, make sure you have an up-to-date backup.

There is no going back after this is done."""


@dataclass
class RemapOutcome:
    """Result of one remap run.

    Attributes:
        state: Final state (completed, cancelled or failed)
        site: Updated site if persisted, otherwise the site as passed in
        image_id: Image committed during the run, if any
        container_id: Replacement container created during the run, if any
        error: Error that ended the run early
        leftover_container: Original container that could not be removed
        history: Every state entered, in order
    """
    state: RemapState
    site: Site
    image_id: Optional[str] = None
    container_id: Optional[str] = None
    error: Optional[RemapError] = None
    leftover_container: Optional[str] = None
    history: List[RemapState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == RemapState.COMPLETED


class RemapOrchestrator:
    """Remaps the bind mounts of a site's container.

    Performs no locking: callers must not run two remaps of one site at once.
    """

    def __init__(self, runtime: ContainerRuntime, site_store, site_starter,
                 confirm: Callable[[str], bool], validator: PathValidator,
                 reporter: Optional[StatusReporter] = None):
        """Initialize orchestrator.

        Args:
            runtime: Container runtime client
            site_store: Object with ``update_site(site_id, site)``
            site_starter: Object with ``start_site(site)`` returning once running
            confirm: Asked with the warning message, returns True to proceed
            validator: Path validator; its platform and normalizer also format binds
            reporter: Status sink (defaults to logging)
        """
        self.runtime = runtime
        self.site_store = site_store
        self.site_starter = site_starter
        self.confirm = confirm
        self.validator = validator
        self.reporter = reporter or StatusReporter()
        self.port_collector = PortCollector(runtime)

    def remap(self, site: Site, snapshot: ContainerSnapshot,
              mappings: Sequence[VolumeMapping]) -> RemapOutcome:
        """Run one remap to completion, cancellation or failure.

        Args:
            site: Site being remapped (not modified; a copy is persisted)
            snapshot: Capture of the site's current container
            mappings: Complete new list of volume mappings

        Returns:
            RemapOutcome describing where the run ended
        """
        if snapshot.container_id != site.container:
            raise ValueError(
                f"Snapshot is of container {snapshot.container_id}, "
                f"site '{site.id}' uses {site.container}"
            )

        ctx = RemapContext(
            site=site,
            snapshot=snapshot,
            mappings=list(mappings),
            platform=self.validator.platform,
            normalize=self.validator.normalize,
        )

        history = [RemapState.IDLE]
        error = None
        transition = advance(RemapState.IDLE, Event.ADVANCE)

        while True:
            state = transition.state
            history.append(state)
            logger.debug(f"Remap of site '{site.id}': {state.value}")

            result = self._perform(transition.effects, ctx)
            if state.is_terminal:
                break

            if result.ok:
                event = Event.ADVANCE
            else:
                error = result.error
                event = Event.REJECT if isinstance(error, (ValidationError, ConfirmationDeclined)) else Event.FAIL

            transition = advance(state, event)

        if state == RemapState.FAILED:
            logger.error(f"Remap of site '{site.id}' failed: {error}")
            self._log_leftovers(ctx)
        elif state == RemapState.CANCELLED:
            logger.info(f"Remap of site '{site.id}' cancelled: {error}")
        else:
            logger.info(f"Remap of site '{site.id}' completed")

        return RemapOutcome(
            state=state,
            site=ctx.updated_site or site,
            image_id=ctx.image_id,
            container_id=ctx.container_id,
            error=error,
            leftover_container=ctx.original_container if ctx.original_left else None,
            history=history,
        )

    def _perform(self, effects, ctx: RemapContext) -> StepResult:
        for effect in effects:
            result = self._run_effect(effect, ctx)
            if not result.ok:
                return result
        return StepResult.success()

    def _run_effect(self, effect: Effect, ctx: RemapContext) -> StepResult:
        if effect == Effect.VALIDATE:
            violations = self.validator.validate(ctx.mappings)
            if violations:
                return StepResult.failure(ValidationError(violations))
            return StepResult.success()

        if effect == Effect.REQUEST_CONFIRMATION:
            if not self.confirm(CONFIRM_MESSAGE):
                return StepResult.failure(ConfirmationDeclined(ctx.site.id))
            return StepResult.success()

        if effect == Effect.REPORT_PROVISIONING:
            self.reporter.provisioning(ctx.site)
            return StepResult.success()

        if effect == Effect.COMMIT:
            return steps.commit_image(ctx, self.runtime)
        if effect == Effect.COLLECT_PORTS:
            return steps.collect_ports(ctx, self.port_collector)
        if effect == Effect.STOP:
            return steps.stop_original(ctx, self.runtime)
        if effect == Effect.CREATE:
            return steps.create_replacement(ctx, self.runtime)
        if effect == Effect.PERSIST:
            return steps.persist_site(ctx, self.site_store)
        if effect == Effect.REMOVE_ORIGINAL:
            return steps.remove_original(ctx, self.runtime)
        if effect == Effect.START:
            return steps.start_site(ctx, self.site_starter)

        if effect == Effect.REPORT_RUNNING:
            self.reporter.running(ctx.updated_site)
            return StepResult.success()
        if effect == Effect.NOTIFY:
            self.reporter.completed(ctx.updated_site)
            return StepResult.success()

        raise ValueError(f"Unhandled effect: {effect}")

    def _log_leftovers(self, ctx: RemapContext) -> None:
        if ctx.image_id:
            logger.warning(f"Committed image {ctx.image_id} was left in place")
        if ctx.container_id and ctx.updated_site is None:
            logger.warning(f"Created container {ctx.container_id} is not registered with the site")