"""Individual remap pipeline steps.

Every step takes the shared RemapContext plus the collaborator it needs,
records what it produced on the context and returns a StepResult. Steps
never raise for runtime or store faults; they report them as failures.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from siteremap.core.logger import get_logger
from siteremap.models.container import ContainerSnapshot, PortBinding, VolumeMapping
from siteremap.models.platform import PathPlatform
from siteremap.models.site import Site
from siteremap.services.runtime.base import ContainerRuntime, RuntimeCommandError
from .errors import ContainerRuntimeError, PersistenceError, RemapError, SiteStartError
from .paths import PathNormalizer, bind_source
from .ports import PortCollector

logger = get_logger(__name__)


@dataclass(frozen=True)
class StepResult:
    ok: bool
    value: Any = None
    error: Optional[RemapError] = None

    @classmethod
    def success(cls, value: Any = None) -> "StepResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: RemapError) -> "StepResult":
        return cls(ok=False, error=error)


@dataclass
class RemapContext:
    """Working state of one remap. Owned by a single orchestrator run."""
    site: Site
    snapshot: ContainerSnapshot
    mappings: List[VolumeMapping]
    platform: PathPlatform
    normalize: PathNormalizer
    image_id: Optional[str] = None
    ports: List[PortBinding] = field(default_factory=list)
    container_id: Optional[str] = None
    updated_site: Optional[Site] = None
    original_left: bool = False

    @property
    def original_container(self) -> str:
        return self.snapshot.container_id


def build_create_spec(image_id: str, entrypoint_cmd: Sequence[str],
                      ports: Sequence[PortBinding], mappings: Sequence[VolumeMapping],
                      platform: PathPlatform, normalize: PathNormalizer) -> Dict:
    """Build the runtime create spec for the replacement container.

    Ports keep their host numbers. Binds come only from ``mappings``;
    mounts of the original container that are not listed are dropped.
    """
    exposed_ports = {}
    port_bindings = {}
    for port in ports:
        exposed_ports[port.key] = {}
        port_bindings[port.key] = [{'HostPort': str(port.host_port)}]

    binds = [
        f"{bind_source(mapping.source, platform, normalize)}:{mapping.dest.strip()}"
        for mapping in mappings
    ]

    return {
        'Image': image_id,
        'Cmd': list(entrypoint_cmd),
        'Tty': True,
        'ExposedPorts': exposed_ports,
        'HostConfig': {
            'Binds': binds,
            'PortBindings': port_bindings,
        },
    }


def commit_image(ctx: RemapContext, runtime: ContainerRuntime) -> StepResult:
    try:
        ctx.image_id = runtime.commit(ctx.original_container)
    except RuntimeCommandError as e:
        return StepResult.failure(ContainerRuntimeError('commit', e))
    logger.info(f"Committed {ctx.original_container} as image {ctx.image_id}")
    return StepResult.success(ctx.image_id)


def collect_ports(ctx: RemapContext, collector: PortCollector) -> StepResult:
    # Must run against the original container while it is still up
    ctx.ports = collector.collect(ctx.original_container)
    return StepResult.success(ctx.ports)


def stop_original(ctx: RemapContext, runtime: ContainerRuntime) -> StepResult:
    try:
        runtime.kill(ctx.original_container)
    except RuntimeCommandError as e:
        logger.error(
            f"Image {ctx.image_id} was committed but container "
            f"{ctx.original_container} could not be stopped"
        )
        return StepResult.failure(ContainerRuntimeError('stop', e))
    logger.info(f"Stopped container {ctx.original_container}")
    return StepResult.success()


def create_replacement(ctx: RemapContext, runtime: ContainerRuntime) -> StepResult:
    spec = build_create_spec(
        image_id=ctx.image_id,
        entrypoint_cmd=ctx.snapshot.entrypoint_cmd,
        ports=ctx.ports,
        mappings=ctx.mappings,
        platform=ctx.platform,
        normalize=ctx.normalize,
    )
    try:
        ctx.container_id = runtime.create_container(spec)
    except RuntimeCommandError as e:
        return StepResult.failure(ContainerRuntimeError('create', e))
    logger.info(f"Created replacement container {ctx.container_id}")
    return StepResult.success(ctx.container_id)


def persist_site(ctx: RemapContext, store) -> StepResult:
    updated = ctx.site.with_replacement(ctx.container_id, ctx.image_id)
    try:
        store.update_site(updated.id, updated)
    except PersistenceError as e:
        return StepResult.failure(e)
    except OSError as e:
        return StepResult.failure(PersistenceError(updated.id, e))
    ctx.updated_site = updated
    logger.info(f"Site '{updated.id}' now uses container {updated.container}")
    return StepResult.success(updated)


def remove_original(ctx: RemapContext, runtime: ContainerRuntime) -> StepResult:
    # The replacement is already recorded and running; a stale original is a leftover
    try:
        runtime.remove(ctx.original_container)
    except RuntimeCommandError as e:
        ctx.original_left = True
        logger.warning(f"Could not remove original container {ctx.original_container}: {e}")
        return StepResult.success()
    logger.info(f"Removed original container {ctx.original_container}")
    return StepResult.success()


def start_site(ctx: RemapContext, starter) -> StepResult:
    try:
        starter.start_site(ctx.updated_site)
    except (RuntimeCommandError, SiteStartError) as e:
        return StepResult.failure(ContainerRuntimeError('start', e))
    return StepResult.success()
