"""Shared test fixtures for siteremap tests."""
import copy
from itertools import count

import pytest

from siteremap.core.config import set_config
from siteremap.models.container import ContainerSnapshot, PortBinding, VolumeMapping
from siteremap.models.platform import PathPlatform
from siteremap.models.site import Site, SiteStatus
from siteremap.services.remap import PathValidator, RemapOrchestrator, StatusReporter
from siteremap.services.remap.errors import PersistenceError
from siteremap.services.remap.paths import make_home_normalizer
from siteremap.services.runtime.base import ContainerRuntime, RuntimeCommandError
from siteremap.services.sites.lifecycle import SiteStarter


def container_metadata(path='/entrypoint.sh', args=(), mounts=(), ports=None, running=True):
    """Build docker-inspect style metadata."""
    return {
        'Path': path,
        'Args': list(args),
        'State': {'Running': running},
        'Mounts': [{'Type': 'bind', 'Source': s, 'Destination': d} for s, d in mounts],
        'NetworkSettings': {
            'Ports': {
                key: [{'HostIp': '0.0.0.0', 'HostPort': host}]
                for key, host in (ports or {}).items()
            },
        },
    }


class FakeRuntime(ContainerRuntime):
    """In-memory container runtime recording every call."""

    def __init__(self, containers=None, fail_on=()):
        super().__init__(mock=False)
        self.containers = {cid: copy.deepcopy(meta) for cid, meta in (containers or {}).items()}
        self.images = []
        self.calls = []
        self.created_specs = []
        self.fail_on = set(fail_on)
        self._ids = count(1)

    def _record(self, op, arg):
        self.calls.append((op, arg))
        if op in self.fail_on:
            raise RuntimeCommandError(['docker', op, arg], f"{op} refused")

    def _require(self, op, container_id):
        if container_id not in self.containers:
            raise RuntimeCommandError(['docker', op, container_id], "No such container")

    def inspect(self, container_id):
        self._record('inspect', container_id)
        self._require('inspect', container_id)
        return copy.deepcopy(self.containers[container_id])

    def commit(self, container_id):
        self._record('commit', container_id)
        self._require('commit', container_id)
        image_id = f"sha256:img{next(self._ids)}"
        self.images.append(image_id)
        return image_id

    def kill(self, container_id):
        self._record('kill', container_id)
        self._require('kill', container_id)
        self.containers[container_id]['State']['Running'] = False

    def create_container(self, spec):
        self._record('create', spec['Image'])
        container_id = f"ctr{next(self._ids)}"
        self.created_specs.append(spec)
        cmd = list(spec.get('Cmd') or [])
        self.containers[container_id] = {
            'Path': cmd[0] if cmd else '',
            'Args': cmd[1:],
            'Image': spec['Image'],
            'State': {'Running': False},
            'Mounts': [
                {'Type': 'bind', 'Source': bind.rsplit(':', 1)[0], 'Destination': bind.rsplit(':', 1)[1]}
                for bind in spec['HostConfig']['Binds']
            ],
            'NetworkSettings': {
                'Ports': {
                    key: [dict(binding, HostIp='0.0.0.0') for binding in bindings]
                    for key, bindings in spec['HostConfig']['PortBindings'].items()
                },
            },
        }
        return container_id

    def remove(self, container_id):
        self._record('remove', container_id)
        self._require('remove', container_id)
        del self.containers[container_id]

    def start(self, container_id):
        self._record('start', container_id)
        self._require('start', container_id)
        self.containers[container_id]['State']['Running'] = True

    def ops(self):
        return [op for op, _ in self.calls]


class MemorySiteStore:
    """Site store keeping records in a dict."""

    def __init__(self, sites=(), fail=False, journal=None):
        self.sites = {site.id: site for site in sites}
        self.updates = []
        self.fail = fail
        self.journal = journal

    def update_site(self, site_id, site):
        if self.journal is not None:
            self.journal.append(('update_site', site_id))
        if self.fail:
            raise PersistenceError(site_id, OSError("disk full"))
        self.updates.append((site_id, site))
        self.sites[site_id] = site


class RecordingReporter(StatusReporter):
    """Status reporter capturing events and notifications."""

    def __init__(self):
        self.events = []
        self.notifications = []
        super().__init__(
            send_event=lambda event, site_id, status: self.events.append((event, site_id, status)),
            notify=lambda title, message: self.notifications.append((title, message)),
        )


@pytest.fixture(autouse=True)
def reset_config():
    """Make every test read configuration from its own environment."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def posix_validator():
    return PathValidator(
        platform=PathPlatform.POSIX,
        normalize=make_home_normalizer('/Users/foo'),
        user_root='/Users',
        external_root='/Volumes',
    )


@pytest.fixture
def runtime():
    return FakeRuntime(containers={
        'orig': container_metadata(
            path='/entrypoint.sh',
            args=['--serve'],
            mounts=[('/Users/foo/site/app', '/app/public'), ('/Users/foo/site/logs', '/logs')],
            ports={'80/tcp': '8080', '3306/tcp': '8081'},
        ),
    })


@pytest.fixture
def site():
    return Site(
        id='blog',
        name='My Blog',
        container='orig',
        entrypoint_cmd=['/entrypoint.sh', '--serve'],
        status=SiteStatus.RUNNING,
    )


@pytest.fixture
def snapshot():
    return ContainerSnapshot(
        container_id='orig',
        entrypoint_cmd=('/entrypoint.sh', '--serve'),
        mounts=(
            VolumeMapping('/Users/foo/site/app', '/app/public'),
            VolumeMapping('/Users/foo/site/logs', '/logs'),
        ),
        ports=(PortBinding('8080', 80), PortBinding('8081', 3306)),
    )


@pytest.fixture
def store(site, runtime):
    return MemorySiteStore([site], journal=runtime.calls)


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def make_orchestrator(runtime, store, reporter, posix_validator):
    """Factory for orchestrators wired to the fakes."""

    def factory(confirm=True, **overrides):
        answers = []

        def confirm_fn(message):
            answers.append(message)
            return confirm

        options = dict(
            runtime=runtime,
            site_store=store,
            site_starter=SiteStarter(runtime, timeout=0, poll_interval=0),
            confirm=confirm_fn,
            validator=posix_validator,
            reporter=reporter,
        )
        options.update(overrides)
        orchestrator = RemapOrchestrator(**options)
        orchestrator.confirm_prompts = answers
        return orchestrator

    return factory


@pytest.fixture
def failing_store(site, runtime):
    return MemorySiteStore([site], fail=True, journal=runtime.calls)
