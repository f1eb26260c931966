"""Tests for container snapshots."""
import pytest

from siteremap.models.container import PortBinding, VolumeMapping
from siteremap.models.platform import PathPlatform
from siteremap.services.remap import ContainerInspector, InspectError

from conftest import FakeRuntime, container_metadata


def test_snapshot_captures_command_mounts_and_ports(runtime):
    snapshot = ContainerInspector(runtime, PathPlatform.POSIX).snapshot('orig')

    assert snapshot.container_id == 'orig'
    assert snapshot.entrypoint_cmd == ('/entrypoint.sh', '--serve')
    assert snapshot.mounts == (
        VolumeMapping('/Users/foo/site/app', '/app/public'),
        VolumeMapping('/Users/foo/site/logs', '/logs'),
    )
    assert snapshot.ports == (PortBinding('8080', 80), PortBinding('8081', 3306))


def test_drive_aliases_become_native_paths():
    runtime = FakeRuntime({
        'win': container_metadata(mounts=[('/c/Users/foo/Sites/blog', '/app/public')]),
    })

    snapshot = ContainerInspector(runtime, PathPlatform.DRIVE_LETTER).snapshot('win')

    assert snapshot.mounts == (VolumeMapping('C:\\Users\\foo\\Sites\\blog', '/app/public'),)


def test_container_without_args_or_mounts():
    runtime = FakeRuntime({'bare': {'Path': '/start.sh', 'Args': None, 'Mounts': None}})

    snapshot = ContainerInspector(runtime, PathPlatform.POSIX).snapshot('bare')

    assert snapshot.entrypoint_cmd == ('/start.sh',)
    assert snapshot.mounts == ()
    assert snapshot.ports == ()


def test_unknown_container():
    with pytest.raises(InspectError) as exc_info:
        ContainerInspector(FakeRuntime({}), PathPlatform.POSIX).snapshot('gone')
    assert exc_info.value.container_id == 'gone'


@pytest.mark.parametrize('metadata', [
    {'Args': []},
    {'Path': '', 'Args': []},
    {'Path': '/start.sh', 'Args': 'not-a-list'},
    {'Path': '/start.sh', 'Mounts': {'Source': '/x'}},
    {'Path': '/start.sh', 'Mounts': [{'Source': '/Users/foo'}]},
])
def test_malformed_metadata(metadata):
    runtime = FakeRuntime({'bad': metadata})

    with pytest.raises(InspectError):
        ContainerInspector(runtime, PathPlatform.POSIX).snapshot('bad')
