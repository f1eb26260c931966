"""Tests for published port discovery."""
from siteremap.models.container import PortBinding
from siteremap.services.remap.ports import PortCollector, parse_ports

from conftest import FakeRuntime, container_metadata


class TestParsePorts:
    """Port metadata parsing."""

    def test_reads_first_host_binding(self):
        metadata = container_metadata(ports={'80/tcp': '4000', '3306/tcp': '4001'})

        assert parse_ports(metadata) == [PortBinding('4000', 80), PortBinding('4001', 3306)]

    def test_container_port_has_no_protocol(self):
        ports = parse_ports(container_metadata(ports={'443/tcp': '8443'}))
        assert ports[0].container_port == 443
        assert ports[0].key == '443/tcp'

    def test_skips_unpublished_and_malformed_entries(self):
        metadata = {
            'NetworkSettings': {
                'Ports': {
                    '80/tcp': [{'HostIp': '0.0.0.0', 'HostPort': '4000'}],
                    '8080/tcp': None,
                    '9000/tcp': [],
                    '22/tcp': [{'HostIp': '0.0.0.0'}],
                    'bogus': [{'HostPort': '1'}],
                },
            },
        }

        assert parse_ports(metadata) == [PortBinding('4000', 80)]

    def test_udp_binding_does_not_replace_tcp_host_port(self):
        metadata = container_metadata(ports={'80/tcp': '8080', '80/udp': '9090'})

        assert parse_ports(metadata) == [PortBinding('8080', 80)]

    def test_missing_network_settings(self):
        assert parse_ports({}) == []
        assert parse_ports({'NetworkSettings': {'Ports': None}}) == []


class TestPortCollector:
    """Reading ports from the runtime."""

    def test_collects_from_runtime(self):
        runtime = FakeRuntime({'web': container_metadata(ports={'80/tcp': '4000'})})

        assert PortCollector(runtime).collect('web') == [PortBinding('4000', 80)]
        assert runtime.calls == [('inspect', 'web')]

    def test_lookup_failure_yields_empty_list(self):
        runtime = FakeRuntime({})

        assert PortCollector(runtime).collect('missing') == []
