"""Tests for configuration loading."""
from pathlib import Path

import pytest

from siteremap.core.config import RemapConfig, get_config, set_config
from siteremap.models.platform import PathPlatform


def test_defaults_per_platform():
    assert RemapConfig(platform=PathPlatform.POSIX).user_root == '/Users'
    assert RemapConfig(platform=PathPlatform.DRIVE_LETTER).user_root == 'C:\\Users'


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv('SITEREMAP_PLATFORM', 'drive-letter')
    monkeypatch.setenv('SITEREMAP_HOME', 'C:\\Users\\me')
    monkeypatch.setenv('SITEREMAP_SITES_FILE', str(tmp_path / 'sites.json'))
    monkeypatch.setenv('SITEREMAP_DOCKER', '/usr/local/bin/docker')
    monkeypatch.setenv('SITEREMAP_START_TIMEOUT', '5')
    monkeypatch.setenv('SITEREMAP_COMMAND_TIMEOUT', '60')

    config = RemapConfig.from_env()

    assert config.platform == PathPlatform.DRIVE_LETTER
    assert config.home_dir == Path('C:\\Users\\me')
    assert config.user_root == 'C:\\Users'
    assert config.sites_file == tmp_path / 'sites.json'
    assert config.docker_binary == '/usr/local/bin/docker'
    assert config.site_start_timeout == 5
    assert config.command_timeout == 60


def test_user_root_override(monkeypatch):
    monkeypatch.setenv('SITEREMAP_PLATFORM', 'posix')
    monkeypatch.setenv('SITEREMAP_USER_ROOT', '/home')

    assert RemapConfig.from_env().user_root == '/home'


def test_env_defaults(monkeypatch):
    for name in ('SITEREMAP_EXTERNAL_ROOT', 'SITEREMAP_DOCKER', 'SITEREMAP_START_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)

    config = RemapConfig.from_env()

    assert config.external_root == '/Volumes'
    assert config.docker_binary == 'docker'
    assert config.site_start_timeout == 30


def test_unknown_platform(monkeypatch):
    monkeypatch.setenv('SITEREMAP_PLATFORM', 'plan9')
    with pytest.raises(ValueError):
        RemapConfig.from_env()


def test_global_config_override():
    custom = RemapConfig(platform=PathPlatform.POSIX, docker_binary='podman')
    set_config(custom)
    assert get_config() is custom

    set_config(None)
    assert get_config() is not custom
