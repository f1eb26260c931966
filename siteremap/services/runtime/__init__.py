"""Container runtime adapters.

The remap workflow only talks to the ContainerRuntime interface:
- DockerRuntime: docker CLI via subprocess (supports mock mode)
"""
from .base import ContainerRuntime, RuntimeCommandError
from .docker import DockerRuntime

__all__ = ['ContainerRuntime', 'DockerRuntime', 'RuntimeCommandError']
