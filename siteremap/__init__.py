"""siteremap - remap the host volumes of a running site container."""

__version__ = "0.3.0"
