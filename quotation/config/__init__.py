"""
Init file for config package.
"""

from .settings import (
    REQUEST_TIMEOUT_HEADER,
    SERVER_URL,
    UPSTREAM_URL,
    ClientConfig,
    ServerConfig,
)

__all__ = [
    "REQUEST_TIMEOUT_HEADER",
    "SERVER_URL",
    "UPSTREAM_URL",
    "ClientConfig",
    "ServerConfig",
]
