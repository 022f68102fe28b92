"""
Configuration and settings for the quotation server and client.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta

from dotenv import load_dotenv

from quotation.utils.durations import parse_duration

# Load environment variables from .env file
load_dotenv()

UPSTREAM_URL = "https://economia.awesomeapi.com.br/json/last/USD-BRL"
SERVER_URL = "http://localhost:8080/cotacao"

# Header carrying the caller's time budget, e.g. "300ms"
REQUEST_TIMEOUT_HEADER = "X-Request-Timeout"


def _env_duration(name: str, default: str) -> timedelta:
    return parse_duration(os.getenv(name, default))


@dataclass
class ServerConfig:
    """Quotation server configuration."""

    request_timeout: timedelta = field(
        default_factory=lambda: _env_duration("QUOTATION_REQUEST_TIMEOUT", "200ms")
    )
    database_timeout: timedelta = field(
        default_factory=lambda: _env_duration("QUOTATION_DATABASE_TIMEOUT", "10ms")
    )
    host: str = field(default_factory=lambda: os.getenv("QUOTATION_HOST", "0.0.0.0"))
    port: int = field(
        default_factory=lambda: int(os.getenv("QUOTATION_PORT", "8080"))
    )
    database_url: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///cotacao.db")
    )
    upstream_url: str = field(
        default_factory=lambda: os.getenv("QUOTATION_UPSTREAM_URL", UPSTREAM_URL)
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class ClientConfig:
    """Quotation client configuration."""

    request_timeout: timedelta = field(
        default_factory=lambda: _env_duration("QUOTATION_CLIENT_TIMEOUT", "300ms")
    )
    server_url: str = field(
        default_factory=lambda: os.getenv("QUOTATION_SERVER_URL", SERVER_URL)
    )
    output_file: str = field(
        default_factory=lambda: os.getenv("QUOTATION_OUTPUT_FILE", "cotacao.txt")
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
