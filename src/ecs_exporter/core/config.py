# src/ecs_exporter/core/config.py

import logging
import os
import re
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

logger = logging.getLogger(__name__)

DEFAULT_LISTEN_ADDRESS = "[::1]:6543"

_LISTEN_RE = re.compile(r"^(?:\[(?P<ipv6>[0-9a-fA-F:.]+)\]|(?P<host>[^:\[\]\s]+)):(?P<port>\d+)$")
ROLE_ARN_RE = re.compile(r"arn:aws:iam::\d{12}:role/.+", re.IGNORECASE)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LOG_LEVEL_ALIASES = {"WARN": "WARNING"}


def split_cluster_names(value: Optional[str]) -> List[str]:
    """Splits a comma and/or whitespace separated list of cluster names."""
    if not value:
        return []
    return [name for name in re.split(r"[,\s]+", value) if name]


def parse_listen_address(value: str) -> Tuple[str, int]:
    """
    Parses a listen address of the form ``host:port`` or ``[ipv6]:port``.

    Raises:
        ConfigurationError: If the address is malformed or the port is out of range.
    """
    match = _LISTEN_RE.match((value or "").strip())
    if not match:
        raise ConfigurationError(f"Invalid listen address '{value}'. Use 'host:port' or '[ipv6]:port'.")

    host = match.group("ipv6") or match.group("host")
    port = int(match.group("port"))
    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid port {port} in listen address '{value}'.")
    return host, port


def normalize_log_level(value: Optional[str]) -> str:
    """
    Returns the upper-case ``logging`` level name for ``value``.

    ``WARN`` is accepted as an alias of ``WARNING``.

    Raises:
        ConfigurationError: If the level is not one of ``LOG_LEVELS``.
    """
    level = (value or "").strip().upper()
    level = _LOG_LEVEL_ALIASES.get(level, level)
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"Invalid log level '{value}'. Use one of: {', '.join(LOG_LEVELS)}.")
    return level


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    # CLUSTER_NAMES and LISTEN_ADDRESS are properties so that values are
    # resolved at access time rather than at import time.
    @property
    def CLUSTER_NAMES(self) -> List[str]:
        return split_cluster_names(os.getenv("ECS_EXPORTER_CLUSTERS"))

    @property
    def LISTEN_ADDRESS(self) -> str:
        return os.getenv("ECS_EXPORTER_LISTEN", DEFAULT_LISTEN_ADDRESS)

    # --- AWS variables ---
    AWS_REGION = os.getenv("AWS_REGION")
    AWS_PROFILE = os.getenv("AWS_PROFILE")

    @property
    def ROLE(self) -> Optional[str]:
        return os.getenv("ECS_EXPORTER_ROLE") or None

    # --- TLS variables ---
    TLS_KEY_FILE = os.getenv("ECS_EXPORTER_TLS_KEY")
    TLS_CERT_FILE = os.getenv("ECS_EXPORTER_TLS_CERT")

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_settings(
    cluster_names: List[str],
    listen_address: str,
    tls_key_file: Optional[str] = None,
    tls_cert_file: Optional[str] = None,
    role: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Validates the settings needed to start the exporter.

    Raises:
        ConfigurationError: On the first invalid setting.
    """
    if not cluster_names:
        raise ConfigurationError("At least one cluster name must be set (ECS_EXPORTER_CLUSTERS or --cluster).")
    if any(not name.strip() for name in cluster_names):
        raise ConfigurationError("Cluster names must not be empty.")
    parse_listen_address(listen_address)
    if bool(tls_key_file) != bool(tls_cert_file):
        raise ConfigurationError("TLS requires both a key file and a certificate file.")
    if not tls_key_file:
        logger.debug("TLS not configured; serving plain HTTP.")
    if role is not None and not ROLE_ARN_RE.fullmatch(role):
        raise ConfigurationError(f"Invalid role '{role}'. Expected arn:aws:iam::<account>:role/<name>.")
    if log_level is not None:
        normalize_log_level(log_level)


# Instantiate the config to be imported by other modules
config = Config()
