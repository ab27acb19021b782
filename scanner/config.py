# scanner/config.py

import logging
import os
from dataclasses import dataclass, field

from .scheduler import DEFAULT_MAX_IN_FLIGHT, DEFAULT_RETRIES
from .transport import DEFAULT_NAMESERVERS, DEFAULT_TIMEOUT

logger = logging.getLogger("dkimscan.config")


def _env_bool(name, default=False):
    """Any non-empty value except 0/false/no/off switches a flag on."""
    value = os.environ.get(name, "").strip().lower()
    if not value:
        return default
    return value not in ("0", "false", "no", "off")


def _env_int(name, default):
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected an integer", name, value)
        return default


def _env_float(name, default):
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected a number", name, value)
        return default


def _env_list(name, default):
    value = os.environ.get(name, "")
    items = [item for item in value.replace(",", " ").split() if item]
    return items or list(default)


@dataclass
class ScanConfig:
    quiet: bool = False
    concurrency: int = DEFAULT_MAX_IN_FLIGHT
    retries: int = DEFAULT_RETRIES
    timeout: float = DEFAULT_TIMEOUT
    nameservers: list = field(default_factory=lambda: list(DEFAULT_NAMESERVERS))

    def override(self, **values):
        """Apply command line values; ``None`` leaves a setting unchanged."""
        for key, value in values.items():
            if value is not None:
                setattr(self, key, value)
        return self


def load_env_config():
    """Build a ScanConfig from QUIET and the DKIMSCAN_* variables."""
    return ScanConfig(
        quiet=_env_bool("QUIET"),
        concurrency=_env_int("DKIMSCAN_CONCURRENCY", DEFAULT_MAX_IN_FLIGHT),
        retries=_env_int("DKIMSCAN_RETRIES", DEFAULT_RETRIES),
        timeout=_env_float("DKIMSCAN_TIMEOUT", DEFAULT_TIMEOUT),
        nameservers=_env_list("DKIMSCAN_NAMESERVERS", DEFAULT_NAMESERVERS),
    )
