"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

__all__ = ["Settings", "TWILIGHT_ANGLES", "load_settings"]

TWILIGHT_ANGLES = {
    "official": -0.833,
    "civil": -6.0,
    "nautical": -12.0,
    "astronomical": -18.0,
}

DEFAULT_CORS_ORIGINS: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Settings:
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    default_twilight: str = "official"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``ASTROCALC_*`` environment variables.

    Raises
    ------
    ValueError
        If the log level or the default twilight is not recognised.
    """

    env = os.environ if environ is None else environ

    origins_raw = env.get("ASTROCALC_CORS_ORIGINS")
    if origins_raw:
        origins = tuple(item.strip() for item in origins_raw.split(",") if item.strip())
    else:
        origins = DEFAULT_CORS_ORIGINS

    log_level = env.get("ASTROCALC_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unsupported log level: {log_level}")

    twilight = env.get("ASTROCALC_DEFAULT_TWILIGHT", "official")
    if twilight not in TWILIGHT_ANGLES:
        raise ValueError(f"Unsupported twilight selector: {twilight}")

    return Settings(cors_origins=origins, log_level=log_level, default_twilight=twilight)
