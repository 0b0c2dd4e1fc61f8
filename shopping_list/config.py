from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .units import Unit, unit_from_string

LOGGER = logging.getLogger(__name__)

ENV_KEYS = [
    "SHOPPING_LIST_UNIT",
    "SHOPPING_LIST_LOG_LEVEL",
    "SHOPPING_LIST_REPORT",
]

DEFAULT_UNIT = Unit.POUND
DEFAULT_LOG_LEVEL = "WARNING"


def pick_unit(text: str) -> Unit:
    """Resolve a preferred unit string, falling back to pounds."""
    unit = unit_from_string(text)
    if unit is None:
        LOGGER.warning('Invalid unit "%s"; using pounds', text)
        return DEFAULT_UNIT
    return unit


@dataclass(frozen=True)
class Config:
    preferred_unit: Unit = DEFAULT_UNIT
    log_level: str = DEFAULT_LOG_LEVEL
    # Where to write the JSON report; None means no report file.
    report_path: str | None = None

    @staticmethod
    def load_from_env(environ: Mapping[str, str] | None = None) -> "Config":
        env = os.environ if environ is None else environ

        unit_text = env.get("SHOPPING_LIST_UNIT", "").strip()
        level = env.get("SHOPPING_LIST_LOG_LEVEL", "").strip().upper()
        report = env.get("SHOPPING_LIST_REPORT", "").strip()

        return Config(
            preferred_unit=pick_unit(unit_text) if unit_text else DEFAULT_UNIT,
            log_level=level or DEFAULT_LOG_LEVEL,
            report_path=report or None,
        )
