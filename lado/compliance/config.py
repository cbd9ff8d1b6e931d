"""
Age compliance config — typed wrappers over lado.core.config.settings.
"""
from __future__ import annotations

import json

from lado.core.config import settings


def get_default_minimum_age() -> int:
    return settings.age_default_minimum


def get_minimum_age_overrides() -> dict[str, int]:
    """Return {ISO code: min_age} from settings, codes upper-cased."""
    raw = json.loads(settings.age_minimum_overrides or "{}")
    return {str(k).upper(): int(v) for k, v in raw.items()}
