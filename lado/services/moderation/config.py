"""
Moderation config — typed wrappers over lado.core.config.settings.
"""
from __future__ import annotations

from lado.core.config import settings


def get_bulk_max_ids() -> int:
    return settings.moderation_bulk_max_ids


def get_default_censor_reason() -> str:
    return settings.moderation_default_censor_reason
