from enum import Enum


class Surface(str, Enum):
    """Which side of a creator's profile a content item lives on."""

    PUBLIC = "lado_a"  # LadoA: open surface
    RESTRICTED = "lado_b"  # LadoB: subscription-gated surface


class SubscriptionDuration(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ModerationAction(str, Enum):
    CENSOR = "censor"
    UNCENSOR = "uncensor"
    DELETE = "delete"
