"""
Access policy library: pure decision (visibility) separated from the store
glue (context). Contract through ViewerContext and ContentSnapshot.
"""
from lado.policy.models import (
    ContentSnapshot,
    Decision,
    HiddenReason,
    ProfileDestination,
    ProfileTarget,
    ViewerContext,
)
from lado.policy.visibility import (
    filter_visible,
    resolve_profile_destination,
    resolve_visibility,
)

__all__ = [
    "ContentSnapshot",
    "Decision",
    "HiddenReason",
    "ProfileDestination",
    "ProfileTarget",
    "ViewerContext",
    "filter_visible",
    "resolve_profile_destination",
    "resolve_visibility",
]
