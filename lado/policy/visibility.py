"""
Decision only: resolve_visibility(viewer, content) -> Decision.
Pure function, no I/O and no mutation; the rule order below is part of the contract.
"""
from __future__ import annotations

from typing import Iterable

from lado.models.enums import Surface
from lado.policy.models import (
    ContentSnapshot,
    Decision,
    HiddenReason,
    ProfileDestination,
    ProfileTarget,
    ViewerContext,
)


def resolve_visibility(viewer: ViewerContext | None, content: ContentSnapshot) -> Decision:
    """
    Decide whether ``content`` may be shown to ``viewer`` (None = anonymous).

    Rules, first blocking one wins:
    1. inactive
    2. draft (the owner skips straight to the age check)
    3. censored
    4. private, unless owner
    5. restricted surface: auth, creator verification, subscription or owner
    6. sensitive requires an age-verified viewer
    """
    viewer = viewer or ViewerContext.anonymous()
    is_owner = viewer.is_owner_of(content.owner_id)

    if not content.is_active:
        return Decision.hide(HiddenReason.INACTIVE)

    if content.is_draft:
        if not is_owner:
            return Decision.hide(HiddenReason.DRAFT)
        return _age_gate(viewer, content)

    if content.is_censored:
        return Decision.hide(HiddenReason.CENSORED)

    if content.is_private and not is_owner:
        return Decision.hide(HiddenReason.PRIVATE)

    if content.surface == Surface.RESTRICTED:
        if not viewer.authenticated:
            return Decision.hide(HiddenReason.REQUIRES_AUTH)
        # Unverified creators cannot gate content behind subscriptions.
        if not content.owner_creator_verified:
            return Decision.hide(HiddenReason.CREATOR_UNVERIFIED)
        if not is_owner and not viewer.is_subscribed_to(content.owner_id):
            return Decision.hide(HiddenReason.REQUIRES_SUBSCRIPTION)

    return _age_gate(viewer, content)


def _age_gate(viewer: ViewerContext, content: ContentSnapshot) -> Decision:
    if content.is_sensitive and not viewer.age_verified:
        return Decision.hide(HiddenReason.REQUIRES_AGE_VERIFICATION)
    return Decision.show()


def filter_visible(
    viewer: ViewerContext | None,
    contents: Iterable[ContentSnapshot],
) -> list[ContentSnapshot]:
    """Visible items in input order."""
    return [c for c in contents if resolve_visibility(viewer, c).visible]


def resolve_profile_destination(
    target: ProfileTarget,
    viewer_authenticated: bool,
) -> ProfileDestination:
    """
    Where a matched handle should land.

    Verified creators with a restricted surface always get the public profile so
    anonymous visitors can discover and subscribe; otherwise signed-in viewers get
    the internal profile and everyone else the public one.
    """
    if target.is_creator and target.creator_verified and target.has_restricted_surface:
        return ProfileDestination.PUBLIC
    if viewer_authenticated:
        return ProfileDestination.PRIVATE
    return ProfileDestination.PUBLIC
