"""
Policy DTOs: ViewerContext + ContentSnapshot (input of resolve_visibility), Decision,
ProfileTarget/ProfileDestination (input/output of resolve_profile_destination).
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from lado.models.enums import Surface


class HiddenReason(str, Enum):
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    DRAFT = "draft"
    CENSORED = "censored"
    PRIVATE = "private"
    REQUIRES_AUTH = "requires_auth"
    CREATOR_UNVERIFIED = "creator_unverified"
    REQUIRES_SUBSCRIPTION = "requires_subscription"
    REQUIRES_AGE_VERIFICATION = "requires_age_verification"


class ProfileDestination(str, Enum):
    PUBLIC = "public"  # public profile view (discover + subscribe)
    PRIVATE = "private"  # internal profile view for signed-in viewers


# ----- Input of resolve_visibility -----


class ViewerContext(BaseModel):
    """Who is looking. Built fresh per evaluation; never cached across requests."""

    authenticated: bool = False
    user_id: str | None = None
    age_verified: bool = False
    active_subscriptions: frozenset[str] = Field(
        default_factory=frozenset,
        description="creator_id of every active subscription held by the viewer",
    )

    model_config = {"frozen": True}

    @classmethod
    def anonymous(cls) -> "ViewerContext":
        return cls()

    def is_owner_of(self, owner_id: str) -> bool:
        return self.authenticated and self.user_id is not None and self.user_id == owner_id

    def is_subscribed_to(self, creator_id: str) -> bool:
        return creator_id in self.active_subscriptions


class ContentSnapshot(BaseModel):
    """Flags of one content item plus the owner's creator verification."""

    id: str
    owner_id: str
    owner_creator_verified: bool = False
    surface: Surface = Surface.PUBLIC
    is_active: bool = True
    is_draft: bool = False
    is_censored: bool = False
    is_private: bool = False
    is_sensitive: bool = False

    model_config = {"frozen": True}


# ----- Decision (pure logic, no I/O) -----


class Decision(BaseModel):
    visible: bool
    reason: HiddenReason | None = Field(
        None,
        description="Blocking rule; None iff visible",
    )

    model_config = {"frozen": True}

    @classmethod
    def show(cls) -> "Decision":
        return cls(visible=True)

    @classmethod
    def hide(cls, reason: HiddenReason) -> "Decision":
        return cls(visible=False, reason=reason)

    @classmethod
    def not_found(cls) -> "Decision":
        """For callers whose content lookup came back empty."""
        return cls.hide(HiddenReason.NOT_FOUND)


class ProfileTarget(BaseModel):
    is_creator: bool = False
    creator_verified: bool = False
    has_restricted_surface: bool = False

    model_config = {"frozen": True}
