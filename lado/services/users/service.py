import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from lado.core.errors import ProfileNotFound
from lado.models.content import Content
from lado.models.enums import Surface
from lado.models.user import User
from lado.policy.models import ProfileDestination, ProfileTarget
from lado.policy.visibility import resolve_profile_destination

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_active(self, user_id: str) -> User | None:
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.is_active.is_(True))
            .one_or_none()
        )

    def get_by_handle(self, handle: str) -> User:
        """Active user whose user_name or pseudonym matches, case-insensitively."""
        handle = (handle or "").strip().lstrip("@")
        if not handle:
            raise ProfileNotFound(handle)
        needle = handle.lower()
        user = (
            self.db.query(User)
            .filter(
                or_(func.lower(User.user_name) == needle, func.lower(User.pseudonym) == needle),
                User.is_active.is_(True),
            )
            .first()
        )
        if user is None:
            logger.warning("profile_not_found", extra={"reason": handle})
            raise ProfileNotFound(handle)
        return user

    def has_restricted_surface(self, user_id: str) -> bool:
        """True iff the user has published at least one LadoB content item."""
        row = (
            self.db.query(Content.id)
            .filter(
                Content.owner_id == user_id,
                Content.surface == Surface.RESTRICTED.value,
                Content.is_active.is_(True),
                Content.is_draft.is_(False),
            )
            .first()
        )
        return row is not None

    def profile_target(self, user: User) -> ProfileTarget:
        is_creator = bool(user.is_creator)
        return ProfileTarget(
            is_creator=is_creator,
            creator_verified=bool(user.creator_verified),
            # Only creators can gate content; skip the query for everyone else.
            has_restricted_surface=is_creator and self.has_restricted_surface(user.id),
        )

    def resolve_profile(self, handle: str, viewer_authenticated: bool) -> tuple[User, ProfileDestination]:
        user = self.get_by_handle(handle)
        destination = resolve_profile_destination(self.profile_target(user), viewer_authenticated)
        logger.info(
            "profile_resolved",
            extra={"user_id": user.id, "action": destination.value},
        )
        return user, destination
