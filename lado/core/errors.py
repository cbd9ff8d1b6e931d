"""
Domain errors surfaced to callers (web layer maps them to user messages).
Every error carries a stable machine code.
"""


class LadoError(Exception):
    code = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class NotFound(LadoError):
    code = "not_found"


class ProfileNotFound(NotFound):
    code = "profile_not_found"

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(f"Profile not found: {handle}")


# ----- Age compliance -----


class ComplianceError(LadoError):
    code = "compliance_error"


class UnderMinimumAge(ComplianceError):
    code = "under_minimum_age"

    def __init__(self, required: int, age: int) -> None:
        self.required = required
        self.age = age
        super().__init__(f"You must be at least {required} years old to use this platform.")


# ----- Subscriptions -----


class SubscriptionError(LadoError):
    code = "subscription_error"


class DuplicateActiveSubscription(SubscriptionError):
    code = "duplicate_active_subscription"

    def __init__(self, fan_id: str, creator_id: str) -> None:
        self.fan_id = fan_id
        self.creator_id = creator_id
        super().__init__(f"Active subscription already exists: {fan_id} -> {creator_id}")


class SubscriptionNotFound(SubscriptionError):
    code = "subscription_not_found"

    def __init__(self, subscription_id: str) -> None:
        self.subscription_id = subscription_id
        super().__init__(f"Subscription not found: {subscription_id}")


class SelfSubscription(SubscriptionError):
    code = "self_subscription"


class SubscriptionNotRenewable(SubscriptionError):
    code = "subscription_not_renewable"

    def __init__(self, subscription_id: str) -> None:
        self.subscription_id = subscription_id
        super().__init__(f"Subscription has auto-renew disabled: {subscription_id}")


# ----- Moderation -----


class ModerationError(LadoError):
    code = "moderation_error"


class NoSelection(ModerationError):
    code = "no_selection"

    def __init__(self) -> None:
        super().__init__("No content was selected.")


class SelectionTooLarge(ModerationError):
    code = "selection_too_large"

    def __init__(self, limit: int, size: int) -> None:
        self.limit = limit
        self.size = size
        super().__init__(f"Selection of {size} items exceeds the limit of {limit}")
