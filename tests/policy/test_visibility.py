"""
Unit tests for resolve_visibility / resolve_profile_destination: pure logic, no DB.
"""
import itertools
import unittest

import pytest

from lado.models.enums import Surface
from lado.policy import (
    ContentSnapshot,
    Decision,
    HiddenReason,
    ProfileDestination,
    ProfileTarget,
    ViewerContext,
    filter_visible,
    resolve_profile_destination,
    resolve_visibility,
)

OWNER = "creator-1"
FAN = "fan-1"


def _content(**kwargs) -> ContentSnapshot:
    base = dict(
        id="c1",
        owner_id=OWNER,
        owner_creator_verified=True,
        surface=Surface.PUBLIC,
        is_active=True,
        is_draft=False,
        is_censored=False,
        is_private=False,
        is_sensitive=False,
    )
    base.update(kwargs)
    return ContentSnapshot(**base)


def _viewer(user_id=FAN, subscribed=False, age_verified=False) -> ViewerContext:
    return ViewerContext(
        authenticated=True,
        user_id=user_id,
        age_verified=age_verified,
        active_subscriptions=frozenset({OWNER}) if subscribed else frozenset(),
    )


class TestResolveVisibility(unittest.TestCase):
    def test_plain_public_content_visible_to_anonymous(self):
        self.assertEqual(resolve_visibility(None, _content()), Decision.show())

    def test_inactive_hidden_even_for_owner(self):
        decision = resolve_visibility(_viewer(user_id=OWNER), _content(is_active=False))
        self.assertEqual(decision.reason, HiddenReason.INACTIVE)

    def test_draft_hidden_for_others(self):
        decision = resolve_visibility(_viewer(subscribed=True), _content(is_draft=True))
        self.assertEqual(decision.reason, HiddenReason.DRAFT)

    def test_draft_visible_to_owner(self):
        decision = resolve_visibility(_viewer(user_id=OWNER), _content(is_draft=True))
        self.assertTrue(decision.visible)

    def test_draft_owner_still_age_gated(self):
        decision = resolve_visibility(
            _viewer(user_id=OWNER, age_verified=False),
            _content(is_draft=True, is_sensitive=True),
        )
        self.assertEqual(decision.reason, HiddenReason.REQUIRES_AGE_VERIFICATION)

    def test_censored_beats_subscription_and_age(self):
        decision = resolve_visibility(
            _viewer(subscribed=True, age_verified=True),
            _content(is_censored=True, surface=Surface.RESTRICTED),
        )
        self.assertEqual(decision.reason, HiddenReason.CENSORED)

    def test_private_hidden_for_non_owner(self):
        decision = resolve_visibility(_viewer(subscribed=True), _content(is_private=True))
        self.assertEqual(decision.reason, HiddenReason.PRIVATE)

    def test_private_visible_to_owner(self):
        self.assertTrue(resolve_visibility(_viewer(user_id=OWNER), _content(is_private=True)).visible)

    def test_restricted_scenario(self):
        content = _content(surface=Surface.RESTRICTED)
        self.assertEqual(resolve_visibility(None, content).reason, HiddenReason.REQUIRES_AUTH)
        self.assertEqual(
            resolve_visibility(ViewerContext.anonymous(), content).reason,
            HiddenReason.REQUIRES_AUTH,
        )
        self.assertEqual(
            resolve_visibility(_viewer(subscribed=False), content).reason,
            HiddenReason.REQUIRES_SUBSCRIPTION,
        )
        self.assertTrue(resolve_visibility(_viewer(subscribed=True), content).visible)

    def test_subscription_to_other_creator_does_not_count(self):
        viewer = ViewerContext(
            authenticated=True, user_id=FAN, active_subscriptions=frozenset({"someone-else"})
        )
        decision = resolve_visibility(viewer, _content(surface=Surface.RESTRICTED))
        self.assertEqual(decision.reason, HiddenReason.REQUIRES_SUBSCRIPTION)

    def test_restricted_unverified_creator(self):
        content = _content(surface=Surface.RESTRICTED, owner_creator_verified=False)
        decision = resolve_visibility(_viewer(subscribed=True), content)
        self.assertEqual(decision.reason, HiddenReason.CREATOR_UNVERIFIED)

    def test_restricted_owner_without_subscription(self):
        content = _content(surface=Surface.RESTRICTED)
        self.assertTrue(resolve_visibility(_viewer(user_id=OWNER), content).visible)

    def test_unauthenticated_context_with_matching_id_is_not_owner(self):
        viewer = ViewerContext(authenticated=False, user_id=OWNER)
        decision = resolve_visibility(viewer, _content(is_private=True))
        self.assertEqual(decision.reason, HiddenReason.PRIVATE)

    def test_subscription_does_not_bypass_age_gate(self):
        content = _content(surface=Surface.RESTRICTED, is_sensitive=True)
        decision = resolve_visibility(_viewer(subscribed=True, age_verified=False), content)
        self.assertEqual(decision.reason, HiddenReason.REQUIRES_AGE_VERIFICATION)
        self.assertTrue(resolve_visibility(_viewer(subscribed=True, age_verified=True), content).visible)

    def test_sensitive_hidden_from_anonymous(self):
        decision = resolve_visibility(None, _content(is_sensitive=True))
        self.assertEqual(decision.reason, HiddenReason.REQUIRES_AGE_VERIFICATION)

    def test_not_found_helper(self):
        decision = Decision.not_found()
        self.assertFalse(decision.visible)
        self.assertEqual(decision.reason, HiddenReason.NOT_FOUND)

    def test_filter_visible_keeps_order(self):
        items = [
            _content(id="a"),
            _content(id="b", is_censored=True),
            _content(id="c", surface=Surface.RESTRICTED),
            _content(id="d"),
        ]
        visible = filter_visible(_viewer(subscribed=True), items)
        self.assertEqual([c.id for c in visible], ["a", "c", "d"])


FLAGS = ("is_active", "is_draft", "is_censored", "is_private", "is_sensitive", "owner_creator_verified")


def _all_contents():
    for values in itertools.product((False, True), repeat=len(FLAGS)):
        for surface in Surface:
            yield _content(surface=surface, **dict(zip(FLAGS, values)))


def _all_viewers():
    yield None
    for user_id, subscribed, age_verified in itertools.product(
        (FAN, OWNER), (False, True), (False, True)
    ):
        yield _viewer(user_id=user_id, subscribed=subscribed, age_verified=age_verified)


CROSS_PRODUCT = list(itertools.product(_all_viewers(), _all_contents()))


@pytest.mark.parametrize("viewer,content", CROSS_PRODUCT)
def test_cross_product_invariants(viewer, content):
    decision = resolve_visibility(viewer, content)
    is_owner = viewer is not None and viewer.user_id == content.owner_id

    # visible <=> no reason
    assert decision.visible == (decision.reason is None)

    if not content.is_active:
        assert decision.reason == HiddenReason.INACTIVE
        return
    if content.is_draft and not is_owner:
        assert decision.reason == HiddenReason.DRAFT
        return
    if content.is_censored and not content.is_draft:
        assert decision.reason == HiddenReason.CENSORED
    if decision.visible:
        if content.is_sensitive:
            assert viewer is not None and viewer.age_verified
        if not content.is_draft:
            assert not content.is_private or is_owner
            if content.surface == Surface.RESTRICTED:
                assert content.owner_creator_verified
                assert is_owner or viewer.is_subscribed_to(content.owner_id)


def test_resolver_is_deterministic():
    for viewer, content in CROSS_PRODUCT[:200]:
        assert resolve_visibility(viewer, content) == resolve_visibility(viewer, content)


class TestResolveProfileDestination(unittest.TestCase):
    def test_verified_creator_with_restricted_surface_always_public(self):
        target = ProfileTarget(is_creator=True, creator_verified=True, has_restricted_surface=True)
        self.assertEqual(resolve_profile_destination(target, False), ProfileDestination.PUBLIC)
        self.assertEqual(resolve_profile_destination(target, True), ProfileDestination.PUBLIC)

    def test_regular_user_authenticated_goes_private(self):
        target = ProfileTarget()
        self.assertEqual(resolve_profile_destination(target, True), ProfileDestination.PRIVATE)
        self.assertEqual(resolve_profile_destination(target, False), ProfileDestination.PUBLIC)

    def test_unverified_creator_follows_authentication(self):
        target = ProfileTarget(is_creator=True, creator_verified=False, has_restricted_surface=True)
        self.assertEqual(resolve_profile_destination(target, True), ProfileDestination.PRIVATE)

    def test_verified_creator_without_restricted_surface(self):
        target = ProfileTarget(is_creator=True, creator_verified=True, has_restricted_surface=False)
        self.assertEqual(resolve_profile_destination(target, True), ProfileDestination.PRIVATE)
        self.assertEqual(resolve_profile_destination(target, False), ProfileDestination.PUBLIC)
