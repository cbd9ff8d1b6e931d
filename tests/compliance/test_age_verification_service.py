"""Tests for AgeVerificationService: atomic user update + log append."""
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from lado.core.errors import UnderMinimumAge
from lado.models.age_verification_log import AgeVerificationLog
from lado.models.user import User
from lado.services.age_verification.service import AgeVerificationService

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _make_user():
    user = MagicMock()
    user.id = "u1"
    user.age_verified = False
    user.age_verified_at = None
    user.birth_date = None
    user.country = None
    return user


def _added_logs(db):
    return [c.args[0] for c in db.add.call_args_list if isinstance(c.args[0], AgeVerificationLog)]


class TestVerifyUser:
    def test_success_updates_user_and_appends_one_log(self):
        db = MagicMock()
        user = _make_user()
        svc = AgeVerificationService(db)

        entry = svc.verify_user(user, date(2006, 6, 1), "CL", NOW, source_ip="10.0.0.1")

        assert user.age_verified is True
        assert user.age_verified_at == NOW
        assert user.birth_date == date(2006, 6, 1)
        assert user.country == "CL"
        logs = _added_logs(db)
        assert logs == [entry]
        assert entry.age_at_verification == 18
        assert entry.country == "CL"
        assert entry.source_ip == "10.0.0.1"
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_under_age_writes_nothing(self):
        db = MagicMock()
        user = _make_user()
        svc = AgeVerificationService(db)

        with pytest.raises(UnderMinimumAge) as exc_info:
            svc.verify_user(user, date(2006, 6, 2), "CL", NOW)

        assert exc_info.value.required == 18
        assert user.age_verified is False
        db.add.assert_not_called()
        db.commit.assert_not_called()

    def test_commit_failure_rolls_back_and_reraises(self):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("db down")
        svc = AgeVerificationService(db)

        with pytest.raises(RuntimeError):
            svc.verify_user(_make_user(), date(1990, 1, 1), "US", NOW)

        db.rollback.assert_called_once()

    def test_reverification_appends(self):
        db = MagicMock()
        user = _make_user()
        svc = AgeVerificationService(db)

        svc.verify_user(user, date(1990, 1, 1), "US", NOW)
        svc.verify_user(user, date(1990, 1, 1), "MX", NOW)

        logs = _added_logs(db)
        assert len(logs) == 2
        assert [entry.country for entry in logs] == ["US", "MX"]
        assert user.country == "MX"


class TestHistory:
    def test_history_queries_user_newest_first(self):
        db = MagicMock()
        entries = [MagicMock(), MagicMock()]
        db.query.return_value.filter.return_value.order_by.return_value.all.return_value = entries

        assert AgeVerificationService(db).history("u1") == entries
        db.query.assert_called_once_with(AgeVerificationLog)

    def test_history_keeps_every_attempt(self, sqlite_db):
        sqlite_db.add(User(id="u1", user_name="maria"))
        sqlite_db.add(User(id="u2", user_name="other"))
        sqlite_db.commit()
        svc = AgeVerificationService(sqlite_db)
        maria = sqlite_db.get(User, "u1")

        svc.verify_user(maria, date(2000, 1, 1), "cl", NOW)
        svc.verify_user(maria, date(2000, 1, 1), "AR", NOW + timedelta(days=30))
        svc.verify_user(sqlite_db.get(User, "u2"), date(1990, 1, 1), "CL", NOW)

        history = svc.history("u1")
        assert [h.country for h in history] == ["AR", "CL"]
        assert [h.age_at_verification for h in history] == [24, 24]
        assert svc.history("nobody") == []
