"""
Unit tests for model timestamps and time-based checks
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import DateTime

from app.models import Clinic, Patient, User
from app.models.base import as_utc, utc_now
from app.models.clinic import SubscriptionStatus
from app.models.user import UserRole


@pytest.mark.parametrize("model", [Clinic, User, Patient])
def test_every_datetime_column_is_timezone_aware(model):
    columns = [c for c in model.__table__.columns if isinstance(c.type, DateTime)]

    assert columns
    assert all(c.type.timezone for c in columns), [c.name for c in columns if not c.type.timezone]


def test_default_timestamps_carry_utc_offset():
    clinic = Clinic(name="North", slug="north", email="north@example.com")
    user = User(email="a@example.com", password_hash="x", first_name="A", last_name="B", role=UserRole.DOCTOR)

    assert clinic.created_at.tzinfo is not None
    assert user.created_at.utcoffset() == timedelta(0)


def test_as_utc_treats_naive_values_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    shifted = datetime(2026, 1, 1, 15, 0, tzinfo=timezone(timedelta(hours=3)))

    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert as_utc(shifted) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert as_utc(None) is None


class TestTrialExpired:
    """Tests for Clinic.trial_expired"""

    def test_past_trial_expired(self):
        clinic = Clinic(
            name="N", slug="n", email="n@example.com",
            subscription_status=SubscriptionStatus.TRIAL,
            trial_ends_at=utc_now() - timedelta(days=1),
        )
        assert clinic.trial_expired() is True

    def test_naive_stored_value_compares_against_aware_now(self):
        """Test a naive value read back from the database still compares"""
        clinic = Clinic(
            name="N", slug="n", email="n@example.com",
            subscription_status=SubscriptionStatus.TRIAL,
            trial_ends_at=(utc_now() + timedelta(days=2)).replace(tzinfo=None),
        )
        assert clinic.trial_expired() is False

    def test_paid_clinic_never_expires(self):
        clinic = Clinic(
            name="N", slug="n", email="n@example.com",
            subscription_status=SubscriptionStatus.ACTIVE,
            trial_ends_at=utc_now() - timedelta(days=30),
        )
        assert clinic.trial_expired() is False


def test_user_lock_window():
    user = User(
        email="a@example.com", password_hash="x", first_name="A", last_name="B",
        role=UserRole.DOCTOR, locked_until=utc_now() + timedelta(minutes=5),
    )

    assert user.is_locked() is True
    assert user.is_locked(utc_now() + timedelta(minutes=10)) is False
