"""
Tests for identity snapshot resolution against the SQL identity provider.
"""
from datetime import timedelta

import pytest

from app.core.errors import AuthenticationError
from app.core.security import create_access_token
from app.services.identity_service import resolve


def test_free_user_without_counter_is_normalized_to_zero(identity, make_user):
    user_id, token = make_user(plan="free", free_usage=None)

    snapshot = resolve(identity, token)

    assert snapshot.user_id == user_id
    assert snapshot.is_premium is False
    assert snapshot.free_usage == 0
    # Counter written back to the provider
    assert identity.get_metadata(user_id)["free_usage"] == 0


def test_free_user_counter_is_reported(identity, make_user):
    user_id, token = make_user(plan="free", free_usage=7)

    snapshot = resolve(identity, token)

    assert snapshot.free_usage == 7
    assert snapshot.plan == "free"


def test_premium_user_is_not_normalized(identity, make_user):
    user_id, token = make_user(plan="premium", free_usage=None)

    snapshot = resolve(identity, token)

    assert snapshot.is_premium is True
    assert snapshot.free_usage == 0
    assert "free_usage" not in identity.get_metadata(user_id)


def test_other_metadata_keys_are_preserved(identity, make_user):
    user_id, token = make_user(plan="free", free_usage=None, metadata={"referrer": "newsletter"})

    resolve(identity, token)

    metadata = identity.get_metadata(user_id)
    assert metadata["referrer"] == "newsletter"
    assert metadata["free_usage"] == 0


def test_plan_change_is_seen_on_next_request(identity, make_user):
    user_id, token = make_user(plan="free", free_usage=3)
    assert resolve(identity, token).is_premium is False

    identity.set_plan(user_id, "premium")

    assert resolve(identity, token).is_premium is True


@pytest.mark.parametrize("credential", [None, "", "not-a-jwt"])
def test_bad_credentials_are_rejected(identity, credential):
    with pytest.raises(AuthenticationError):
        resolve(identity, credential)


def test_expired_token_is_rejected(identity, make_user):
    user_id, _ = make_user()
    expired = create_access_token({"sub": user_id}, expires_delta=timedelta(minutes=-5))

    with pytest.raises(AuthenticationError):
        resolve(identity, expired)


def test_token_for_unknown_user_is_rejected(identity):
    token = create_access_token({"sub": "user_does_not_exist"})

    with pytest.raises(AuthenticationError):
        resolve(identity, token)


def test_plan_name_follows_configured_premium_plan(identity, make_user, monkeypatch):
    monkeypatch.setattr("app.services.identity_service.PREMIUM_PLAN_NAME", "pro")
    user_id, token = make_user(plan="pro")

    snapshot = resolve(identity, token, premium_plan="pro")

    assert snapshot.is_premium is True
    assert snapshot.plan == "pro"
