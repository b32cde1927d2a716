"""
Tests for the static capability policy table.
"""
import pytest

from app.core.capabilities import Capability, CreationType, _load_policies, get_policy


def test_every_capability_has_a_policy():
    for capability in Capability:
        policy = get_policy(capability)
        assert policy.capability == capability
        assert policy.cost >= 0


def test_default_costs_and_premium_flags():
    assert get_policy(Capability.ARTICLE).cost == 1
    assert get_policy(Capability.BLOG_TITLE).cost == 1
    assert get_policy(Capability.RESUME_REVIEW).cost == 3

    assert not get_policy(Capability.ARTICLE).premium_required
    assert not get_policy(Capability.RESUME_REVIEW).premium_required
    assert get_policy(Capability.IMAGE).premium_required
    assert get_policy(Capability.REMOVE_BACKGROUND).premium_required
    assert get_policy(Capability.REMOVE_OBJECT).premium_required


def test_image_capabilities_record_image_creations():
    for capability in (Capability.IMAGE, Capability.REMOVE_BACKGROUND, Capability.REMOVE_OBJECT):
        assert get_policy(capability).creation_type == CreationType.IMAGE


def test_policy_lookup_accepts_wire_value():
    assert get_policy("blog-title").creation_type == CreationType.BLOG_TITLE


def test_unknown_capability_rejected():
    with pytest.raises(ValueError):
        get_policy("video")


def test_cost_override_from_environment(monkeypatch):
    monkeypatch.setenv("CAPABILITY_COST_RESUME_REVIEW", "5")
    policies = _load_policies()
    assert policies[Capability.RESUME_REVIEW].cost == 5
    assert policies[Capability.RESUME_REVIEW].premium_required is False
    assert policies[Capability.ARTICLE].cost == 1


def test_negative_cost_override_rejected(monkeypatch):
    monkeypatch.setenv("CAPABILITY_COST_ARTICLE", "-1")
    with pytest.raises(ValueError):
        _load_policies()
