"""
Quota gate.

Pure decision logic for metered capabilities: given a user's entitlement and
free-usage counter plus the capability's cost and premium flag, decide whether
the request may proceed and how much to charge once it succeeds.
No I/O happens here; callers commit the delta after the guarded work succeeds.
"""
from dataclasses import dataclass
from typing import Optional, Union

from app.core.capabilities import CapabilityPolicy
from app.core.config import FREE_USAGE_LIMIT
from app.core.errors import QuotaExceededError

LIMIT_REACHED = "limit_reached"
PREMIUM_REQUIRED = "premium_required"

DENY_MESSAGES = {
    LIMIT_REACHED: "Free usage limit reached. Upgrade to premium for more requests.",
    PREMIUM_REQUIRED: "This feature is only available for premium users.",
}


@dataclass(frozen=True)
class Allow:
    """Request may proceed; `delta` is the usage to commit on success (0 for premium)."""
    delta: int


@dataclass(frozen=True)
class Deny:
    reason: str

    @property
    def message(self) -> str:
        return DENY_MESSAGES[self.reason]


Decision = Union[Allow, Deny]


def decide(
    is_premium: bool,
    free_usage: int,
    cost: int,
    premium_required: bool = False,
    limit: Optional[int] = None,
) -> Decision:
    """
    Decide whether a metered capability may run.

    - Premium users are always allowed and never charged.
    - Premium-only capabilities are denied for free users regardless of usage.
    - Free users are allowed while free_usage < limit (default FREE_USAGE_LIMIT).
    """
    if is_premium:
        return Allow(delta=0)

    if premium_required:
        return Deny(PREMIUM_REQUIRED)

    if limit is None:
        limit = FREE_USAGE_LIMIT

    if free_usage < limit:
        return Allow(delta=cost)

    return Deny(LIMIT_REACHED)


def decide_for(policy: CapabilityPolicy, is_premium: bool, free_usage: int, limit: Optional[int] = None) -> Decision:
    """Apply the gate using a capability's static policy."""
    return decide(is_premium, free_usage, policy.cost, policy.premium_required, limit=limit)


def enforce(decision: Decision, **details) -> Allow:
    """Return the Allow decision or raise QuotaExceededError for a Deny."""
    if isinstance(decision, Deny):
        raise QuotaExceededError(decision.message, reason=decision.reason, **details)
    return decision
