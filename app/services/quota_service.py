"""
Quota service: usage commits and usage reporting.

commit_usage() runs only after a capability invocation and its ledger append
succeeded. It charges free users through the provider's increment-with-ceiling
primitive and never touches premium users. Commit failures are reported as
warnings because the (paid) generation has already happened.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from app.core.capabilities import all_policies
from app.core.config import FREE_USAGE_LIMIT
from app.core.errors import GatewayError
from app.services.identity_provider import IdentityProvider
from app.services.identity_service import UserEntitlement

logger = logging.getLogger(__name__)

COMMIT_FAILED_WARNING = "Usage could not be recorded; your result was still delivered."


@dataclass(frozen=True)
class UsageCommit:
    committed: bool
    free_usage: Optional[int] = None
    warning: Optional[str] = None


def commit_usage(
    identity: IdentityProvider,
    user_id: str,
    is_premium: bool,
    prior_free_usage: int,
    cost: int,
    limit: Optional[int] = None,
) -> UsageCommit:
    """
    Charge `cost` free-usage units to a free user.

    Returns:
        UsageCommit; `warning` is set when the provider could not be updated.
    """
    if is_premium:
        return UsageCommit(committed=False)

    if cost <= 0:
        return UsageCommit(committed=False, free_usage=prior_free_usage)

    ceiling = FREE_USAGE_LIMIT if limit is None else limit
    try:
        new_value = identity.increment_usage(user_id, cost, ceiling=ceiling, prior=prior_free_usage)
    except GatewayError as e:
        logger.warning(f"Usage commit failed: user_id={user_id}, cost={cost}, error={e.message}")
        return UsageCommit(committed=False, warning=COMMIT_FAILED_WARNING)

    if new_value is None:
        # A concurrent request from the same user reached the ceiling first
        logger.warning(
            f"Usage commit refused at ceiling: user_id={user_id}, cost={cost}, "
            f"prior={prior_free_usage}, limit={ceiling}"
        )
        return UsageCommit(committed=False)

    logger.info(f"Usage committed: user_id={user_id}, cost={cost}, used={new_value}/{ceiling}")
    return UsageCommit(committed=True, free_usage=new_value)


def get_usage_for_response(snapshot: UserEntitlement, limit: Optional[int] = None) -> Dict:
    """
    Usage data formatted for GET /me/usage.

    Premium users report unlimited usage (limit/remaining None).
    """
    limit = FREE_USAGE_LIMIT if limit is None else limit

    if snapshot.is_premium:
        used, limit_value, remaining = snapshot.free_usage, None, None
    else:
        used, limit_value, remaining = snapshot.free_usage, limit, max(0, limit - snapshot.free_usage)

    capabilities = []
    for policy in all_policies():
        capabilities.append({
            "capability": policy.capability.value,
            "cost": 0 if snapshot.is_premium else policy.cost,
            "premium_required": policy.premium_required,
            "available": snapshot.is_premium or (not policy.premium_required and used < limit),
        })

    return {
        "success": True,
        "plan": snapshot.plan,
        "free_usage": used,
        "limit": limit_value,
        "remaining": remaining,
        "unlimited": snapshot.is_premium,
        "capabilities": capabilities,
    }
