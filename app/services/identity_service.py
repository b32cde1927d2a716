"""
Identity snapshot resolution.

Turns a session credential into the per-request entitlement snapshot used by
the quota gate. The premium flag is asked from the provider on every request.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.core.config import PREMIUM_PLAN_NAME
from app.services.identity_provider import FREE_USAGE_KEY, IdentityProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserEntitlement:
    user_id: str
    is_premium: bool
    free_usage: int

    @property
    def plan(self) -> str:
        return PREMIUM_PLAN_NAME if self.is_premium else "free"


def _coerce_usage(raw: Any, user_id: str) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric free_usage for user_id={user_id}: {raw!r}")
        return None
    return max(value, 0)


def resolve(identity: IdentityProvider, credential: Optional[str], premium_plan: str = PREMIUM_PLAN_NAME) -> UserEntitlement:
    """
    Resolve a credential into {user_id, is_premium, free_usage}.

    Free users without a stored counter get free_usage=0 written back before
    returning. Premium users are never normalized.

    Raises:
        AuthenticationError: credential absent, malformed, expired or unknown
    """
    user_id = identity.verify_credential(credential)
    is_premium = identity.has_entitlement(user_id, premium_plan)
    metadata = identity.get_metadata(user_id)
    free_usage = _coerce_usage(metadata.get(FREE_USAGE_KEY), user_id)

    if free_usage is None:
        if not is_premium:
            identity.set_metadata(user_id, {FREE_USAGE_KEY: 0})
            logger.info(f"Initialized free usage counter: user_id={user_id}")
        free_usage = 0

    logger.debug(f"Identity resolved: user_id={user_id}, premium={is_premium}, free_usage={free_usage}")
    return UserEntitlement(user_id=user_id, is_premium=is_premium, free_usage=free_usage)
