"""
Generation orchestration.

generate() is the only path to a metered capability:
quota gate -> capability invocation -> ledger append -> usage commit.

- A denied gate raises QuotaExceededError before anything runs.
- A failed invocation raises ProviderError; nothing is recorded or charged.
- A failed ledger append returns the content with a warning and charges nothing.
- A failed usage commit returns the content with a warning.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.core.capabilities import Capability, get_policy
from app.core.config import FREE_USAGE_LIMIT
from app.core.errors import PersistenceError
from app.core.gating import decide_for, enforce
from app.services.capability_service import CapabilityInvoker, CapabilityRequest
from app.services.creation_ledger import CreationLedger, CreationRecord
from app.services.identity_provider import IdentityProvider
from app.services.identity_service import UserEntitlement
from app.services.quota_service import commit_usage

logger = logging.getLogger(__name__)

NOT_RECORDED_WARNING = "Your result could not be saved to your creations."


@dataclass
class GenerationOutcome:
    content: str
    creation: Optional[CreationRecord]
    free_usage: int
    warnings: List[str] = field(default_factory=list)


class GenerationService:

    def __init__(
        self,
        identity: IdentityProvider,
        invoker: CapabilityInvoker,
        ledger: CreationLedger,
        free_limit: Optional[int] = None,
    ):
        self.identity = identity
        self.invoker = invoker
        self.ledger = ledger
        self.free_limit = FREE_USAGE_LIMIT if free_limit is None else free_limit

    def generate(
        self,
        snapshot: UserEntitlement,
        capability: Capability,
        request: CapabilityRequest,
    ) -> GenerationOutcome:
        policy = get_policy(capability)

        decision = decide_for(policy, snapshot.is_premium, snapshot.free_usage, limit=self.free_limit)
        allow = enforce(
            decision,
            capability=policy.capability.value,
            plan=snapshot.plan,
            limit=self.free_limit,
            used=snapshot.free_usage,
        )

        result = self.invoker.invoke(policy.capability, request)

        warnings: List[str] = []
        try:
            creation = self.ledger.append(
                user_id=snapshot.user_id,
                prompt=result.prompt,
                content=result.content,
                type=policy.creation_type,
                publish=result.publish,
            )
        except PersistenceError:
            logger.warning(
                f"Generation delivered but not recorded: user_id={snapshot.user_id}, "
                f"capability={policy.capability.value}"
            )
            warnings.append(NOT_RECORDED_WARNING)
            return GenerationOutcome(
                content=result.content,
                creation=None,
                free_usage=snapshot.free_usage,
                warnings=warnings,
            )

        commit = commit_usage(
            self.identity,
            snapshot.user_id,
            snapshot.is_premium,
            snapshot.free_usage,
            allow.delta,
            limit=self.free_limit,
        )
        if commit.warning:
            warnings.append(commit.warning)

        free_usage = commit.free_usage if commit.free_usage is not None else snapshot.free_usage
        logger.info(
            f"Generation complete: user_id={snapshot.user_id}, capability={policy.capability.value}, "
            f"creation_id={creation.id}, plan={snapshot.plan}, free_usage={free_usage}"
        )
        return GenerationOutcome(content=result.content, creation=creation, free_usage=free_usage, warnings=warnings)
