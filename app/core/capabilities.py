"""
Capability catalogue.

Single source of truth for every metered generative capability: its cost in
free-usage units, whether it is premium-only, and the creation type it records.
Costs are configuration: CAPABILITY_COST_<NAME> overrides the default
(e.g. CAPABILITY_COST_RESUME_REVIEW=3).
"""
import enum
import os
from dataclasses import dataclass
from typing import Dict, List


class CreationType(str, enum.Enum):
    ARTICLE = "article"
    BLOG_TITLE = "blog-title"
    IMAGE = "image"
    RESUME_REVIEW = "resume-review"


class Capability(str, enum.Enum):
    ARTICLE = "article"
    BLOG_TITLE = "blog-title"
    IMAGE = "image"
    REMOVE_BACKGROUND = "remove-background"
    REMOVE_OBJECT = "remove-object"
    RESUME_REVIEW = "resume-review"


@dataclass(frozen=True)
class CapabilityPolicy:
    capability: Capability
    creation_type: CreationType
    cost: int
    premium_required: bool


# Defaults before env overrides
_DEFAULT_POLICIES: Dict[Capability, CapabilityPolicy] = {
    Capability.ARTICLE: CapabilityPolicy(Capability.ARTICLE, CreationType.ARTICLE, 1, False),
    Capability.BLOG_TITLE: CapabilityPolicy(Capability.BLOG_TITLE, CreationType.BLOG_TITLE, 1, False),
    Capability.IMAGE: CapabilityPolicy(Capability.IMAGE, CreationType.IMAGE, 1, True),
    Capability.REMOVE_BACKGROUND: CapabilityPolicy(Capability.REMOVE_BACKGROUND, CreationType.IMAGE, 1, True),
    Capability.REMOVE_OBJECT: CapabilityPolicy(Capability.REMOVE_OBJECT, CreationType.IMAGE, 1, True),
    Capability.RESUME_REVIEW: CapabilityPolicy(Capability.RESUME_REVIEW, CreationType.RESUME_REVIEW, 3, False),
}


def _env_cost_name(capability: Capability) -> str:
    return "CAPABILITY_COST_" + capability.value.upper().replace("-", "_")


def _load_policies() -> Dict[Capability, CapabilityPolicy]:
    policies = {}
    for capability, policy in _DEFAULT_POLICIES.items():
        raw = os.getenv(_env_cost_name(capability))
        cost = policy.cost
        if raw:
            cost = int(raw)
            if cost < 0:
                raise ValueError(f"{_env_cost_name(capability)} must be >= 0, got {cost}")
        policies[capability] = CapabilityPolicy(
            capability=capability,
            creation_type=policy.creation_type,
            cost=cost,
            premium_required=policy.premium_required,
        )
    # Every capability must carry a policy
    missing = set(Capability) - set(policies)
    if missing:
        raise RuntimeError(f"Capabilities without policy: {sorted(c.value for c in missing)}")
    return policies


CAPABILITY_POLICIES: Dict[Capability, CapabilityPolicy] = _load_policies()


def get_policy(capability: Capability) -> CapabilityPolicy:
    """Get the policy for a capability."""
    return CAPABILITY_POLICIES[Capability(capability)]


def all_policies() -> List[CapabilityPolicy]:
    return [CAPABILITY_POLICIES[c] for c in Capability]
