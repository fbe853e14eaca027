"""
Dashboard aggregation.

Composes store reads for one user into the payload the dashboard renders:
profile, policy, claims, smart contract transactions, summary stats and
pregnancy progress. Read-only.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..claims.errors import NotFoundError
from ..claims.schema import (
    ACTIVE_CLAIM_STATUSES,
    CamelModel,
    Claim,
    ClaimStatus,
    Policy,
    SmartContractTransaction,
    User,
    format_money,
)
from ..storage.entity_store import EntityStore
from .pregnancy import PregnancyProgress, pregnancy_progress

logger = logging.getLogger(__name__)


class DashboardStats(CamelModel):
    """Summary figures shown in the quick-stats cards."""

    active_claims: int = Field(ge=0, description="Claims submitted or under review")
    coverage_used: str = Field(description="Policy coverage used, or '0' without a policy")
    coverage_remaining: Optional[str] = None
    coverage_usage_percent: Optional[float] = Field(
        default=None,
        description="Coverage used as a percentage of total coverage, capped at 100",
    )
    total_claims: int = 0
    latest_claim_status: Optional[ClaimStatus] = None


class Dashboard(CamelModel):
    """Everything the dashboard page needs for one user."""

    user: User
    policy: Optional[Policy] = None
    claims: List[Claim] = Field(default_factory=list)
    smart_contract_transactions: List[SmartContractTransaction] = Field(default_factory=list)
    stats: DashboardStats
    pregnancy: Optional[PregnancyProgress] = None


def compute_stats(policy: Optional[Policy], claims: List[Claim]) -> DashboardStats:
    """
    Derive dashboard stats.

    Args:
        policy: The user's policy, if any
        claims: The user's claims, newest first
    """
    active = sum(1 for claim in claims if claim.status in ACTIVE_CLAIM_STATUSES)
    stats = DashboardStats(
        active_claims=active,
        coverage_used="0",
        total_claims=len(claims),
        latest_claim_status=claims[0].status if claims else None,
    )
    if policy is None:
        return stats

    stats.coverage_used = format_money(policy.used_amount)
    stats.coverage_remaining = format_money(max(policy.total_coverage - policy.used_amount, Decimal("0")))
    if policy.total_coverage > 0:
        percent = policy.used_amount / policy.total_coverage * 100
        stats.coverage_usage_percent = round(min(float(percent), 100.0), 1)
    return stats


def get_dashboard(store: EntityStore, user_id: str) -> Dashboard:
    """
    Build the dashboard for a user.

    Raises:
        NotFoundError: if the user does not exist
    """
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    policy = store.get_policy_by_user_id(user_id)
    claims = store.get_claims_by_user_id(user_id)
    transactions = store.get_transactions_by_user_id(user_id)

    logger.debug(
        f"Dashboard for {user_id}: policy={'yes' if policy else 'no'}, "
        f"{len(claims)} claim(s), {len(transactions)} transaction(s)"
    )

    return Dashboard(
        user=user,
        policy=policy,
        claims=claims,
        smart_contract_transactions=transactions,
        stats=compute_stats(policy, claims),
        pregnancy=pregnancy_progress(user.pregnancy_week),
    )
