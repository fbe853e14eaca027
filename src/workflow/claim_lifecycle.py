"""
Claim lifecycle workflow.

Handles the side effects of submitting and updating a claim:
- Payload validation
- Claim record creation
- Synthetic smart contract transaction for the submission
- Policy coverage-used update

Everything runs in-process against the entity store; nothing is queued.
"""

import logging
import random
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..claims.errors import ClaimValidationError, NotFoundError
from ..claims.schema import (
    Claim,
    ClaimCreate,
    ClaimStatus,
    ContractType,
    Policy,
    SmartContractTransaction,
    TransactionStatus,
    format_money,
)
from ..storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)

HEX_DIGITS = "0123456789abcdef"
DEFAULT_HASH_LENGTH = 12


# =============================================================================
# Helper Functions
# =============================================================================


def generate_transaction_hash(length: int = DEFAULT_HASH_LENGTH, rng: Optional[random.Random] = None) -> str:
    """
    Generate a placeholder transaction hash: ``0x`` followed by ``length`` hex digits.

    Not a real hash; it only has to look like one on the dashboard.
    """
    rng = rng or random
    return "0x" + "".join(rng.choices(HEX_DIGITS, k=length))


def validation_details(errors: Iterable[dict]) -> List[dict]:
    """
    Convert pydantic error entries into ``[{field, message}]`` entries.

    Accepts ``ValidationError.errors()`` or FastAPI's ``RequestValidationError.errors()``.
    """
    details = []
    for item in errors:
        field = ".".join(str(part) for part in item["loc"] if part != "body") or "payload"
        details.append({"field": field, "message": item["msg"]})
    return details


def validate_claim(payload: Union[ClaimCreate, Mapping[str, Any]]) -> ClaimCreate:
    """
    Validate a claim submission payload.

    Required: userId, policyId, claimType, title, amount, visitDate, providerName.

    Raises:
        ClaimValidationError: listing every missing or malformed field
    """
    if isinstance(payload, ClaimCreate):
        return payload
    if not isinstance(payload, Mapping):
        raise ClaimValidationError([{"field": "payload", "message": "Expected a JSON object"}])
    try:
        return ClaimCreate.model_validate(dict(payload))
    except ValidationError as e:
        raise ClaimValidationError(validation_details(e.errors())) from e


def parse_claim_status(status: Union[ClaimStatus, str, None]) -> ClaimStatus:
    """Coerce a status value, raising ClaimValidationError for unknown ones."""
    try:
        return ClaimStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ClaimStatus)
        raise ClaimValidationError([
            {"field": "status", "message": f"Input should be one of: {allowed}"}
        ]) from None


# =============================================================================
# Claim Service
# =============================================================================


class ClaimService:
    """
    Orchestrates claim submission and status changes against an EntityStore.

    Usage:
        service = ClaimService(store)
        claim = service.submit_claim(payload)
        service.update_claim_status(claim.id, "approved")
    """

    def __init__(
        self,
        store: EntityStore,
        hash_length: int = DEFAULT_HASH_LENGTH,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.hash_length = hash_length
        self.rng = rng

    def submit_claim(self, payload: Union[ClaimCreate, Mapping[str, Any]]) -> Claim:
        """
        Submit a new claim.

        The claim is stored first, then its coverage transaction, then the
        policy balance is updated. A claim whose policy does not exist is
        still committed; only the balance update is skipped.

        Args:
            payload: ClaimCreate or raw request mapping (camelCase or snake_case)

        Returns:
            The created Claim, status ``submitted``

        Raises:
            ClaimValidationError: if required fields are missing or malformed
        """
        claim_in = validate_claim(payload)
        tx_hash = generate_transaction_hash(self.hash_length, self.rng)

        # Step 1: Store the claim
        claim: Claim = self.store.insert(EntityKind.CLAIM, {
            **claim_in.model_dump(),
            "status": ClaimStatus.SUBMITTED,
            "smart_contract_tx": tx_hash,
        })
        logger.info(
            f"Claim {claim.id} submitted by {claim.user_id}: "
            f"{claim.claim_type.value} {format_money(claim.amount)}"
        )

        # Step 2: Record the simulated coverage contract event
        self.record_transaction(claim)

        # Step 3: Apply the amount to the policy's coverage used
        if self.apply_to_policy(claim.policy_id, claim.amount) is None:
            logger.warning(
                f"Policy {claim.policy_id} not found for claim {claim.id}; "
                "claim kept without coverage update"
            )

        return claim

    def record_transaction(self, claim: Claim) -> SmartContractTransaction:
        """Create the pending coverage transaction linked to a submitted claim."""
        tx: SmartContractTransaction = self.store.insert(EntityKind.TRANSACTION, {
            "user_id": claim.user_id,
            "claim_id": claim.id,
            "transaction_hash": claim.smart_contract_tx,
            "contract_type": ContractType.COVERAGE,
            "status": TransactionStatus.PENDING,
            "metadata": {"action": "claim_submission", "amount": format_money(claim.amount)},
        })
        logger.debug(f"Transaction {tx.transaction_hash} recorded for claim {claim.id}")
        return tx

    def apply_to_policy(self, policy_id: str, amount: Decimal) -> Optional[Policy]:
        """
        Add ``amount`` to the policy's coverage used, to the cent.

        Returns:
            The updated Policy, or None if the policy does not exist
        """
        updated: Optional[Policy] = self.store.increment(EntityKind.POLICY, policy_id, "used_amount", amount)
        if updated is None:
            return None

        logger.info(
            f"Policy {updated.policy_number} coverage used: "
            f"{format_money(updated.used_amount - amount)} -> {format_money(updated.used_amount)}"
        )
        if updated.used_amount > updated.total_coverage:
            logger.warning(
                f"Policy {updated.policy_number} exceeds total coverage "
                f"({format_money(updated.used_amount)} > {format_money(updated.total_coverage)})"
            )
        return updated

    def update_claim_status(self, claim_id: str, status: Union[ClaimStatus, str]) -> Claim:
        """
        Set a claim's status and refresh its ``updatedAt``.

        Any status may follow any other; no transition table is enforced.

        Raises:
            ClaimValidationError: if ``status`` is not a claim status
            NotFoundError: if no claim has this id
        """
        new_status = parse_claim_status(status)
        claim = self.store.update(EntityKind.CLAIM, claim_id, {"status": new_status})
        if claim is None:
            raise NotFoundError("Claim", claim_id)

        logger.info(f"Claim {claim_id} status -> {new_status.value}")
        return claim

    def get_claim(self, claim_id: str) -> Claim:
        claim = self.store.get_claim(claim_id)
        if claim is None:
            raise NotFoundError("Claim", claim_id)
        return claim

    def list_claims(self, user_id: str) -> List[Claim]:
        """Claims for a user, newest first."""
        return self.store.get_claims_by_user_id(user_id)

    def list_transactions(self, user_id: str) -> List[SmartContractTransaction]:
        """Smart contract transactions for a user, newest first."""
        return self.store.get_transactions_by_user_id(user_id)
