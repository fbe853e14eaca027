"""
Tests for the claim lifecycle workflow.

Verifies that ClaimService:
- Stores submitted claims with a synthetic transaction reference
- Records a pending coverage transaction for every submission
- Adds the claim amount to the policy's coverage used, to the cent
- Keeps the claim when its policy does not exist
- Updates status on existing claims only
"""

import logging
import random
import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from src.claims import (
    ClaimStatus,
    ClaimValidationError,
    ContractType,
    NotFoundError,
    TransactionStatus,
)
from src.storage import (
    SAMPLE_USER_ID,
    EntityKind,
    InMemoryEntityStore,
    create_entity_store,
    seed_sample_data,
)
from src.workflow import ClaimService, generate_transaction_hash, parse_claim_status

TX_HASH = re.compile(r"^0x[0-9a-f]{12}$")


# ============================================================================
# Fixtures & Helpers
# ============================================================================


@pytest.fixture
def store():
    return create_entity_store(seed=True)


@pytest.fixture
def service(store):
    return ClaimService(store, rng=random.Random(42))


@pytest.fixture
def policy(store):
    return store.get_policy_by_user_id(SAMPLE_USER_ID)


def make_payload(policy_id: str, **overrides) -> dict:
    """Valid camelCase claim submission as the front-end sends it."""
    payload = {
        "userId": SAMPLE_USER_ID,
        "policyId": policy_id,
        "claimType": "lab_tests",
        "title": "Glucose Tolerance Follow-up",
        "description": "Repeat screening",
        "amount": "125.00",
        "visitDate": "2024-12-20T10:00:00Z",
        "providerName": "LabCorp Medical Center",
        "documents": ["https://storage.mothergrid.com/documents/1_document.pdf"],
    }
    payload.update(overrides)
    return payload


def error_fields(exc_info) -> set:
    return {detail["field"] for detail in exc_info.value.details}


# ============================================================================
# Submission
# ============================================================================


def test_submit_returns_submitted_claim_with_tx_reference(service, policy):
    claim = service.submit_claim(make_payload(policy.id))

    assert claim.status == ClaimStatus.SUBMITTED
    assert claim.smart_contract_tx
    assert TX_HASH.match(claim.smart_contract_tx)


def test_submit_ignores_client_status(service, policy):
    claim = service.submit_claim(make_payload(policy.id, status="approved"))

    assert claim.status == ClaimStatus.SUBMITTED


def test_submit_updates_policy_used_amount(service, store, policy):
    assert policy.used_amount == Decimal("2450.00")

    service.submit_claim(make_payload(policy.id, amount="125.00"))

    assert store.get_policy(policy.id).used_amount == Decimal("2575.00")


def test_submit_amounts_are_decimal_exact(store):
    service = ClaimService(store)
    policy = store.insert(EntityKind.POLICY, {
        "user_id": SAMPLE_USER_ID,
        "policy_number": "MG-TEST",
        "policy_type": "Basic",
        "total_coverage": "1000",
        "deductible": "0",
    })

    service.submit_claim(make_payload(policy.id, amount="0.10"))
    service.submit_claim(make_payload(policy.id, amount="0.20"))

    assert store.get_policy(policy.id).used_amount == Decimal("0.30")


def test_submit_records_pending_coverage_transaction(service, store, policy):
    claim = service.submit_claim(make_payload(policy.id))

    transactions = store.get_transactions_by_user_id(SAMPLE_USER_ID)
    tx = transactions[0]

    assert len(transactions) == 3
    assert tx.claim_id == claim.id
    assert tx.transaction_hash == claim.smart_contract_tx
    assert tx.contract_type == ContractType.COVERAGE
    assert tx.status == TransactionStatus.PENDING
    assert tx.metadata == {"action": "claim_submission", "amount": "125.00"}


def test_submit_with_unknown_policy_still_creates_claim(service, store, policy):
    claim = service.submit_claim(make_payload("no-such-policy"))

    assert store.get_claim(claim.id) is not None
    assert claim.policy_id == "no-such-policy"
    assert store.get_policy(policy.id).used_amount == Decimal("2450.00")
    # Transaction creation does not depend on the policy
    assert store.get_transactions_by_user_id(SAMPLE_USER_ID)[0].claim_id == claim.id


def test_submit_unknown_policy_logs_warning(service, caplog):
    with caplog.at_level(logging.WARNING, logger="src.workflow.claim_lifecycle"):
        service.submit_claim(make_payload("no-such-policy"))

    assert "not found" in caplog.text


def test_submit_over_coverage_is_allowed_and_logged(service, store, policy, caplog):
    with caplog.at_level(logging.WARNING, logger="src.workflow.claim_lifecycle"):
        service.submit_claim(make_payload(policy.id, amount="20000.00"))

    assert store.get_policy(policy.id).used_amount == Decimal("22450.00")
    assert "exceeds total coverage" in caplog.text


def test_submit_then_get_round_trip(service, policy):
    payload = make_payload(policy.id)
    created = service.submit_claim(payload)

    fetched = service.get_claim(created.id)

    assert fetched == created
    assert fetched.user_id == payload["userId"]
    assert fetched.policy_id == payload["policyId"]
    assert fetched.claim_type.value == payload["claimType"]
    assert fetched.title == payload["title"]
    assert fetched.description == payload["description"]
    assert fetched.amount == Decimal(payload["amount"])
    assert fetched.provider_name == payload["providerName"]
    assert fetched.documents == payload["documents"]
    assert fetched.visit_date.isoformat().startswith("2024-12-20T10:00:00")


def test_submitted_claim_listed_first(service, policy):
    claim = service.submit_claim(make_payload(policy.id))

    claims = service.list_claims(SAMPLE_USER_ID)

    assert claims[0].id == claim.id
    assert len(claims) == 3


class SlowReadStore(InMemoryEntityStore):
    """Store whose reads stall, widening any gap between a read and the following write."""

    def get(self, kind, entity_id):
        entity = super().get(kind, entity_id)
        time.sleep(0.02)
        return entity


def test_concurrent_submissions_keep_every_increment():
    store = SlowReadStore()
    seed_sample_data(store)
    policy = store.get_policy_by_user_id(SAMPLE_USER_ID)
    service = ClaimService(store)
    start = threading.Barrier(8)

    def submit(_):
        start.wait()
        return service.submit_claim(make_payload(policy.id, amount="100.00"))

    with ThreadPoolExecutor(max_workers=8) as pool:
        claims = list(pool.map(submit, range(8)))

    assert len({claim.id for claim in claims}) == 8
    assert store.get_policy(policy.id).used_amount == Decimal("3250.00")
    assert store.count(EntityKind.TRANSACTION) == 10


# ============================================================================
# Validation
# ============================================================================


def test_missing_fields_listed(service):
    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim({})

    assert {
        "userId", "policyId", "claimType", "title", "amount", "visitDate", "providerName",
    } <= error_fields(exc_info)


def test_malformed_fields_listed(service, policy):
    payload = make_payload(policy.id, amount="lots", claimType="massage", visitDate="someday")

    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim(payload)

    assert error_fields(exc_info) == {"amount", "claimType", "visitDate"}


def test_negative_amount_rejected(service, policy):
    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim(make_payload(policy.id, amount="-10.00"))

    assert error_fields(exc_info) == {"amount"}


@pytest.mark.parametrize("amount", ["1e30", "100000000.00"])
def test_oversized_amount_rejected(service, store, policy, amount):
    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim(make_payload(policy.id, amount=amount))

    assert error_fields(exc_info) == {"amount"}
    assert store.count(EntityKind.CLAIM) == 2


def test_empty_provider_rejected(service, policy):
    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim(make_payload(policy.id, providerName=""))

    assert error_fields(exc_info) == {"providerName"}


def test_non_object_payload_rejected(service):
    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim(["not", "a", "claim"])

    assert error_fields(exc_info) == {"payload"}


def test_failed_validation_stores_nothing(service, store):
    with pytest.raises(ClaimValidationError):
        service.submit_claim({"title": "Incomplete"})

    assert store.count(EntityKind.CLAIM) == 2
    assert store.count(EntityKind.TRANSACTION) == 2


def test_validation_error_serialization(service):
    with pytest.raises(ClaimValidationError) as exc_info:
        service.submit_claim({})

    body = exc_info.value.to_dict()
    assert body["error"] == "Invalid data"
    assert all(set(detail) == {"field", "message"} for detail in body["details"])


# ============================================================================
# Status Updates
# ============================================================================


def test_update_status(service, policy):
    claim = service.submit_claim(make_payload(policy.id))

    updated = service.update_claim_status(claim.id, "under_review")

    assert updated.status == ClaimStatus.UNDER_REVIEW
    assert updated.updated_at >= claim.updated_at
    assert service.get_claim(claim.id).status == ClaimStatus.UNDER_REVIEW


def test_any_status_may_follow_any_other(service, policy):
    claim = service.submit_claim(make_payload(policy.id))

    service.update_claim_status(claim.id, ClaimStatus.PAID)
    reopened = service.update_claim_status(claim.id, ClaimStatus.SUBMITTED)

    assert reopened.status == ClaimStatus.SUBMITTED


def test_update_unknown_claim_raises_not_found(service, store):
    with pytest.raises(NotFoundError) as exc_info:
        service.update_claim_status("missing", "approved")

    assert exc_info.value.to_dict() == {"error": "Claim not found"}
    assert store.count(EntityKind.CLAIM) == 2


def test_update_invalid_status_rejected(service, policy):
    claim = service.submit_claim(make_payload(policy.id))

    with pytest.raises(ClaimValidationError):
        service.update_claim_status(claim.id, "lost")

    assert service.get_claim(claim.id).status == ClaimStatus.SUBMITTED


def test_get_unknown_claim_raises_not_found(service):
    with pytest.raises(NotFoundError):
        service.get_claim("missing")


# ============================================================================
# Helpers
# ============================================================================


def test_transaction_hash_shape():
    assert TX_HASH.match(generate_transaction_hash())
    assert len(generate_transaction_hash(length=20)) == 22


def test_transaction_hash_reproducible_with_seeded_rng():
    first = generate_transaction_hash(rng=random.Random(7))
    second = generate_transaction_hash(rng=random.Random(7))

    assert first == second


def test_parse_claim_status():
    assert parse_claim_status("paid") == ClaimStatus.PAID

    with pytest.raises(ClaimValidationError):
        parse_claim_status(None)
