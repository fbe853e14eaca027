"""
Demo data loaded into a fresh store.

One expecting mother (``user-1``) with a Maternity Plus policy, two claims
and the smart contract events recorded for them.
"""

from datetime import datetime, timezone

from .entity_store import EntityKind, EntityStore

SAMPLE_USER_ID = "user-1"


def _date(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def seed_sample_data(store: EntityStore) -> None:
    """Populate ``store`` with the demo user, policy, claims and transactions."""
    store.insert(EntityKind.USER, {
        "id": SAMPLE_USER_ID,
        "username": "sarah.johnson",
        "password": "hashedpassword",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "email": "sarah.johnson@email.com",
        "phone_number": "+1234567890",
        "pregnancy_week": "24",
        "due_date": _date(2025, 4, 15),
    })

    policy = store.insert(EntityKind.POLICY, {
        "user_id": SAMPLE_USER_ID,
        "policy_number": "MG-2024-001234",
        "policy_type": "Maternity Plus",
        "total_coverage": "15000.00",
        "deductible": "500.00",
        "used_amount": "2450.00",
        "is_active": True,
        "start_date": _date(2024, 1, 1),
        "end_date": _date(2025, 12, 31),
    })

    checkup = store.insert(EntityKind.CLAIM, {
        "user_id": SAMPLE_USER_ID,
        "policy_id": policy.id,
        "claim_type": "prenatal_checkup",
        "title": "First Prenatal Visit",
        "description": "Initial checkup and insurance verification completed",
        "amount": "450.00",
        "status": "approved",
        "visit_date": _date(2024, 9, 15),
        "provider_name": "Dr. Smith, General Hospital",
        "smart_contract_tx": "0xabcd1234567890",
        "created_at": _date(2024, 9, 15),
        "updated_at": _date(2024, 9, 16),
    })

    glucose = store.insert(EntityKind.CLAIM, {
        "user_id": SAMPLE_USER_ID,
        "policy_id": policy.id,
        "claim_type": "lab_tests",
        "title": "Glucose Screening Test",
        "description": "Test completed, awaiting results and claim processing",
        "amount": "125.00",
        "status": "under_review",
        "visit_date": _date(2024, 12, 10),
        "provider_name": "LabCorp Medical Center",
        "smart_contract_tx": "0xefgh5678901234",
        "created_at": _date(2024, 12, 10),
        "updated_at": _date(2024, 12, 10),
    })

    store.insert(EntityKind.TRANSACTION, {
        "user_id": SAMPLE_USER_ID,
        "claim_id": checkup.id,
        "transaction_hash": checkup.smart_contract_tx,
        "contract_type": "coverage",
        "status": "executed",
        "metadata": {"action": "claim_approval", "amount": "450.00"},
        "created_at": _date(2024, 9, 15),
    })

    store.insert(EntityKind.TRANSACTION, {
        "user_id": SAMPLE_USER_ID,
        "claim_id": glucose.id,
        "transaction_hash": glucose.smart_contract_tx,
        "contract_type": "verification",
        "status": "pending",
        "metadata": {"action": "test_verification", "amount": "125.00"},
        "created_at": _date(2024, 12, 10),
    })
