"""Claim lifecycle workflow: submission, coverage update and status changes."""

from .claim_lifecycle import (
    ClaimService,
    generate_transaction_hash,
    parse_claim_status,
    validate_claim,
    validation_details,
)

__all__ = [
    "ClaimService",
    "generate_transaction_hash",
    "parse_claim_status",
    "validate_claim",
    "validation_details",
]
