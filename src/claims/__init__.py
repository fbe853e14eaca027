"""Entity schema and error types for maternity coverage claims."""

from .errors import ClaimValidationError, CoverageError, NotFoundError
from .schema import (
    # Enums
    ClaimType,
    ClaimStatus,
    ContractType,
    TransactionStatus,
    ACTIVE_CLAIM_STATUSES,
    # Models
    User,
    Policy,
    Claim,
    SmartContractTransaction,
    ClaimCreate,
    ClaimStatusUpdate,
    # Helpers
    format_money,
    to_money,
    utcnow,
)

__all__ = [
    # Errors
    "CoverageError",
    "NotFoundError",
    "ClaimValidationError",
    # Enums
    "ClaimType",
    "ClaimStatus",
    "ContractType",
    "TransactionStatus",
    "ACTIVE_CLAIM_STATUSES",
    # Models
    "User",
    "Policy",
    "Claim",
    "SmartContractTransaction",
    "ClaimCreate",
    "ClaimStatusUpdate",
    # Helpers
    "format_money",
    "to_money",
    "utcnow",
]
