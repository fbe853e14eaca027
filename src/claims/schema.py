"""
Entity schema for the maternity coverage API.

Defines Pydantic models for users, policies, claims and the synthetic
"smart contract" transactions that accompany claim submissions.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


# ============================================================================
# Helpers
# ============================================================================


CENTS = Decimal("0.01")

# Largest amount a decimal(10,2) column holds
MAX_AMOUNT = Decimal("99999999.99")


def utcnow() -> datetime:
    """Timezone-aware current time, used for all server-assigned timestamps."""
    return datetime.now(timezone.utc)


def to_money(value: Decimal) -> Decimal:
    """Quantize a decimal amount to two fraction digits."""
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError("Amount is too large") from None


def format_money(value: Decimal) -> str:
    return f"{to_money(value):.2f}"


# Decimal amount, always two fraction digits, serialized as a string in JSON
Money = Annotated[
    Decimal,
    AfterValidator(to_money),
    PlainSerializer(format_money, return_type=str, when_used="json"),
]


# ============================================================================
# Enums
# ============================================================================


class ClaimType(str, Enum):
    """Kind of maternity visit a claim covers."""
    PRENATAL_CHECKUP = "prenatal_checkup"
    LAB_TESTS = "lab_tests"
    ULTRASOUND = "ultrasound"
    EMERGENCY = "emergency"


class ClaimStatus(str, Enum):
    """Claim lifecycle status. Any status may follow any other."""
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


ACTIVE_CLAIM_STATUSES = frozenset({ClaimStatus.SUBMITTED, ClaimStatus.UNDER_REVIEW})


class ContractType(str, Enum):
    """Type of simulated smart contract event."""
    COVERAGE = "coverage"
    VERIFICATION = "verification"
    PAYMENT = "payment"


class TransactionStatus(str, Enum):
    """Status of a simulated smart contract event."""
    PENDING = "pending"
    EXECUTED = "executed"
    FAILED = "failed"


# ============================================================================
# Base Model
# ============================================================================


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# Entities
# ============================================================================


class User(CamelModel):
    """A policy holder and their pregnancy profile."""

    id: str
    username: str
    password: Optional[str] = Field(default=None, exclude=True, repr=False)
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    pregnancy_week: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)


class Policy(CamelModel):
    """An insurance contract with a running total of coverage used."""

    id: str
    user_id: str
    policy_number: str
    policy_type: str
    total_coverage: Money
    deductible: Money
    used_amount: Money = Decimal("0")
    is_active: bool = True
    start_date: datetime = Field(default_factory=utcnow)
    end_date: Optional[datetime] = None


class Claim(CamelModel):
    """A reimbursement request for a single medical visit."""

    id: str
    user_id: str
    policy_id: str
    claim_type: ClaimType
    title: str
    description: Optional[str] = None
    amount: Money
    status: ClaimStatus = ClaimStatus.SUBMITTED
    visit_date: datetime
    provider_name: str
    documents: List[Any] = Field(default_factory=list)
    smart_contract_tx: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SmartContractTransaction(CamelModel):
    """
    Simulated ledger event.

    The transaction hash is an opaque placeholder; no chain is involved.
    """

    id: str
    user_id: str
    claim_id: Optional[str] = None
    transaction_hash: str
    contract_type: ContractType
    status: TransactionStatus = TransactionStatus.PENDING
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)


# ============================================================================
# Request Models
# ============================================================================


class ClaimCreate(CamelModel):
    """Claim submission payload. Status and server-assigned fields are not accepted."""

    user_id: str = Field(min_length=1)
    policy_id: str = Field(min_length=1)
    claim_type: ClaimType
    title: str = Field(min_length=1)
    description: Optional[str] = None
    amount: Annotated[Money, Field(ge=0, le=MAX_AMOUNT)]
    visit_date: datetime
    provider_name: str = Field(min_length=1)
    documents: List[Any] = Field(default_factory=list)


class ClaimStatusUpdate(CamelModel):
    """Body of a claim status change."""
    status: ClaimStatus
