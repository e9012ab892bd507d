"""
Core Data Models for Smart Finance

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Reject malformed model output with clear validation errors
3. Be serializable for storage and logging

DESIGN DECISION: Expense records are frozen. Once created they are never
edited; the only lifecycle events are creation and deletion.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# ENUMS
# =============================================================================

class ExpenseType(str, Enum):
    """
    Necessity classification of an expense.

    Assigned by the extraction step, never by the user.
    """
    NEED = "Need"
    WANT = "Want"


# =============================================================================
# EXTRACTION PAYLOADS
# =============================================================================

class ExtractedExpense(BaseModel):
    """
    Fields extracted from user input by the AI service.

    This is PROPOSED data without an identity. The store assigns
    the id when it becomes an ExpenseRecord.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Short description of what was bought"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in the configured currency"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Short free-form category label"
    )
    type: ExpenseType = Field(
        ...,
        description="Need or Want"
    )
    date: Optional[datetime] = Field(
        default=None,
        description="When the expense happened, if the source says so"
    )

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v):
        """
        Accept a bare calendar date ("YYYY-MM-DD") and turn it into
        midnight UTC of that day. Blank values mean "no date".
        """
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            if len(v) == 10:
                v = date.fromisoformat(v)
            else:
                return _as_utc(datetime.fromisoformat(v.replace("Z", "+00:00")))
        if isinstance(v, datetime):
            return _as_utc(v)
        if isinstance(v, date):
            return datetime.combine(v, time.min, tzinfo=timezone.utc)
        return v


# =============================================================================
# CORE RECORD MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    A single expense held by the store.

    CRITICAL: Records are immutable. The id is assigned once at
    creation and is never reused.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique record ID"
    )
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=50)
    type: ExpenseType
    date: datetime = Field(
        default_factory=utc_now,
        description="When the expense happened (defaults to ingestion time)"
    )

    @field_validator('date')
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC."""
        return _as_utc(v)

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, amount: Decimal):
        """Amounts are stored as plain JSON numbers."""
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)

    @classmethod
    def from_extracted(
        cls,
        extracted: ExtractedExpense,
        date: Optional[datetime] = None,
    ) -> "ExpenseRecord":
        """
        Build a record from extracted fields.

        An explicit date wins over the extracted one; with neither,
        the ingestion time is used.
        """
        return cls(
            description=extracted.description,
            amount=extracted.amount,
            category=extracted.category,
            type=extracted.type,
            date=date or extracted.date or utc_now(),
        )

    @property
    def day(self) -> str:
        """Calendar day as YYYY-MM-DD."""
        return self.date.date().isoformat()


# =============================================================================
# UPLOAD MODELS
# =============================================================================

class DocumentUpload(BaseModel):
    """Represents an uploaded receipt, statement or screenshot."""

    upload_id: UUID = Field(
        default_factory=uuid4,
        description="Unique upload identifier"
    )
    uploaded_at: datetime = Field(default_factory=utc_now)
    original_filename: str
    file_size_bytes: int = Field(ge=0)
    mime_type: str

    @field_validator('mime_type')
    @classmethod
    def normalize_mime_type(cls, v: str) -> str:
        """Which types are accepted is decided by the extraction gateway."""
        return v.strip().lower()

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class SpendingSummary(BaseModel):
    """
    Derived aggregates over the current records.

    Never persisted; always recomputed from the store.
    """

    total: Decimal = Decimal("0")
    record_count: int = Field(default=0, ge=0)
    by_category: dict[str, Decimal] = Field(default_factory=dict)
    by_type: dict[ExpenseType, Decimal] = Field(default_factory=dict)

    @property
    def want_share(self) -> float:
        """Fraction of total spending classified as Want."""
        if not self.total:
            return 0.0
        return float(self.by_type.get(ExpenseType.WANT, Decimal("0")) / self.total)

    @property
    def need_share(self) -> float:
        if not self.total:
            return 0.0
        return float(self.by_type.get(ExpenseType.NEED, Decimal("0")) / self.total)


# =============================================================================
# ADVICE MODELS
# =============================================================================

class AdviceStatus(str, Enum):
    """How an advice request ended."""
    GENERATED = "generated"
    NO_DATA = "no_data"
    EMPTY = "empty"
    ERROR = "error"


class AdviceReport(BaseModel):
    """
    Displayable advice text plus the outcome that produced it.

    `text` is always safe to render, including on failure.
    """

    text: str
    status: AdviceStatus
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status in (AdviceStatus.EMPTY, AdviceStatus.ERROR)
