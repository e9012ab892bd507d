"""
Tests for Smart Finance models

Test strategy:
1. Unit tests for individual components (models, validators, store)
2. Flow tests with fake Gemini models
3. No real API calls in tests
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.models.expense import (
    DocumentUpload,
    ExpenseRecord,
    ExpenseType,
    ExtractedExpense,
    SpendingSummary,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExtractedExpense:
    """Tests for the extraction payload."""

    def test_creation(self):
        """Test ExtractedExpense creation from model-shaped data."""
        extracted = ExtractedExpense(
            description="吃午饭",
            amount=20,
            category="餐饮",
            type="Need",
        )
        assert extracted.amount == Decimal("20")
        assert extracted.type == ExpenseType.NEED
        assert extracted.date is None

    def test_strips_whitespace(self):
        extracted = ExtractedExpense(
            description="  打车  ", amount=35.5, category=" 交通 ", type="Need"
        )
        assert extracted.description == "打车"
        assert extracted.category == "交通"

    @pytest.mark.parametrize("amount", [0, -5])
    def test_rejects_non_positive_amount(self, amount):
        """Amounts must be strictly positive."""
        with pytest.raises(ValidationError):
            ExtractedExpense(description="x", amount=amount, category="其他", type="Want")

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            ExtractedExpense(description="x", amount=1, category="其他", type="Luxury")

    def test_rejects_empty_description(self):
        with pytest.raises(ValidationError):
            ExtractedExpense(description="   ", amount=1, category="其他", type="Want")

    def test_calendar_date_becomes_midnight_utc(self):
        """A bare YYYY-MM-DD is normalized to a full timestamp."""
        extracted = ExtractedExpense(
            description="超市", amount=88, category="购物", type="Need", date="2024-05-01"
        )
        assert extracted.date == datetime(2024, 5, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_date_means_no_date(self, blank):
        extracted = ExtractedExpense(
            description="超市", amount=88, category="购物", type="Need", date=blank
        )
        assert extracted.date is None

    def test_rejects_malformed_date(self):
        with pytest.raises(ValidationError):
            ExtractedExpense(
                description="超市", amount=88, category="购物", type="Need", date="05/01/24"
            )


class TestExpenseRecord:
    """Tests for the stored record model."""

    def _extracted(self, **overrides):
        data = {"description": "咖啡", "amount": 30, "category": "餐饮", "type": "Want"}
        data.update(overrides)
        return ExtractedExpense(**data)

    def test_ids_are_unique(self):
        first = ExpenseRecord.from_extracted(self._extracted())
        second = ExpenseRecord.from_extracted(self._extracted())
        assert first.id != second.id

    def test_records_are_immutable(self):
        record = ExpenseRecord.from_extracted(self._extracted())
        with pytest.raises(ValidationError):
            record.amount = Decimal("1")

    def test_explicit_date_wins(self):
        extracted = self._extracted(date="2024-01-02")
        now = datetime(2025, 3, 3, 12, 0, tzinfo=timezone.utc)
        record = ExpenseRecord.from_extracted(extracted, date=now)
        assert record.date == now

    def test_extracted_date_used_when_no_explicit_date(self):
        record = ExpenseRecord.from_extracted(self._extracted(date="2024-01-02"))
        assert record.day == "2024-01-02"

    def test_defaults_to_now_without_any_date(self):
        before = datetime.now(timezone.utc)
        record = ExpenseRecord.from_extracted(self._extracted())
        assert record.date >= before

    def test_naive_date_is_taken_as_utc(self):
        record = ExpenseRecord(
            description="x", amount=1, category="其他", type="Need",
            date=datetime(2024, 1, 1, 8, 30),
        )
        assert record.date.tzinfo is not None

    def test_json_amount_is_a_number(self):
        """Amounts are persisted as JSON numbers, not strings."""
        whole = ExpenseRecord.from_extracted(self._extracted(amount=20))
        fractional = ExpenseRecord.from_extracted(self._extracted(amount=12.5))
        assert json.loads(whole.model_dump_json())["amount"] == 20
        assert json.loads(fractional.model_dump_json())["amount"] == 12.5


class TestDocumentUpload:
    """Tests for the document upload model."""

    @pytest.mark.parametrize("mime", ["image/jpeg", " IMAGE/PNG ", "application/pdf", "Text/Plain"])
    def test_mime_type_is_normalized(self, mime):
        """Acceptance is the gateway's call; the model only normalizes."""
        upload = DocumentUpload(original_filename="a", file_size_bytes=10, mime_type=mime)
        assert upload.mime_type == mime.strip().lower()

    def test_is_pdf(self):
        upload = DocumentUpload(
            original_filename="a.pdf", file_size_bytes=10, mime_type="application/pdf"
        )
        assert upload.is_pdf is True


class TestSpendingSummary:
    def test_shares_of_empty_summary_are_zero(self):
        summary = SpendingSummary()
        assert summary.want_share == 0.0
        assert summary.need_share == 0.0

    def test_want_share(self):
        summary = SpendingSummary(
            total=Decimal("100"),
            record_count=2,
            by_type={ExpenseType.NEED: Decimal("75"), ExpenseType.WANT: Decimal("25")},
        )
        assert summary.want_share == pytest.approx(0.25)
        assert summary.need_share == pytest.approx(0.75)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_SAVED,
            description="Expense saved",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_SAVED,
            description="Expense saved",
            details={"description": "午饭", "amount": "20"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_saved"
        assert log_dict["details"]["amount"] == "20"

    def test_builder_expense_saved(self):
        expense_id = uuid4()
        correlation_id = uuid4()
        event = AuditEventBuilder.expense_saved(
            expense_id=expense_id,
            description="午饭",
            amount="20",
            correlation_id=correlation_id,
        )
        assert event.entity_id == expense_id
        assert event.correlation_id == correlation_id

    def test_builder_extraction_failed_is_warning(self):
        event = AuditEventBuilder.extraction_failed(
            source="text",
            error_kind="ExtractionParseError",
            error_message="bad",
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.details["error_kind"] == "ExtractionParseError"

    def test_builder_expense_deleted_is_user_action(self):
        event = AuditEventBuilder.expense_deleted(expense_id=uuid4(), correlation_id=uuid4())
        assert event.is_user_action is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
