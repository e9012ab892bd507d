"""
Data Models Package

This package contains all Pydantic models used in the Smart Finance system.
All data flowing through the system must conform to these schemas.
"""

from src.models.expense import (
    AdviceReport,
    AdviceStatus,
    DocumentUpload,
    ExpenseRecord,
    ExpenseType,
    ExtractedExpense,
    SpendingSummary,
    utc_now,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "AdviceReport",
    "AdviceStatus",
    "DocumentUpload",
    "ExpenseRecord",
    "ExpenseType",
    "ExtractedExpense",
    "SpendingSummary",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
