"""
Audit Models for Smart Finance

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every record that enters or leaves the store
2. Debugging information when the AI service misbehaves
3. Ability to reconstruct what happened in a session

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Input capture
    DOCUMENT_UPLOADED = "document_uploaded"
    VOICE_TRANSCRIBED = "voice_transcribed"
    TRANSCRIPTION_FAILED = "transcription_failed"

    # Extraction
    EXPENSE_EXTRACTED = "expense_extracted"
    EXTRACTION_FAILED = "extraction_failed"
    EXTRACTION_REJECTED_IN_FLIGHT = "extraction_rejected_in_flight"

    # Persistence
    EXPENSE_SAVED = "expense_saved"
    EXPENSE_DELETED = "expense_deleted"
    STORAGE_READ_FAILED = "storage_read_failed"

    # Advice
    ADVICE_GENERATED = "advice_generated"
    ADVICE_FAILED = "advice_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'document', 'advice')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one file import)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_saved(expense_id, "午饭", "20", correlation_id)
    """

    @staticmethod
    def document_uploaded(
        upload_id: UUID,
        filename: str,
        file_size: int,
        mime_type: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_UPLOADED,
            entity_type="document",
            entity_id=upload_id,
            correlation_id=correlation_id,
            description=f"Document uploaded: {filename}",
            details={
                "filename": filename,
                "file_size_bytes": file_size,
                "mime_type": mime_type,
            },
            is_user_action=True,
        )

    @staticmethod
    def voice_transcribed(
        transcript_length: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_TRANSCRIBED,
            entity_type="voice",
            correlation_id=correlation_id,
            description="Voice recording transcribed",
            details={"transcript_length": transcript_length},
            is_user_action=True,
        )

    @staticmethod
    def transcription_failed(
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSCRIPTION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="voice",
            correlation_id=correlation_id,
            description="Voice recording produced no transcript; action abandoned",
        )

    @staticmethod
    def expense_extracted(
        source: str,
        item_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_EXTRACTED,
            entity_type="extraction",
            correlation_id=correlation_id,
            description=f"Extracted {item_count} expense(s) from {source}",
            details={
                "source": source,
                "item_count": item_count,
            },
        )

    @staticmethod
    def extraction_failed(
        source: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="extraction",
            correlation_id=correlation_id,
            description=f"Extraction from {source} failed: {error_kind}",
            error_message=error_message,
            details={
                "source": source,
                "error_kind": error_kind,
            },
        )

    @staticmethod
    def extraction_rejected_in_flight(
        source: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_REJECTED_IN_FLIGHT,
            severity=AuditSeverity.WARNING,
            entity_type="extraction",
            correlation_id=correlation_id,
            description=f"Extraction from {source} rejected: another one is pending",
            details={"source": source},
            is_user_action=True,
        )

    @staticmethod
    def expense_saved(
        expense_id: UUID,
        description: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_SAVED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense saved: {description} - {amount}",
            details={
                "description": description,
                "amount": amount,
            },
        )

    @staticmethod
    def expense_deleted(
        expense_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description="Expense deleted by user",
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(
        key: str,
        error_message: str
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            description=f"Stored collection '{key}' unreadable; starting empty",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def advice_generated(
        record_count: int,
        report_length: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_GENERATED,
            entity_type="advice",
            correlation_id=correlation_id,
            description=f"Advice generated from {record_count} record(s)",
            details={
                "record_count": record_count,
                "report_length": report_length,
            },
            is_user_action=True,
        )

    @staticmethod
    def advice_failed(
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="advice",
            correlation_id=correlation_id,
            description="Advice generation failed",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
