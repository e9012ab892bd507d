"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Complete traceability of what entered and left the ledger
2. Debugging capability when the AI service misbehaves
3. A trail the user can inspect when a record looks wrong

The audit logger:
- Gracefully handles failures (never crashes the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes every event as one structured log line.
    """

    def __init__(self):
        self._logger = structlog.get_logger("audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Auditing must never take the app down
            return False

        return True

    def log_document_uploaded(
        self,
        upload_id: UUID,
        filename: str,
        file_size: int,
        mime_type: str,
        correlation_id: UUID,
    ) -> None:
        """Log document upload event."""
        self.log(AuditEventBuilder.document_uploaded(
            upload_id=upload_id,
            filename=filename,
            file_size=file_size,
            mime_type=mime_type,
            correlation_id=correlation_id,
        ))

    def log_voice_transcribed(
        self,
        transcript: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.voice_transcribed(
            transcript_length=len(transcript),
            correlation_id=correlation_id,
        ))

    def log_transcription_failed(self, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.transcription_failed(
            correlation_id=correlation_id,
        ))

    def log_expense_extracted(
        self,
        source: str,
        item_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful extraction."""
        self.log(AuditEventBuilder.expense_extracted(
            source=source,
            item_count=item_count,
            correlation_id=correlation_id,
        ))

    def log_extraction_failed(
        self,
        source: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        """Log an extraction failure of any kind."""
        self.log(AuditEventBuilder.extraction_failed(
            source=source,
            error_kind=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    def log_extraction_rejected_in_flight(
        self,
        source: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.extraction_rejected_in_flight(
            source=source,
            correlation_id=correlation_id,
        ))

    def log_expense_saved(
        self,
        expense_id: UUID,
        description: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        """Log expense save."""
        self.log(AuditEventBuilder.expense_saved(
            expense_id=expense_id,
            description=description,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_expense_deleted(
        self,
        expense_id: UUID,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        ))

    def log_storage_read_failed(self, key: str, error: Exception) -> None:
        self.log(AuditEventBuilder.storage_read_failed(
            key=key,
            error_message=str(error),
        ))

    def log_advice_generated(
        self,
        record_count: int,
        report: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.advice_generated(
            record_count=record_count,
            report_length=len(report),
            correlation_id=correlation_id,
        ))

    def log_advice_failed(
        self,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.advice_failed(
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a file import).
    Pass it through all subsequent operations.
    """
    return uuid4()
