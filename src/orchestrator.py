"""
Main Orchestrator for Smart Finance

This module ties together all the components and defines the
end-to-end flows for:
1. Ingestion (text / voice / document → extracted fields → store)
2. Deletion (user removes a record)
3. Advice (ledger → narrative report)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store unless extraction fully succeeded
- At most one extraction is in flight per flow; extra calls are rejected
- Every step is audited

This is the "glue" that ensures the system works correctly
even when individual components might behave unexpectedly.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import UUID

from src.agents import AdviceGenerator, ExtractionGateway, VoiceTranscriber
from src.audit import AuditLogger, create_correlation_id
from src.config import get_settings
from src.models.expense import (
    AdviceStatus,
    DocumentUpload,
    ExpenseRecord,
    SpendingSummary,
    utc_now,
)
from src.queries import summarize
from src.services.storage import ExpenseStore, LocalJSONStorage, StorageError
from src.validation import (
    ExtractionFailedError,
    ExtractionInProgressError,
    ExtractionServiceError,
    UnsupportedDocumentError,
)


class ExpenseIngestionFlow:
    """
    Orchestrates getting expenses into the store.

    Flow:
    1. Capture → text, a voice recording, or a document
    2. Extract → Gemini, schema-constrained
    3. Validate → inside the gateway; failure means nothing is saved
    4. Save → all extracted expenses in one store write, or none

    A single flow instance serves one user session. The in-flight
    guard rejects a second extraction while one is pending.
    """

    def __init__(
        self,
        store: ExpenseStore,
        gateway: ExtractionGateway,
        transcriber: Optional[VoiceTranscriber] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._gateway = gateway
        self._transcriber = transcriber
        self._audit_logger = audit_logger or AuditLogger()
        self._in_flight = False

    @property
    def is_busy(self) -> bool:
        """True while an extraction is pending."""
        return self._in_flight

    @contextmanager
    def _exclusive(self, source: str, correlation_id: UUID) -> Iterator[None]:
        # Checked and set before the first await, so no lock is needed
        if self._in_flight:
            self._audit_logger.log_extraction_rejected_in_flight(
                source=source,
                correlation_id=correlation_id,
            )
            raise ExtractionInProgressError()
        self._in_flight = True
        try:
            yield
        finally:
            self._in_flight = False

    def _extraction_failed(
        self,
        source: str,
        error: ExtractionFailedError,
        correlation_id: UUID,
    ) -> None:
        self._audit_logger.log_extraction_failed(source, error, correlation_id)
        if isinstance(error, ExtractionServiceError):
            self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=str(error.__cause__ or error),
                correlation_id=correlation_id,
            )

    def _save(self, record: ExpenseRecord, correlation_id: UUID) -> ExpenseRecord:
        return self._save_all([record], correlation_id)[0]

    def _save_all(
        self,
        records: list[ExpenseRecord],
        correlation_id: UUID,
    ) -> list[ExpenseRecord]:
        try:
            saved = self._store.add_all(records)
        except StorageError as e:
            self._audit_logger.log_error(
                error_type="storage_write_failed",
                error_message=str(e),
                details={"record_count": len(records)},
                correlation_id=correlation_id,
            )
            raise

        for record in saved:
            self._audit_logger.log_expense_saved(
                expense_id=record.id,
                description=record.description,
                amount=str(record.amount),
                correlation_id=correlation_id,
            )
        return saved

    async def _add_from_text(self, text: str, correlation_id: UUID) -> ExpenseRecord:
        try:
            extracted = await self._gateway.extract_from_text(text)
        except ExtractionFailedError as e:
            self._extraction_failed("text", e, correlation_id)
            raise

        self._audit_logger.log_expense_extracted("text", 1, correlation_id)
        # Text entries are always dated now, whatever the text said
        record = ExpenseRecord.from_extracted(extracted, date=utc_now())
        return self._save(record, correlation_id)

    async def add_from_text(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """
        Record one expense described in natural language.

        Raises:
            ExtractionFailedError: Nothing was saved
        """
        correlation_id = correlation_id or create_correlation_id()

        with self._exclusive("text", correlation_id):
            return await self._add_from_text(text, correlation_id)

    async def add_from_voice(
        self,
        audio: bytes,
        mime_type: str = "audio/wav",
        correlation_id: Optional[UUID] = None,
    ) -> Optional[ExpenseRecord]:
        """
        Transcribe a recording, then record it like typed text.

        Returns None, with only a logged diagnostic, when the recording
        could not be transcribed.

        Raises:
            ExtractionFailedError: The transcript could not be extracted
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._transcriber is None:
            self._audit_logger.log_error(
                error_type="voice_unavailable",
                error_message="No voice transcriber configured",
                correlation_id=correlation_id,
            )
            return None

        with self._exclusive("voice", correlation_id):
            transcript = await self._transcriber.transcribe(audio, mime_type)
            if not transcript:
                self._audit_logger.log_transcription_failed(correlation_id)
                return None

            self._audit_logger.log_voice_transcribed(transcript, correlation_id)
            return await self._add_from_text(transcript, correlation_id)

    async def add_from_file(
        self,
        data: bytes,
        filename: str,
        mime_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> list[ExpenseRecord]:
        """
        Record every expense found in an image or PDF.

        Returns the saved records; their count is what the user is told.

        Raises:
            ExtractionFailedError: Nothing was saved
            StorageError: Persisting failed; nothing was saved
        """
        correlation_id = correlation_id or create_correlation_id()

        with self._exclusive("file", correlation_id):
            try:
                upload = DocumentUpload(
                    original_filename=filename,
                    file_size_bytes=len(data),
                    mime_type=mime_type,
                )
            except ValueError as e:
                error = UnsupportedDocumentError()
                self._audit_logger.log_extraction_failed("file", error, correlation_id)
                raise error from e

            self._audit_logger.log_document_uploaded(
                upload_id=upload.upload_id,
                filename=filename,
                file_size=upload.file_size_bytes,
                mime_type=upload.mime_type,
                correlation_id=correlation_id,
            )

            try:
                items = await self._gateway.extract_from_file(data, upload)
            except ExtractionFailedError as e:
                self._extraction_failed("file", e, correlation_id)
                raise

            self._audit_logger.log_expense_extracted("file", len(items), correlation_id)
            records = [ExpenseRecord.from_extracted(item) for item in items]
            return self._save_all(records, correlation_id)

    def delete(
        self,
        expense_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Remove a record. Unknown ids are a no-op."""
        correlation_id = correlation_id or create_correlation_id()

        removed = self._store.remove(expense_id)
        if removed:
            self._audit_logger.log_expense_deleted(
                expense_id=expense_id,
                correlation_id=correlation_id,
            )
        return removed

    def records(self) -> list[ExpenseRecord]:
        return self._store.records()

    def summary(self) -> SpendingSummary:
        return summarize(self._store.records())


class AdviceFlow:
    """
    Orchestrates the on-demand advice report.

    Always resolves to displayable text.
    """

    def __init__(
        self,
        store: ExpenseStore,
        advice_generator: AdviceGenerator,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._advice_generator = advice_generator
        self._audit_logger = audit_logger or AuditLogger()

    async def generate(self, correlation_id: Optional[UUID] = None) -> str:
        correlation_id = correlation_id or create_correlation_id()

        records = self._store.records()
        report = await self._advice_generator.generate_advice(records)

        if report.failed:
            self._audit_logger.log_advice_failed(
                error=RuntimeError(report.error or report.status.value),
                correlation_id=correlation_id,
            )
        elif report.status == AdviceStatus.GENERATED:
            self._audit_logger.log_advice_generated(
                record_count=len(records),
                report=report.text,
                correlation_id=correlation_id,
            )
        return report.text


def create_app_components() -> tuple[ExpenseIngestionFlow, AdviceFlow, ExpenseStore]:
    """
    Factory function to create all application components.

    Loads the stored ledger before returning.

    Returns:
        (ingestion_flow, advice_flow, store)
    """
    settings = get_settings()
    audit_logger = AuditLogger()

    store = ExpenseStore(
        storage=LocalJSONStorage(settings.storage.data_dir),
        key=settings.storage.expenses_key,
        audit_logger=audit_logger,
    )
    store.load()

    ingestion_flow = ExpenseIngestionFlow(
        store=store,
        gateway=ExtractionGateway(),
        transcriber=VoiceTranscriber(),
        audit_logger=audit_logger,
    )
    advice_flow = AdviceFlow(
        store=store,
        advice_generator=AdviceGenerator(),
        audit_logger=audit_logger,
    )

    return ingestion_flow, advice_flow, store
