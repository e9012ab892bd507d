"""
AI Agents for Smart Finance

All calls to Gemini live here. Each agent has one job and a clear contract:

1. EXTRACTION GATEWAY:
   - CAN: Turn free text or a document into expense fields
   - MUST: Constrain the model to a fixed JSON schema
   - MUST: Validate the answer before anything reaches the store
   - CANNOT: Retry on its own; the user re-submits

2. VOICE TRANSCRIBER:
   - CAN: Turn a recording into one transcript string
   - NEVER raises; a failed recording is simply abandoned

3. ADVICE GENERATOR:
   - CAN: Write a narrative report FROM the user's ledger
   - NEVER raises; failures become a displayable message
   - Does not call the service at all when there is no data

The LLM is a TRANSLATOR. It proposes fields; validation decides.
"""

from datetime import datetime
from typing import Any, Optional, Sequence

import google.generativeai as genai
import structlog

from src.agents.prompts import (
    ADVICE_EMPTY_MESSAGE,
    ADVICE_ERROR_MESSAGE,
    DOCUMENT_EXPENSES_SCHEMA,
    NO_DATA_MESSAGE,
    TEXT_EXPENSE_SCHEMA,
    build_advice_prompt,
    build_document_prompt,
    build_text_prompt,
    build_transcription_prompt,
    format_ledger,
)
from src.config import AppSettings, GeminiSettings, get_settings
from src.models.expense import (
    AdviceReport,
    AdviceStatus,
    DocumentUpload,
    ExpenseRecord,
    ExtractedExpense,
    utc_now,
)
from src.validation import (
    ExtractionParseError,
    ExtractionResponseValidator,
    ExtractionServiceError,
    UnsupportedDocumentError,
)


logger = structlog.get_logger(__name__)


def create_gemini_model(
    settings: Optional[GeminiSettings] = None,
    temperature: Optional[float] = None,
) -> genai.GenerativeModel:
    """Configure Google Generative AI and build a model handle."""
    settings = settings or get_settings().gemini
    genai.configure(api_key=settings.api_key)
    return genai.GenerativeModel(
        model_name=settings.model_name,
        generation_config={
            "temperature": settings.temperature if temperature is None else temperature,
            "max_output_tokens": settings.max_tokens,
        }
    )


class ExtractionGateway:
    """
    Converts user input into validated expense fields.

    BOUNDARIES:
    - NEVER touches the record store
    - NEVER assigns ids
    - ALWAYS fails loudly with an ExtractionFailedError subtype
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        validator: Optional[ExtractionResponseValidator] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._app_settings = app_settings or get_settings().app
        self._validator = validator or ExtractionResponseValidator()
        self._model = model or create_gemini_model()

    async def _generate_json(self, contents: Any, schema: dict, source: str) -> str:
        try:
            response = await self._model.generate_content_async(
                contents,
                generation_config={
                    "response_mime_type": "application/json",
                    "response_schema": schema,
                },
            )
            return response.text
        except Exception as e:
            logger.error("gemini_extraction_failed", source=source, error=str(e))
            raise ExtractionServiceError() from e

    async def extract_from_text(self, text: str) -> ExtractedExpense:
        """
        Extract one expense from a natural-language sentence.

        Raises:
            ExtractionParseError: Blank input, or an answer without a
                usable amount and description
            ExtractionServiceError: The service call failed
        """
        if not text or not text.strip():
            raise ExtractionParseError()

        prompt = build_text_prompt(text.strip(), self._app_settings.currency_code)
        raw = await self._generate_json(prompt, TEXT_EXPENSE_SCHEMA, "text")
        extracted = self._validator.validate_text_response(raw)

        logger.info(
            "expense_extracted_from_text",
            category=extracted.category,
            type=extracted.type.value,
        )
        return extracted

    def check_document(self, data: bytes, upload: DocumentUpload) -> None:
        """
        Reject documents we will not send to the service.

        Raises:
            UnsupportedDocumentError: Wrong type, empty, or too large
        """
        if upload.mime_type not in self._app_settings.supported_document_types_list:
            raise UnsupportedDocumentError(
                f"{UnsupportedDocumentError.default_message} ({upload.mime_type})"
            )
        if not data:
            raise UnsupportedDocumentError("文件为空，请重新选择。")
        if len(data) > self._app_settings.max_upload_size_bytes:
            raise UnsupportedDocumentError(
                f"文件过大，请上传小于 {self._app_settings.max_upload_size_mb}MB 的文件。"
            )

    async def extract_from_file(
        self,
        data: bytes,
        upload: DocumentUpload,
        now: Optional[datetime] = None,
    ) -> list[ExtractedExpense]:
        """
        Extract every expense line from an image or PDF.

        Items without a date are dated `now` (default: the current time).

        Raises:
            UnsupportedDocumentError: The document was rejected up front
            ExtractionEmptyError: No expense lines were recognized
            ExtractionParseError: The answer did not match the schema
            ExtractionServiceError: The service call failed
        """
        self.check_document(data, upload)

        now = now or utc_now()
        contents = [
            {"mime_type": upload.mime_type, "data": data},
            build_document_prompt(now.year),
        ]
        raw = await self._generate_json(contents, DOCUMENT_EXPENSES_SCHEMA, "file")
        items = self._validator.validate_document_response(raw, now=now)

        logger.info(
            "expenses_extracted_from_file",
            filename=upload.original_filename,
            document="pdf" if upload.is_pdf else "image",
            count=len(items),
        )
        return items


class VoiceTranscriber:
    """
    Turns a voice recording into a single transcript.

    Failures are logged and reported as None; the caller abandons
    the action without bothering the user.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._app_settings = app_settings or get_settings().app
        self._model = model or create_gemini_model(temperature=0.0)

    async def transcribe(self, audio: bytes, mime_type: str) -> Optional[str]:
        if not audio:
            logger.warning("voice_capture_empty")
            return None

        prompt = build_transcription_prompt(self._app_settings.voice_locale)
        try:
            response = await self._model.generate_content_async(
                [{"mime_type": mime_type, "data": audio}, prompt]
            )
            transcript = (response.text or "").strip()
        except Exception as e:
            logger.warning("voice_transcription_failed", error=str(e))
            return None

        if not transcript:
            logger.warning("voice_transcription_empty")
            return None
        return transcript


class AdviceGenerator:
    """
    Writes a financial advice report from the full ledger.

    The response is free-form markdown and is not parsed.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._app_settings = app_settings or get_settings().app
        self._model = model or create_gemini_model(temperature=0.7)

    async def generate_advice(self, records: Sequence[ExpenseRecord]) -> AdviceReport:
        if not records:
            return AdviceReport(text=NO_DATA_MESSAGE, status=AdviceStatus.NO_DATA)

        ledger = format_ledger(records, self._app_settings.currency_symbol)
        try:
            response = await self._model.generate_content_async(
                build_advice_prompt(ledger)
            )
            report = (response.text or "").strip()
        except Exception as e:
            logger.error("advice_generation_failed", error=str(e))
            return AdviceReport(
                text=ADVICE_ERROR_MESSAGE,
                status=AdviceStatus.ERROR,
                error=str(e) or type(e).__name__,
            )

        if not report:
            logger.warning("advice_generation_empty")
            return AdviceReport(
                text=ADVICE_EMPTY_MESSAGE,
                status=AdviceStatus.EMPTY,
                error="Empty response",
            )
        return AdviceReport(text=report, status=AdviceStatus.GENERATED)
