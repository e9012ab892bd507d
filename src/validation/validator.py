"""
Extraction Response Validation

DESIGN DECISION: Model output is never trusted as-is. Raw response text
goes through two stages before it becomes expense fields:

STAGE 1 - STRUCTURE:
- Is it JSON at all?
- Is it the right shape (object for text, non-empty list for documents)?

STAGE 2 - SCHEMA:
- Required fields present and truthy
- Amount positive, type exactly Need or Want
- Dates in YYYY-MM-DD form

A batch from a document is accepted or rejected as a whole. One bad item
rejects the batch.
"""

import json
from datetime import datetime
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from src.models.expense import ExtractedExpense, utc_now
from src.validation.errors import ExtractionEmptyError, ExtractionParseError


TEXT_FIELDS = ("description", "amount", "category", "type")

_items_adapter = TypeAdapter(list[ExtractedExpense])


def _strip_code_fence(text: str) -> str:
    """Remove a ```json ... ``` wrapper if the model added one."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _describe(error: ValidationError) -> str:
    issues = [
        f"{'.'.join(str(p) for p in err['loc']) or 'response'}: {err['msg']}"
        for err in error.errors()
    ]
    return "; ".join(issues)


class ExtractionResponseValidator:
    """
    Turns raw model output into validated ExtractedExpense objects.

    Raises ExtractionParseError / ExtractionEmptyError; never returns
    partially valid data.
    """

    def _load_json(self, raw: Optional[str], empty_default: str) -> Any:
        text = _strip_code_fence(raw or "") or empty_default
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ExtractionParseError(
                f"{ExtractionParseError.default_message} (invalid JSON: {e.msg})"
            ) from e

    def validate_text_response(self, raw: Optional[str]) -> ExtractedExpense:
        """
        Validate the answer to a single-expense text request.

        Any date the model volunteers is dropped; text entries are
        always dated at ingestion time by the caller.
        """
        data = self._load_json(raw, "{}")

        if not isinstance(data, dict):
            raise ExtractionParseError(
                f"{ExtractionParseError.default_message} (expected an object)"
            )

        if not data.get("amount") or not data.get("description"):
            raise ExtractionParseError()

        try:
            return ExtractedExpense.model_validate(
                {field: data.get(field) for field in TEXT_FIELDS}
            )
        except ValidationError as e:
            raise ExtractionParseError(
                f"{ExtractionParseError.default_message} ({_describe(e)})"
            ) from e

    def validate_document_response(
        self,
        raw: Optional[str],
        now: Optional[datetime] = None,
    ) -> list[ExtractedExpense]:
        """
        Validate the answer to a document request.

        Returns one item per array element, in order. Items without a
        date are dated `now`; dated items are at midnight UTC.
        """
        data = self._load_json(raw, "[]")

        if not isinstance(data, list) or not data:
            raise ExtractionEmptyError()

        try:
            items = _items_adapter.validate_python(data)
        except ValidationError as e:
            raise ExtractionParseError(
                f"{ExtractionParseError.default_message} ({_describe(e)})"
            ) from e

        now = now or utc_now()
        return [
            item if item.date is not None else item.model_copy(update={"date": now})
            for item in items
        ]
