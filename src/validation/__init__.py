"""Response validation package."""

from src.validation.errors import (
    ExtractionEmptyError,
    ExtractionFailedError,
    ExtractionInProgressError,
    ExtractionParseError,
    ExtractionServiceError,
    UnsupportedDocumentError,
)
from src.validation.validator import ExtractionResponseValidator

__all__ = [
    "ExtractionEmptyError",
    "ExtractionFailedError",
    "ExtractionInProgressError",
    "ExtractionParseError",
    "ExtractionResponseValidator",
    "ExtractionServiceError",
    "UnsupportedDocumentError",
]
