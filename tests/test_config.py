"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.config import (
    AppSettings,
    GeminiSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


def test_gemini_settings_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-test")

    settings = GeminiSettings(_env_file=None)

    assert settings.api_key == "test-key"
    assert settings.model_name == "gemini-test"


def test_gemini_api_key_is_required(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ValidationError):
        GeminiSettings(_env_file=None)


def test_storage_defaults(monkeypatch):
    monkeypatch.delenv("STORAGE_DATA_DIR", raising=False)
    monkeypatch.delenv("STORAGE_EXPENSES_KEY", raising=False)

    settings = StorageSettings(_env_file=None)

    assert settings.data_dir == Path(".data")
    assert settings.expenses_key == "smart_finance_expenses"


@pytest.mark.parametrize("key", ["../escape", "a/b", "a\\b", ".."])
def test_storage_key_must_be_a_file_name(key):
    with pytest.raises(ValidationError):
        StorageSettings(expenses_key=key, _env_file=None)


def test_app_settings_helpers():
    settings = AppSettings(
        supported_document_types=" image/PNG , application/pdf,, ",
        max_upload_size_mb=2,
        _env_file=None,
    )
    assert settings.supported_document_types_list == ["image/png", "application/pdf"]
    assert settings.max_upload_size_bytes == 2 * 1024 * 1024


def test_validate_all_settings_reports_missing_key(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    get_settings.cache_clear()

    status = validate_all_settings()

    assert status["gemini"] is False
    assert "gemini_error" in status
    assert status["storage"] is True
    assert status["app"] is True


@pytest.mark.parametrize("debug_mode, log_level, expected", [
    (False, "warning", "WARNING"),
    (True, "WARNING", "DEBUG"),
])
def test_debug_mode_forces_debug_logging(debug_mode, log_level, expected):
    settings = AppSettings(debug_mode=debug_mode, log_level=log_level, _env_file=None)
    assert settings.effective_log_level == expected
