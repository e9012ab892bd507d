"""
Shared fixtures.

No test talks to the real Gemini API; agents are given a fake model
object exposing the one coroutine they call.
"""

import asyncio
from types import SimpleNamespace

import pytest

from src.audit import AuditLogger
from src.config import AppSettings
from src.services.storage import ExpenseStore, InMemoryStorage


class RecordingAuditLogger(AuditLogger):
    """Keeps every audit event it is given."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        self.events.append(event)
        return super().log(event)

    def event_types(self):
        return [event.event_type for event in self.events]


class FakeGeminiModel:
    """Stands in for genai.GenerativeModel in tests."""

    def __init__(self, responses=None, error=None, gate=None):
        self.responses = list(responses or [])
        self.error = error
        self.gate = gate
        self.calls = []

    async def generate_content_async(self, contents, **kwargs):
        self.calls.append(SimpleNamespace(contents=contents, kwargs=kwargs))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.responses.pop(0))


@pytest.fixture
def fake_model():
    """Factory: fake_model(responses=[...], error=..., gate=asyncio.Event())."""
    return FakeGeminiModel


@pytest.fixture
def app_settings():
    return AppSettings(
        currency_code="CNY",
        currency_symbol="¥",
        voice_locale="zh-CN",
        max_upload_size_mb=1,
    )


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    expense_store = ExpenseStore(storage, key="test_expenses", audit_logger=AuditLogger())
    expense_store.load()
    return expense_store


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


@pytest.fixture
def audit_logger():
    return RecordingAuditLogger()
