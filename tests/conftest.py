"""
Test configuration and fixtures.
Google Sheets is never called: the sheet writer is an AsyncMock.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from leadhook.config import Settings
from leadhook.services.dedupe import MemoryCallRegistry


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        spreadsheet_id="sheet-123",
        gcp_service_account_json='{"type": "service_account"}',
        sheet_range="Sheet1!A:L",
        default_brokerage="Ariel Property Advisors",
        raw_max_chars=1000,
        normalize_roles=True,
        dedupe_max_keys=100,
        database_url=None,
        max_payload_bytes=2048,
    )


@pytest.fixture
def sheet_writer():
    """Mock for SheetWriter - records appended rows."""
    writer = MagicMock()
    writer.append_row = AsyncMock(return_value={"updates": {"updatedRange": "Sheet1!A2:L2"}})
    return writer


@pytest.fixture
def call_registry():
    return MemoryCallRegistry(max_keys=100)


@pytest.fixture
def app_state(settings, sheet_writer, call_registry):
    return SimpleNamespace(
        settings=settings,
        sheet_writer=sheet_writer,
        call_registry=call_registry,
    )


@pytest.fixture
def make_request(app_state):
    """Build a mock FastAPI Request with the fields the handlers access."""

    def _make(body: bytes = b"", headers: dict | None = None):
        req = MagicMock()
        req.app.state = app_state
        req.headers = headers or {"content-type": "application/json"}
        req.body = AsyncMock(return_value=body)
        return req

    return _make
