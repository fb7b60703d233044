"""
Google Sheets append client.

gspread is synchronous; appends run in a worker thread so the event loop
keeps serving webhooks.
"""

import asyncio
import json
import logging

import gspread
from google.oauth2.service_account import Credentials

from leadhook.config import ConfigError, Settings, validate_settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def load_credentials(settings: Settings) -> Credentials:
    """Service-account credentials from inline JSON (preferred) or a key file."""
    inline = (settings.gcp_service_account_json or "").strip()
    try:
        if inline.startswith("{"):
            return Credentials.from_service_account_info(json.loads(inline), scopes=SCOPES)
        if settings.gcp_service_account_file:
            return Credentials.from_service_account_file(
                settings.gcp_service_account_file, scopes=SCOPES
            )
    except (ValueError, OSError) as e:
        raise ConfigError(f"Failed to load Google credentials: {e}") from e
    raise ConfigError(
        "Set GCP_SERVICE_ACCOUNT_JSON (inline) or GCP_SERVICE_ACCOUNT_FILE (path)."
    )


class SheetWriter:
    def __init__(self, spreadsheet_id: str, credentials: Credentials, sheet_range: str = "Sheet1!A:L"):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self._credentials = credentials
        self._spreadsheet = None

    def _open(self):
        if self._spreadsheet is None:
            client = gspread.authorize(self._credentials)
            self._spreadsheet = client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _append(self, row: list[str]) -> dict:
        return self._open().values_append(
            self.sheet_range,
            params={"valueInputOption": "USER_ENTERED"},
            body={"values": [row]},
        )

    async def append_row(self, row: list[str]) -> dict:
        """Append one row below the table in sheet_range; errors propagate."""
        result = await asyncio.to_thread(self._append, row)
        updated = (result or {}).get("updates", {}).get("updatedRange", "")
        logger.info("Appended row to %s %s", self.spreadsheet_id, updated or self.sheet_range)
        return result


def build_sheet_writer(settings: Settings) -> SheetWriter:
    """Validate configuration and build the writer; raises ConfigError."""
    validate_settings(settings)
    credentials = load_credentials(settings)
    return SheetWriter(settings.spreadsheet_id, credentials, settings.sheet_range)
