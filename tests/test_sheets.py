"""
Tests for leadhook/services/sheets.py and startup validation.
All gspread / google-auth calls are mocked.
"""
from unittest.mock import MagicMock, patch

import pytest

from leadhook.config import ConfigError, Settings, validate_settings
from leadhook.services.sheets import (
    SCOPES,
    SheetWriter,
    build_sheet_writer,
    load_credentials,
)


def _settings(**overrides) -> Settings:
    values = {
        "spreadsheet_id": "sheet-123",
        "gcp_service_account_json": None,
        "gcp_service_account_file": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestValidateSettings:
    def test_missing_spreadsheet_id(self):
        with pytest.raises(ConfigError, match="SPREADSHEET_ID"):
            validate_settings(_settings(spreadsheet_id="  ", gcp_service_account_file="k.json"))

    def test_missing_credentials(self):
        with pytest.raises(ConfigError, match="GCP_SERVICE_ACCOUNT"):
            validate_settings(_settings())

    def test_valid(self):
        settings = _settings(gcp_service_account_file="k.json")
        assert validate_settings(settings) is settings


class TestLoadCredentials:
    def test_inline_json_preferred(self):
        settings = _settings(
            gcp_service_account_json='{"type": "service_account"}',
            gcp_service_account_file="k.json",
        )
        with patch(
            "leadhook.services.sheets.Credentials.from_service_account_info"
        ) as from_info, patch(
            "leadhook.services.sheets.Credentials.from_service_account_file"
        ) as from_file:
            creds = load_credentials(settings)
        from_info.assert_called_once_with({"type": "service_account"}, scopes=SCOPES)
        from_file.assert_not_called()
        assert creds is from_info.return_value

    def test_key_file(self):
        settings = _settings(gcp_service_account_file="/secrets/key.json")
        with patch("leadhook.services.sheets.Credentials.from_service_account_file") as from_file:
            load_credentials(settings)
        from_file.assert_called_once_with("/secrets/key.json", scopes=SCOPES)

    def test_unparsable_json(self):
        with pytest.raises(ConfigError, match="Failed to load"):
            load_credentials(_settings(gcp_service_account_json="{not json"))

    def test_incomplete_service_account(self):
        with pytest.raises(ConfigError):
            load_credentials(_settings(gcp_service_account_json='{"type": "service_account"}'))

    def test_missing_key_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_credentials(_settings(gcp_service_account_file=str(tmp_path / "missing.json")))

    def test_absent(self):
        with pytest.raises(ConfigError):
            load_credentials(_settings(gcp_service_account_json="not-json-at-all"))


class TestSheetWriter:
    async def test_append_row_uses_user_entered(self):
        spreadsheet = MagicMock()
        spreadsheet.values_append.return_value = {"updates": {"updatedRange": "Sheet1!A2:L2"}}
        client = MagicMock()
        client.open_by_key.return_value = spreadsheet
        row = ["cell"] * 12

        with patch("leadhook.services.sheets.gspread.authorize", return_value=client) as authorize:
            writer = SheetWriter("sheet-123", MagicMock(), "Leads!A:L")
            await writer.append_row(row)
            await writer.append_row(row)

        authorize.assert_called_once()
        client.open_by_key.assert_called_once_with("sheet-123")
        spreadsheet.values_append.assert_called_with(
            "Leads!A:L",
            params={"valueInputOption": "USER_ENTERED"},
            body={"values": [row]},
        )
        assert spreadsheet.values_append.call_count == 2

    async def test_append_errors_propagate(self):
        spreadsheet = MagicMock()
        spreadsheet.values_append.side_effect = RuntimeError("API error")
        client = MagicMock()
        client.open_by_key.return_value = spreadsheet

        with patch("leadhook.services.sheets.gspread.authorize", return_value=client):
            writer = SheetWriter("sheet-123", MagicMock())
            with pytest.raises(RuntimeError, match="API error"):
                await writer.append_row(["x"])


class TestBuildSheetWriter:
    def test_builds_from_settings(self):
        settings = _settings(gcp_service_account_file="k.json", sheet_range="Calls!A:L")
        with patch("leadhook.services.sheets.Credentials.from_service_account_file") as from_file:
            writer = build_sheet_writer(settings)
        assert writer.spreadsheet_id == "sheet-123"
        assert writer.sheet_range == "Calls!A:L"
        assert writer._credentials is from_file.return_value

    def test_invalid_config(self):
        with pytest.raises(ConfigError):
            build_sheet_writer(_settings(spreadsheet_id=""))
