"""Unit tests for config.py: AppConfig and load_config()."""

import os
from unittest.mock import patch

import pytest

from onedrive_automation.config import AppConfig, load_config

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Minimal set of required environment variables for load_config()
_REQUIRED_ENV = {
    "OA_TENANT_ID": "test-tenant-id",
    "OA_CLIENT_ID": "test-client-id",
    "OA_TARGET_DRIVE_ID": "b!drive-001",
    "OA_TARGET_PATH": "/Reports/q1.xlsx",
}


# ---------------------------------------------------------------------------
# AppConfig tests
# ---------------------------------------------------------------------------


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig(
            tenant_id="tid",
            client_id="cid",
            target_drive_id="b!drive",
            target_path="/a.txt",
        )
        assert config.client_secret is None
        assert config.drive_user is None
        assert config.output_container == "onedrive-automation-downloads"
        assert config.output_dir == "downloads"
        assert config.http_timeout == 30.0

    def test_secrets_hidden_from_repr(self) -> None:
        config = AppConfig(
            tenant_id="tid",
            client_id="cid",
            target_drive_id="b!drive",
            target_path="/a.txt",
            client_secret="s3cr3t",
            password="pa55",
            storage_connection_string="AccountKey=k3y",
        )
        text = repr(config)
        assert "s3cr3t" not in text
        assert "pa55" not in text
        assert "k3y" not in text


# ---------------------------------------------------------------------------
# load_config tests
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_reads_required_values(self) -> None:
        with patch.dict(os.environ, _REQUIRED_ENV, clear=True):
            config = load_config()
        assert config.tenant_id == "test-tenant-id"
        assert config.client_id == "test-client-id"
        assert config.target_drive_id == "b!drive-001"
        assert config.target_path == "/Reports/q1.xlsx"

    def test_reads_credentials_and_options(self) -> None:
        env = {
            **_REQUIRED_ENV,
            "OA_USERNAME": "svc@contoso.com",
            "OA_PASSWORD": "p",
            "OA_DRIVE_USER": "owner@contoso.com",
            "AzureWebJobsStorage": "DefaultEndpointsProtocol=https;AccountName=test",
            "OA_OUTPUT_CONTAINER": "inbox",
            "OA_HTTP_TIMEOUT": "12.5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.username == "svc@contoso.com"
        assert config.password == "p"
        assert config.drive_user == "owner@contoso.com"
        assert config.storage_connection_string is not None
        assert config.output_container == "inbox"
        assert config.http_timeout == 12.5

    def test_blank_optional_values_treated_as_unset(self) -> None:
        env = {**_REQUIRED_ENV, "OA_CLIENT_SECRET": "  ", "OA_DRIVE_USER": ""}
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.client_secret is None
        assert config.drive_user is None

    def test_blank_output_settings_fall_back_to_defaults(self) -> None:
        env = {**_REQUIRED_ENV, "OA_OUTPUT_CONTAINER": "  ", "OA_OUTPUT_DIR": ""}
        with patch.dict(os.environ, env, clear=True):
            config = load_config()
        assert config.output_container == "onedrive-automation-downloads"
        assert config.output_dir == "downloads"

    def test_raises_key_error_when_required_missing(self) -> None:
        env = {k: v for k, v in _REQUIRED_ENV.items() if k != "OA_TARGET_PATH"}
        with patch.dict(os.environ, env, clear=True), pytest.raises(KeyError):
            load_config()

    def test_raises_value_error_when_required_blank(self) -> None:
        env = {**_REQUIRED_ENV, "OA_TENANT_ID": " "}
        with patch.dict(os.environ, env, clear=True), pytest.raises(ValueError, match="OA_TENANT_ID"):
            load_config()
