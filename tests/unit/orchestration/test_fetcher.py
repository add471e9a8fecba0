"""Unit tests for orchestration/fetcher.py: the shared file retrieval job."""

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest

from onedrive_automation.auth.acquirer import InvalidCredentialError, Token
from onedrive_automation.auth.credentials import (
    ClientSecretCredential,
    UsernamePasswordCredential,
)
from onedrive_automation.config import AppConfig
from onedrive_automation.graph.client import GraphApiError
from onedrive_automation.graph.models import SharedItem, TargetPath
from onedrive_automation.orchestration.fetcher import (
    ItemNotFoundError,
    SharedFileFetcher,
    shared_file_fetcher_from_config,
)
from onedrive_automation.storage.sink import LocalSink

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_CLIENT_FACTORY = "onedrive_automation.orchestration.fetcher.graph_client_from_token"

_USER_CREDENTIAL = UsernamePasswordCredential(
    tenant_id="tid", client_id="cid", username="svc@contoso.com", password="p"
)
_APP_CREDENTIAL = ClientSecretCredential(tenant_id="tid", client_id="cid", client_secret="s")
_TARGET = TargetPath(drive_id="A", directory="/x", file_name="g.txt")
_TOKEN = Token(access_token="tok", expires_at=datetime(2030, 1, 1, tzinfo=UTC), user="svc")


def _shared(name: str, item_id: str) -> SharedItem:
    return SharedItem(drive_id="A", parent_path="/x", name=name, raw={"id": item_id})


def _make_fetcher(
    credential: ClientSecretCredential | UsernamePasswordCredential = _USER_CREDENTIAL,
    drive_user: str | None = None,
) -> tuple[SharedFileFetcher, MagicMock, MagicMock]:
    """Return (fetcher, mock_acquirer, mock_sink)."""
    mock_acquirer = MagicMock()
    mock_acquirer.acquire.return_value = _TOKEN
    mock_sink = MagicMock()
    mock_sink.save.return_value = "downloads/g.txt"
    fetcher = SharedFileFetcher(
        acquirer=mock_acquirer,
        credential=credential,
        target=_TARGET,
        sink=mock_sink,
        drive_user=drive_user,
        http_timeout=9.0,
    )
    return fetcher, mock_acquirer, mock_sink


# ---------------------------------------------------------------------------
# fetch() tests
# ---------------------------------------------------------------------------


class TestFetch:
    def test_downloads_matching_item_to_sink(self) -> None:
        fetcher, mock_acquirer, mock_sink = _make_fetcher()
        mock_client = MagicMock()
        mock_client.list_shared_files.return_value = [
            _shared("f.txt", "id-f"),
            _shared("g.txt", "id-g"),
        ]
        mock_client.get_content.return_value = b"hello"

        with patch(_CLIENT_FACTORY, return_value=mock_client) as mock_factory:
            result = fetcher.fetch()

        mock_acquirer.acquire.assert_called_once_with(_USER_CREDENTIAL)
        mock_factory.assert_called_once_with(_TOKEN, timeout=9.0)
        mock_client.list_shared_files.assert_called_once_with(user=None)
        mock_client.get_content.assert_called_once_with("/drives/A/items/id-g/content")
        mock_sink.save.assert_called_once_with("g.txt", b"hello")
        assert result.item.name == "g.txt"
        assert result.size == 5
        assert result.destination == "downloads/g.txt"

    def test_raises_item_not_found(self) -> None:
        fetcher, _, mock_sink = _make_fetcher()
        mock_client = MagicMock()
        mock_client.list_shared_files.return_value = [_shared("f.txt", "id-f")]

        with (
            patch(_CLIENT_FACTORY, return_value=mock_client),
            pytest.raises(ItemNotFoundError, match="Item not found!"),
        ):
            fetcher.fetch()

        mock_client.get_content.assert_not_called()
        mock_sink.save.assert_not_called()

    def test_application_identity_lists_for_drive_user(self) -> None:
        fetcher, _, _ = _make_fetcher(_APP_CREDENTIAL, drive_user="owner@contoso.com")
        mock_client = MagicMock()
        mock_client.list_shared_files.return_value = [_shared("g.txt", "id-g")]
        mock_client.get_content.return_value = b""

        with patch(_CLIENT_FACTORY, return_value=mock_client):
            fetcher.fetch()

        mock_client.list_shared_files.assert_called_once_with(user="owner@contoso.com")

    def test_application_identity_requires_drive_user(self) -> None:
        with pytest.raises(ValueError, match="drive user"):
            _make_fetcher(_APP_CREDENTIAL)

    def test_auth_error_propagates_without_graph_calls(self) -> None:
        fetcher, mock_acquirer, _ = _make_fetcher()
        mock_acquirer.acquire.side_effect = InvalidCredentialError("invalid_grant")

        with patch(_CLIENT_FACTORY) as mock_factory, pytest.raises(InvalidCredentialError):
            fetcher.fetch()

        mock_factory.assert_not_called()

    def test_graph_error_propagates_without_retry(self) -> None:
        fetcher, _, _ = _make_fetcher()
        mock_client = MagicMock()
        mock_client.list_shared_files.side_effect = GraphApiError(503, "Service unavailable")

        with patch(_CLIENT_FACTORY, return_value=mock_client), pytest.raises(GraphApiError):
            fetcher.fetch()

        mock_client.list_shared_files.assert_called_once()


class TestItemNotFoundError:
    def test_default_message(self) -> None:
        assert str(ItemNotFoundError()) == "Item not found!"


# ---------------------------------------------------------------------------
# shared_file_fetcher_from_config tests
# ---------------------------------------------------------------------------


class TestSharedFileFetcherFromConfig:
    def test_wires_fetcher_from_config(self) -> None:
        config = AppConfig(
            tenant_id="tid",
            client_id="cid",
            target_drive_id="A",
            target_path="/x/g.txt",
            username="svc@contoso.com",
            password="p",
            output_dir="out",
            http_timeout=4.0,
        )

        fetcher = shared_file_fetcher_from_config(config)

        assert fetcher._target == _TARGET
        assert fetcher._credential == _USER_CREDENTIAL
        assert isinstance(fetcher._sink, LocalSink)
        assert fetcher._http_timeout == 4.0

    def test_rejects_config_without_credential(self) -> None:
        config = AppConfig(
            tenant_id="tid", client_id="cid", target_drive_id="A", target_path="/x/g.txt"
        )
        with pytest.raises(ValueError):
            shared_file_fetcher_from_config(config)
