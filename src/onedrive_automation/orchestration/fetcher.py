"""Shared file fetcher: authenticate, find a shared file by path, download it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from onedrive_automation.auth.acquirer import TokenAcquirer
from onedrive_automation.auth.credentials import (
    ClientSecretCredential,
    Credential,
    credential_from_config,
)
from onedrive_automation.graph.client import graph_client_from_token
from onedrive_automation.graph.drive import Drive
from onedrive_automation.graph.locator import find_shared_item
from onedrive_automation.graph.models import SharedItem, TargetPath
from onedrive_automation.storage.sink import Sink, sink_from_config

if TYPE_CHECKING:
    from onedrive_automation.config import AppConfig

logger = logging.getLogger(__name__)

ITEM_NOT_FOUND_MESSAGE = "Item not found!"


class ItemNotFoundError(Exception):
    """Raised when no shared item matches the configured drive and path."""

    def __init__(self, message: str = ITEM_NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a successful fetch."""

    item: SharedItem
    size: int
    destination: str


class SharedFileFetcher:
    """Runs the shared-file retrieval job once.

    Steps: acquire a token, list the items shared with the drive owner, pick
    the one matching the target path, download it and hand it to the sink.
    Every failure propagates to the caller; nothing is retried.
    """

    def __init__(
        self,
        acquirer: TokenAcquirer,
        credential: Credential,
        target: TargetPath,
        sink: Sink,
        drive_user: str | None = None,
        http_timeout: float = 30.0,
    ) -> None:
        """Initialise the fetcher.

        Args:
            acquirer: TokenAcquirer used once per fetch.
            credential: Application or service-account credential.
            target: Drive ID and path of the shared file.
            sink: Destination for the downloaded bytes.
            drive_user: UPN or object ID whose shared items are listed. Required
                for application identities, which have no signed-in user.
            http_timeout: Seconds allowed for each Graph request.

        Raises:
            ValueError: If an application credential is given without a drive user.
        """
        if isinstance(credential, ClientSecretCredential) and not drive_user:
            raise ValueError("Application credentials require a drive user to list shared items")
        self._acquirer = acquirer
        self._credential = credential
        self._target = target
        self._sink = sink
        self._drive_user = drive_user
        self._http_timeout = http_timeout

    def fetch(self) -> FetchResult:
        """Run the job.

        Returns:
            FetchResult describing the downloaded item and where it was stored.

        Raises:
            GraphAuthError: If no token could be acquired.
            GraphApiError: If a Graph call fails.
            ItemNotFoundError: If no shared item matches the target.
        """
        token = self._acquirer.acquire(self._credential)
        client = graph_client_from_token(token, timeout=self._http_timeout)

        shared = client.list_shared_files(user=self._drive_user)
        item = find_shared_item(shared, self._target)
        if item is None:
            logger.error(
                "[fetch] shared item not found; directory:%s;name:%s",
                self._target.directory,
                self._target.file_name,
            )
            raise ItemNotFoundError()

        content = Drive(client, item.drive_id).download_item(item.item_id)
        destination = self._sink.save(item.name, content)
        logger.info("[fetch] fetch complete; name:%s;bytes:%d", item.name, len(content))
        return FetchResult(item=item, size=len(content), destination=destination)


def shared_file_fetcher_from_config(config: AppConfig) -> SharedFileFetcher:
    """Construct a SharedFileFetcher from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured SharedFileFetcher instance.
    """
    return SharedFileFetcher(
        acquirer=TokenAcquirer(timeout=config.http_timeout),
        credential=credential_from_config(config),
        target=TargetPath.from_path(config.target_drive_id, config.target_path),
        sink=sink_from_config(config),
        drive_user=config.drive_user,
        http_timeout=config.http_timeout,
    )
