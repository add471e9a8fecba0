"""Destinations for downloaded file content."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobServiceClient

if TYPE_CHECKING:
    from onedrive_automation.config import AppConfig

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Anything that can persist a downloaded file under a name."""

    def save(self, name: str, content: bytes) -> str:
        """Persist ``content`` and return a description of where it went."""
        ...


def _safe_name(name: str) -> str:
    base = posixpath.basename(name.replace("\\", "/"))
    if not base or base in {".", ".."}:
        raise ValueError(f"Unusable file name: {name!r}")
    return base


class BlobSink:
    """Writes downloads to an Azure Blob Storage container."""

    def __init__(self, storage_connection_string: str, container: str) -> None:
        """Initialise the blob sink.

        Args:
            storage_connection_string: Azure Storage connection string.
            container: Blob container that receives the downloads.
        """
        self._blob_service = BlobServiceClient.from_connection_string(storage_connection_string)
        self._container = container

    def save(self, name: str, content: bytes) -> str:
        """Upload ``content`` as a blob, creating the container if needed."""
        blob_name = _safe_name(name)
        container_client = self._blob_service.get_container_client(self._container)
        try:
            container_client.create_container()
            logger.info("[BlobSink.save] created blob container; container:%s", self._container)
        except ResourceExistsError:
            pass

        blob_client = container_client.get_blob_client(blob_name)
        blob_client.upload_blob(content, overwrite=True)
        logger.info(
            "[BlobSink.save] stored download; container:%s;blob:%s;bytes:%d",
            self._container,
            blob_name,
            len(content),
        )
        return f"{self._container}/{blob_name}"


class LocalSink:
    """Writes downloads into a local directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def save(self, name: str, content: bytes) -> str:
        self._directory.mkdir(parents=True, exist_ok=True)
        destination = self._directory / _safe_name(name)
        destination.write_bytes(content)
        logger.info("[LocalSink.save] stored download; path:%s;bytes:%d", destination, len(content))
        return str(destination)


def sink_from_config(config: AppConfig) -> Sink:
    """Choose blob storage when a connection string is configured, else a local directory.

    Args:
        config: Application configuration instance.

    Returns:
        Configured sink.
    """
    if config.storage_connection_string:
        return BlobSink(config.storage_connection_string, config.output_container)
    return LocalSink(config.output_dir)
