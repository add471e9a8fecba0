"""Path-based access to a single OneDrive or SharePoint document library."""

from __future__ import annotations

import logging
from urllib.parse import quote

from onedrive_automation.graph.client import GraphClient
from onedrive_automation.graph.models import (
    FIELD_ID,
    ROOT_PATH,
    DriveItem,
    drive_item_from_raw,
    normalize_directory,
)

logger = logging.getLogger(__name__)


class Drive:
    """Convenience wrapper addressing one drive by path rather than by raw URL."""

    def __init__(self, graph_client: GraphClient, drive_id: str) -> None:
        """Initialise the drive wrapper.

        Args:
            graph_client: Authenticated GraphClient instance.
            drive_id: ID of the drive to address.
        """
        self._graph = graph_client
        self.drive_id = drive_id

    @property
    def _base(self) -> str:
        return f"/drives/{quote(self.drive_id, safe='!')}"

    def _path_ref(self, path: str) -> str:
        return f"{self._base}/root:{quote(normalize_directory(path))}"

    def get_item(self, path: str) -> DriveItem:
        """Fetch metadata of the item at ``path``.

        Raises:
            GraphApiError: If the item does not exist (404) or the call fails.
        """
        return drive_item_from_raw(self._graph.get(self._path_ref(path)))

    def list_files(self, path: str = ROOT_PATH) -> list[DriveItem]:
        """List the children of the folder at ``path``, files and folders alike."""
        if normalize_directory(path) == ROOT_PATH:
            listing = f"{self._base}/root/children"
        else:
            listing = f"{self._path_ref(path)}:/children"
        items = [drive_item_from_raw(raw) for raw in self._graph.get_all(listing)]
        logger.info("[list_files] listed folder; path:%s;count:%d", path, len(items))
        return items

    def download_item(self, item_id: str) -> bytes:
        """Download the content of the item with the given ID."""
        return self._graph.get_content(f"{self._base}/items/{quote(item_id, safe='!')}/content")

    def download_file(self, path: str) -> bytes:
        """Download the content of the file at ``path``."""
        return self._graph.get_content(f"{self._path_ref(path)}:/content")


def drive_for_user(graph_client: GraphClient, user: str | None = None) -> Drive:
    """Resolve a user's OneDrive (or the signed-in user's) into a Drive.

    Args:
        graph_client: Authenticated GraphClient instance.
        user: UPN or object ID; None for the signed-in user.

    Returns:
        Drive addressing that user's OneDrive.
    """
    drive = graph_client.get_drive(user=user)
    return Drive(graph_client, str(drive[FIELD_ID]))
