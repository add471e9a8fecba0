"""Data models for Microsoft Graph drive items and shared-item lookup."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_FOLDER = "folder"
FIELD_SIZE = "size"
FIELD_DRIVE_ID = "driveId"
FIELD_PARENT_REFERENCE = "parentReference"
FIELD_PATH = "path"
FIELD_REMOTE_ITEM = "remoteItem"

# OData response keys
ODATA_NEXT_LINK = "@odata.nextLink"
ODATA_VALUE = "value"

ROOT_PATH = "/"
_ROOT_MARKER = "root:"


def normalize_directory(directory: str) -> str:
    """Give a directory a leading slash and drop any trailing slash.

    The drive root is always ``/``. No case folding is applied.
    """
    if not directory.startswith("/"):
        directory = "/" + directory
    if len(directory) > 1:
        directory = directory.rstrip("/") or ROOT_PATH
    return directory


def normalize_parent_path(path: str) -> str:
    """Convert a Graph ``parentReference.path`` into a drive-relative directory.

    ``/drive/root:/Docs/Q1`` and ``/drives/b!abc/root:/Docs/Q1`` both become
    ``/Docs/Q1``; ``/drive/root:`` becomes ``/``. Graph percent-encodes the
    path, so it is decoded. An absent path stays empty so it never matches
    a target directory.
    """
    if not path:
        return ""
    marker = path.find(_ROOT_MARKER)
    if marker != -1:
        path = path[marker + len(_ROOT_MARKER) :]
    return normalize_directory(unquote(path))


@dataclass(frozen=True)
class SharedItem:
    """A "shared with me" entry reduced to the fields used for lookup.

    Attributes:
        drive_id: ID of the drive that owns the item.
        parent_path: Normalized directory containing the item.
        name: Item name.
        raw: Unmodified Graph JSON for the entry.
    """

    drive_id: str
    parent_path: str
    name: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False, hash=False)

    @property
    def item_id(self) -> str:
        """ID of the item within its owning drive."""
        remote = self.raw.get(FIELD_REMOTE_ITEM) or {}
        return str(remote.get(FIELD_ID) or self.raw.get(FIELD_ID, ""))


@dataclass(frozen=True)
class TargetPath:
    """The drive and full path of the file to locate."""

    drive_id: str
    directory: str
    file_name: str

    @classmethod
    def from_path(cls, drive_id: str, full_path: str) -> TargetPath:
        """Split a user-supplied full path into directory and file name.

        Args:
            drive_id: ID of the drive holding the file.
            full_path: Path of the file within the drive, e.g. ``/Reports/q1.xlsx``.

        Returns:
            TargetPath with a normalized directory.

        Raises:
            ValueError: If the drive ID is empty or the path names no file.
        """
        if not drive_id.strip():
            raise ValueError("Target drive ID must not be empty")
        if full_path.endswith("/"):
            raise ValueError(f"Target path does not name a file: {full_path!r}")
        directory, file_name = posixpath.split(normalize_directory(full_path))
        if not file_name:
            raise ValueError(f"Target path does not name a file: {full_path!r}")
        return cls(drive_id=drive_id, directory=normalize_directory(directory), file_name=file_name)


@dataclass
class DriveItem:
    """Represents a single item (file or folder) in a drive listing."""

    id: str
    name: str
    drive_id: str
    parent_path: str
    is_folder: bool
    size: int = 0


def shared_item_from_raw(raw: dict[str, Any]) -> SharedItem:
    """Map a raw sharedWithMe entry to a SharedItem.

    Shared entries carry the source drive's coordinates in the ``remoteItem``
    facet; fields missing there fall back to the top-level entry.
    """
    remote = raw.get(FIELD_REMOTE_ITEM) or {}
    remote_ref = remote.get(FIELD_PARENT_REFERENCE) or {}
    parent_ref = raw.get(FIELD_PARENT_REFERENCE) or {}
    return SharedItem(
        drive_id=str(remote_ref.get(FIELD_DRIVE_ID) or parent_ref.get(FIELD_DRIVE_ID, "")),
        parent_path=normalize_parent_path(
            str(remote_ref.get(FIELD_PATH) or parent_ref.get(FIELD_PATH, ""))
        ),
        name=str(remote.get(FIELD_NAME) or raw.get(FIELD_NAME, "")),
        raw=raw,
    )


def drive_item_from_raw(raw: dict[str, Any]) -> DriveItem:
    """Map a raw Graph API item dict to a DriveItem dataclass."""
    parent_ref = raw.get(FIELD_PARENT_REFERENCE, {})
    return DriveItem(
        id=raw.get(FIELD_ID, ""),
        name=raw.get(FIELD_NAME, ""),
        drive_id=parent_ref.get(FIELD_DRIVE_ID, ""),
        parent_path=normalize_parent_path(parent_ref.get(FIELD_PATH, "")),
        is_folder=FIELD_FOLDER in raw,
        size=int(raw.get(FIELD_SIZE, 0)),
    )
