"""Locate a single shared item by drive ID, directory and file name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from onedrive_automation.graph.models import SharedItem, TargetPath

logger = logging.getLogger(__name__)


def find_shared_item(items: Iterable[SharedItem], target: TargetPath) -> SharedItem | None:
    """Return the first shared item whose drive, directory and name match the target.

    Items are scanned in the order given and the scan stops at the first
    match, so later duplicates are never inspected. Comparison is exact and
    case-sensitive.

    Args:
        items: Shared items, typically from GraphClient.list_shared_files().
        target: Drive ID and path of the wanted file.

    Returns:
        The matching SharedItem, or None when nothing matches.
    """
    scanned = 0
    for item in items:
        scanned += 1
        if item.drive_id != target.drive_id:
            continue
        if item.parent_path != target.directory:
            continue
        if item.name != target.file_name:
            continue
        logger.info(
            "[find_shared_item] match found; position:%d;directory:%s;name:%s",
            scanned,
            item.parent_path,
            item.name,
        )
        return item

    logger.info("[find_shared_item] no match; scanned:%d", scanned)
    return None
