"""Low-level Microsoft Graph API client."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError
from urllib.parse import quote

from onedrive_automation.graph.models import (
    ODATA_NEXT_LINK,
    ODATA_VALUE,
    SharedItem,
    shared_item_from_raw,
)

if TYPE_CHECKING:
    from onedrive_automation.auth.acquirer import Token

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
DEFAULT_HTTP_TIMEOUT = 30.0


class GraphApiError(Exception):
    """Raised when the Graph API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Graph API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class GraphClient:
    """Authenticated client for Microsoft Graph API.

    Exposes typed calls for the handful of endpoints the automation needs
    (users, drives, shared items, content) on top of plain ``get``. The
    friendlier per-drive layer lives in ``graph.drive``.
    """

    def __init__(
        self,
        token_provider: Callable[[], str],
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        """Initialise the client.

        Args:
            token_provider: Zero-argument callable returning a bearer token.
            timeout: Seconds allowed for each Graph request.
        """
        self._token_provider = token_provider
        self._timeout = timeout

    def _send(self, path: str, accept: str) -> bytes:
        """Perform an authenticated GET and return the raw response body.

        Raises:
            GraphApiError: If the API returns a non-2xx status code.
        """
        url = path if path.startswith("https://") else f"{GRAPH_BASE_URL}{path}"
        req = urllib_request.Request(
            url,
            headers={"Accept": accept},
            method="GET",
        )
        # Unredirected so the bearer never reaches the pre-authenticated download host.
        req.add_unredirected_header("Authorization", f"Bearer {self._token_provider()}")
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                return resp.read()  # type: ignore[no-any-return]
        except HTTPError as exc:
            raw = exc.read()
            try:
                detail = json.loads(raw).get("error", {}).get("message", exc.reason)
            except (ValueError, AttributeError):
                detail = exc.reason
            logger.error("[_send] Graph request failed; status:%d;path:%s", exc.code, path)
            raise GraphApiError(exc.code, detail) from exc

    def get(self, path: str) -> dict[str, Any]:
        """Perform an authenticated GET request to the Graph API.

        Args:
            path: URL path relative to GRAPH_BASE_URL (must start with '/'),
                or an absolute ``@odata.nextLink`` URL.

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            GraphApiError: If the API returns a non-2xx status code.
        """
        return json.loads(self._send(path, "application/json"))  # type: ignore[no-any-return]

    def get_content(self, path: str) -> bytes:
        """Download raw bytes, following the pre-authenticated download redirect.

        Raises:
            GraphApiError: If the API returns a non-2xx status code.
        """
        return self._send(path, "*/*")

    def get_all(self, path: str) -> list[dict[str, Any]]:
        """Collect the ``value`` entries of a collection across all pages.

        Follows ``@odata.nextLink`` until the last page.
        """
        entries: list[dict[str, Any]] = []
        next_path: str | None = path
        while next_path is not None:
            response = self.get(next_path)
            entries.extend(response.get(ODATA_VALUE, []))
            next_path = response.get(ODATA_NEXT_LINK)
        return entries

    def get_user(self, user: str | None = None) -> dict[str, Any]:
        """Fetch a user profile; ``None`` means the signed-in user (delegated only)."""
        return self.get(_user_root(user))

    def get_drive(self, user: str | None = None, drive_id: str | None = None) -> dict[str, Any]:
        """Fetch drive metadata by drive ID, or the given (or signed-in) user's OneDrive."""
        if drive_id is not None:
            return self.get(f"/drives/{quote(drive_id, safe='!')}")
        return self.get(f"{_user_root(user)}/drive")

    def list_shared_files(self, user: str | None = None) -> list[SharedItem]:
        """List the items shared with a user, in the order Graph returns them.

        Args:
            user: UPN or object ID; ``None`` lists for the signed-in user.

        Returns:
            SharedItem list in response order.
        """
        entries = self.get_all(f"{_user_root(user)}/drive/sharedWithMe")
        logger.info("[list_shared_files] listed shared items; count:%d", len(entries))
        return [shared_item_from_raw(raw) for raw in entries]


def _user_root(user: str | None) -> str:
    return "/me" if user is None else f"/users/{quote(user, safe='@')}"


def graph_client_from_token(token: Token, timeout: float = DEFAULT_HTTP_TIMEOUT) -> GraphClient:
    """Construct a GraphClient that authenticates with an acquired token.

    Args:
        token: Token from TokenAcquirer.acquire().
        timeout: Seconds allowed for each Graph request.

    Returns:
        Configured GraphClient instance.
    """
    return GraphClient(token_provider=lambda: token.access_token, timeout=timeout)
