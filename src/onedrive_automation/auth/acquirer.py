"""Token acquisition with MSAL for application and delegated identities."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import msal

from onedrive_automation.auth.credentials import (
    ClientSecretCredential,
    Credential,
    UsernamePasswordCredential,
)

logger = logging.getLogger(__name__)

GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
AUTHORITY_BASE_URL = "https://login.microsoftonline.com"
DEFAULT_TIMEOUT = 30.0

# AADSTS65001: the user or administrator has not consented to use the application.
_CONSENT_ERROR_CODES = frozenset({65001})
_CONSENT_ERRORS = frozenset({"consent_required"})


class GraphAuthError(Exception):
    """Raised when a token cannot be acquired from the identity provider."""


class InvalidCredentialError(GraphAuthError):
    """The identity provider rejected the secret, password or identifiers."""


class ConsentRequiredError(GraphAuthError):
    """The requested permissions lack admin or user consent."""


class AuthNetworkError(GraphAuthError):
    """The identity provider could not be reached or timed out."""


@dataclass(frozen=True)
class Token:
    """Bearer token returned by the identity provider.

    Attributes:
        access_token: Opaque bearer string for the Authorization header.
        expires_at: UTC instant after which the token is no longer valid.
        user: Signed-in account for delegated tokens; None for
            application-only tokens.
    """

    access_token: str = field(repr=False)
    expires_at: datetime
    user: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True once ``now`` (default: current UTC time) reaches the expiry."""
        current = now if now is not None else datetime.now(tz=UTC)
        return current >= self.expires_at


class TokenAcquirer:
    """Exchanges a Credential for a Microsoft Graph bearer token.

    Each call builds a fresh MSAL application, so no token is cached between
    calls and independent acquisitions share no state. Failures are raised
    immediately; retry policy belongs to the caller.
    """

    def __init__(
        self,
        scopes: list[str] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialise the acquirer.

        Args:
            scopes: Scopes to request (default: Graph ``.default``, i.e. every
                permission already consented for the app registration).
            timeout: Seconds allowed for each identity provider round trip.
        """
        self._scopes = list(scopes) if scopes is not None else list(GRAPH_SCOPES)
        self._timeout = timeout

    def acquire(self, credential: Credential) -> Token:
        """Acquire a token using the grant that matches the credential variant.

        Args:
            credential: ClientSecretCredential (client-credentials grant) or
                UsernamePasswordCredential (password grant).

        Returns:
            Token for Microsoft Graph.

        Raises:
            InvalidCredentialError: If the identity provider rejects the credential.
            ConsentRequiredError: If the permissions have not been consented.
            AuthNetworkError: On transport failure or timeout.
            TypeError: If ``credential`` is not a supported variant.
        """
        authority = f"{AUTHORITY_BASE_URL}/{credential.tenant_id}"
        try:
            if isinstance(credential, ClientSecretCredential):
                result = self._acquire_for_client(credential, authority)
            elif isinstance(credential, UsernamePasswordCredential):
                result = self._acquire_by_password(credential, authority)
            else:
                raise TypeError(f"Unsupported credential type: {type(credential).__name__}")
        except OSError as exc:
            logger.error(
                "[acquire] identity provider request failed; tenant_id:%s;error:%s",
                credential.tenant_id,
                type(exc).__name__,
            )
            raise AuthNetworkError(f"Token request to {authority} failed: {exc}") from exc
        except ValueError as exc:
            # MSAL raises ValueError when the tenant authority cannot be resolved.
            logger.error(
                "[acquire] authority rejected; tenant_id:%s",
                credential.tenant_id,
            )
            raise InvalidCredentialError(f"Authority {authority} rejected: {exc}") from exc

        if "access_token" not in result:
            raise self._error_from_result(result)

        user = None
        if isinstance(credential, UsernamePasswordCredential):
            claims = result.get("id_token_claims") or {}
            user = str(claims.get("preferred_username") or credential.username)

        expires_in = int(result.get("expires_in", 0))
        token = Token(
            access_token=str(result["access_token"]),
            expires_at=datetime.now(tz=UTC) + timedelta(seconds=expires_in),
            user=user,
        )
        logger.info(
            "[acquire] token acquired; grant:%s;expires_in:%d",
            "client_credentials" if user is None else "password",
            expires_in,
        )
        return token

    def _acquire_for_client(
        self, credential: ClientSecretCredential, authority: str
    ) -> dict[str, Any]:
        app = msal.ConfidentialClientApplication(
            client_id=credential.client_id,
            client_credential=credential.client_secret,
            authority=authority,
            timeout=self._timeout,
        )
        return app.acquire_token_for_client(scopes=self._scopes) or {}

    def _acquire_by_password(
        self, credential: UsernamePasswordCredential, authority: str
    ) -> dict[str, Any]:
        app = msal.PublicClientApplication(
            client_id=credential.client_id,
            authority=authority,
            timeout=self._timeout,
        )
        return (
            app.acquire_token_by_username_password(
                username=credential.username,
                password=credential.password,
                scopes=self._scopes,
            )
            or {}
        )

    @staticmethod
    def _error_from_result(result: dict[str, Any]) -> GraphAuthError:
        """Map an OAuth error payload onto the GraphAuthError taxonomy."""
        error = str(result.get("error", "unknown_error"))
        description = str(result.get("error_description", "No description provided"))
        codes = set(result.get("error_codes") or [])
        logger.error("[acquire] MSAL token acquisition failed; error:%s", error)

        message = f"Token acquisition failed: {error} - {description}"
        if error in _CONSENT_ERRORS or codes & _CONSENT_ERROR_CODES or "AADSTS65001" in description:
            return ConsentRequiredError(message)
        return InvalidCredentialError(message)
