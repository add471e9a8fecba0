"""Credential variants accepted by the token acquirer."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from onedrive_automation.config import AppConfig


def _reject_empty(instance: object) -> None:
    # Only field names go into the message; values may be secrets.
    for f in fields(instance):  # type: ignore[arg-type]
        value = getattr(instance, f.name)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{type(instance).__name__}.{f.name} must be a non-empty string")


@dataclass(frozen=True)
class ClientSecretCredential:
    """Application identity (service principal) for the client-credentials grant."""

    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)

    def __post_init__(self) -> None:
        _reject_empty(self)


@dataclass(frozen=True)
class UsernamePasswordCredential:
    """Service account sign-in for the resource-owner-password-credentials grant."""

    tenant_id: str
    client_id: str
    username: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        _reject_empty(self)


Credential: TypeAlias = ClientSecretCredential | UsernamePasswordCredential


def credential_from_config(config: AppConfig) -> Credential:
    """Build the single credential described by the configuration.

    Args:
        config: Application configuration instance.

    Returns:
        A ClientSecretCredential when a client secret is configured, or a
        UsernamePasswordCredential when a username and password are.

    Raises:
        ValueError: If both credential sets are configured, neither is, or
            only half of the username/password pair is present.
    """
    has_secret = config.client_secret is not None
    has_username = config.username is not None
    has_password = config.password is not None

    if has_username != has_password:
        raise ValueError("Username and password must be configured together")
    if has_secret and has_username:
        raise ValueError("Configure either a client secret or a username/password, not both")
    if has_secret:
        return ClientSecretCredential(
            tenant_id=config.tenant_id,
            client_id=config.client_id,
            client_secret=config.client_secret,  # type: ignore[arg-type]
        )
    if has_username:
        return UsernamePasswordCredential(
            tenant_id=config.tenant_id,
            client_id=config.client_id,
            username=config.username,  # type: ignore[arg-type]
            password=config.password,  # type: ignore[arg-type]
        )
    raise ValueError("No credential configured: set a client secret or a username/password")
