"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field

DEFAULT_OUTPUT_CONTAINER = "onedrive-automation-downloads"
DEFAULT_OUTPUT_DIR = "downloads"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Credential material
    is optional here; exactly one credential set is enforced when the
    credential is built (see ``credential_from_config``).
    """

    # Required: no defaults, fail at startup if missing
    tenant_id: str
    client_id: str
    target_drive_id: str
    target_path: str

    # Credential material: a client secret, or a username/password pair
    client_secret: str | None = field(default=None, repr=False)
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    # Optional settings: defaults provided, overridable via env
    drive_user: str | None = None
    storage_connection_string: str | None = field(default=None, repr=False)
    output_container: str = DEFAULT_OUTPUT_CONTAINER
    output_dir: str = DEFAULT_OUTPUT_DIR
    http_timeout: float = DEFAULT_HTTP_TIMEOUT


def _required(name: str) -> str:
    """Read a required environment variable, rejecting blank values."""
    value = os.environ[name]
    if not value.strip():
        raise ValueError(f"Environment variable {name} must not be empty")
    return value


def _optional(name: str) -> str | None:
    """Read an optional environment variable; blank values count as unset."""
    value = os.environ.get(name, "")
    return value if value.strip() else None


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        OA_TENANT_ID: Azure AD tenant ID.
        OA_CLIENT_ID: Azure AD application (client) ID.
        OA_TARGET_DRIVE_ID: ID of the drive that holds the shared file.
        OA_TARGET_PATH: Full path of the shared file within that drive.

    Credential environment variables (exactly one set):
        OA_CLIENT_SECRET: Application client secret (service principal).
        OA_USERNAME / OA_PASSWORD: Service account sign-in (delegated).

    Optional environment variables (with defaults):
        OA_DRIVE_USER: UPN or object ID whose shared items are listed.
            Required for service principals, which have no /me.
        AzureWebJobsStorage: Azure Storage connection string; when set,
            downloads are written to blob storage.
        OA_OUTPUT_CONTAINER: Blob container for downloads.
        OA_OUTPUT_DIR: Local directory for downloads when no storage is set.
        OA_HTTP_TIMEOUT: Timeout in seconds for identity and Graph calls (default: 30).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        tenant_id=_required("OA_TENANT_ID"),
        client_id=_required("OA_CLIENT_ID"),
        target_drive_id=_required("OA_TARGET_DRIVE_ID"),
        target_path=_required("OA_TARGET_PATH"),
        client_secret=_optional("OA_CLIENT_SECRET"),
        username=_optional("OA_USERNAME"),
        password=_optional("OA_PASSWORD"),
        drive_user=_optional("OA_DRIVE_USER"),
        storage_connection_string=_optional("AzureWebJobsStorage"),
        output_container=_optional("OA_OUTPUT_CONTAINER") or DEFAULT_OUTPUT_CONTAINER,
        output_dir=_optional("OA_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
        http_timeout=float(os.environ.get("OA_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))),
    )
