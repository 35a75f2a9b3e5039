"""Provisioning API settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DISABLED_SECRET = "disable"


class ProvisioningSettings(BaseSettings):
    """Provisioning API configuration.

    Read once from the environment (``SLACK_PROVISIONING_*``) or passed in
    explicitly, then handed to the router factory. Requests never re-read it.

    Attributes:
        prefix: Path prefix for the ``/v1`` endpoints.
        shared_secret: Bearer token clients must present. The literal
            ``disable`` turns the API off.
        debug_endpoints: Whether to mount ``/debug`` behind the shared secret.
    """

    model_config = SettingsConfigDict(env_prefix="SLACK_PROVISIONING_", frozen=True)

    prefix: str = "/_matrix/provision"
    shared_secret: str = Field(min_length=1)
    debug_endpoints: bool = False

    @field_validator("prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.rstrip("/")
        if value and not value.startswith("/"):
            raise ValueError(f"prefix must start with '/', got {value!r}")
        return value

    @property
    def enabled(self) -> bool:
        return self.shared_secret != DISABLED_SECRET
