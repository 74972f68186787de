"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (or a ``.env`` file)
with sensible defaults. Settings describe where policies should point
(bucket, region, key prefix, ACL) and which credentials sign them.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.policy import SigningRequest


class Settings(BaseSettings):
    """
    Settings for services that issue upload policies.

    All settings can be overridden via environment variables, e.g.
    ``S3_BUCKET=my-uploads``.
    """

    # Upload target
    s3_bucket: str = Field(
        default="",
        description="Bucket that browser uploads are posted to"
    )
    s3_region: str = Field(
        default="us-east-1",
        description="Canonical region of the bucket. 's3' is accepted as an alias for us-east-1."
    )
    s3_key_start: str = Field(
        default="uploads/",
        description="Prefix every uploaded object key must start with"
    )
    s3_acl: str = Field(
        default="public-read",
        description="Canned ACL applied to uploaded objects"
    )

    # Credentials
    s3_access_key: str = Field(
        default="",
        description="Access key ID used in the credential scope"
    )
    s3_secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="Secret access key. Only used to derive the signing key."
    )
    s3_session_token: Optional[SecretStr] = Field(
        default=None,
        description="Session token, required when the credentials are temporary (STS, Lambda)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_required_fields(self) -> list[str]:
        """Return the environment variable names of required settings that are empty."""
        missing = []
        if not self.s3_bucket:
            missing.append("S3_BUCKET")
        if not self.s3_access_key:
            missing.append("S3_ACCESS_KEY")
        if not self.s3_secret_key.get_secret_value():
            missing.append("S3_SECRET_KEY")
        return missing

    def to_signing_request(self) -> SigningRequest:
        """Build a SigningRequest from these settings. Raises the typed signing errors."""
        session_token = (
            self.s3_session_token.get_secret_value() if self.s3_session_token else None
        )
        return SigningRequest(
            bucket=self.s3_bucket,
            region=self.s3_region,
            key_start=self.s3_key_start,
            acl=self.s3_acl,
            access_key_id=self.s3_access_key,
            secret_key=self.s3_secret_key.get_secret_value(),
            session_token=session_token or None,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
