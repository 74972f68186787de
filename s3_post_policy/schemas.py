"""
Parsing of the camelCase signing config used by editor integrations.

Rich-text editors that upload straight to S3 pass a config object shaped
like ``{bucket, region, keyStart, acl, accessKey, secretKey, sessionToken}``
and expect ``{bucket, region, keyStart, params}`` back. ``get_hash`` keeps
that dict-in, dict-out contract on top of the typed signer.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .core.policy import PolicySigningError, SigningRequest, sign_policy

logger = logging.getLogger(__name__)


class SigningConfig(BaseModel):
    """
    The editor-facing signing config.

    Fields default to None rather than being required so that absent
    credentials surface as MissingCredentialError from the signer instead
    of a generic validation error.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    bucket: Optional[str] = None
    region: Optional[str] = None
    key_start: Optional[str] = Field(default=None, alias="keyStart")
    acl: Optional[str] = None
    access_key: Optional[str] = Field(default=None, alias="accessKey", repr=False)
    secret_key: Optional[str] = Field(default=None, alias="secretKey", repr=False)
    session_token: Optional[str] = Field(default=None, alias="sessionToken", repr=False)

    def to_request(self) -> SigningRequest:
        """Convert to a validated SigningRequest, raising the typed signing errors."""
        try:
            return SigningRequest(
                bucket=self.bucket,
                region=self.region,
                key_start=self.key_start,
                acl=self.acl,
                access_key_id=self.access_key,
                secret_key=self.secret_key,
                session_token=self.session_token,
            )
        except PolicySigningError as e:
            logger.warning(
                "Rejected signing config",
                extra={
                    "bucket": self.bucket,
                    "region": self.region,
                    "error_type": type(e).__name__,
                    "error": str(e),
                }
            )
            raise


def get_hash(config: Mapping[str, Any], now: Optional[datetime] = None) -> dict[str, Any]:
    """
    Sign an upload policy from a camelCase config mapping.

    Returns ``{bucket, region, keyStart, params}`` ready to embed in the
    editor's upload options.
    """
    request = SigningConfig.model_validate(dict(config)).to_request()
    return sign_policy(request, now=now).to_dict()
