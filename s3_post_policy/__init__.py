"""
s3-post-policy - Signed S3 POST policies for direct browser uploads.

This package contains:
- core: Framework-agnostic policy construction and SigV4 signing
- config: Settings for services that issue policies
- schemas: Parsing of the camelCase request object used by editor clients
"""

from .core.policy import (
    ClockError,
    InvalidRegionError,
    InvalidRequestError,
    MissingCredentialError,
    PolicySigner,
    PolicySigningError,
    SignedPolicyResult,
    SigningRequest,
    sign_policy,
)
from .schemas import SigningConfig, get_hash

__version__ = "0.1.0"

__all__ = [
    "ClockError",
    "InvalidRegionError",
    "InvalidRequestError",
    "MissingCredentialError",
    "PolicySigner",
    "PolicySigningError",
    "SignedPolicyResult",
    "SigningConfig",
    "SigningRequest",
    "get_hash",
    "sign_policy",
]
