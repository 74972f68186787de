"""
Upload policy signing.

Contains the request/result models, region handling, the clock
abstraction and the SigV4 signer.
"""

from .clock import Clock, FixedClock, SystemClock
from .errors import (
    ClockError,
    InvalidRegionError,
    InvalidRequestError,
    MissingCredentialError,
    PolicySigningError,
)
from .models import (
    CredentialScope,
    EqualityCondition,
    PolicyDocument,
    PolicyFormFields,
    SignedPolicyResult,
    SigningRequest,
    StartsWithCondition,
)
from .regions import PRIMORDIAL_REGION, endpoint_alias, normalize_region
from .signer import PolicySigner, derive_signing_key, compute_signature, sign_policy

__all__ = [
    "Clock",
    "ClockError",
    "CredentialScope",
    "EqualityCondition",
    "FixedClock",
    "InvalidRegionError",
    "InvalidRequestError",
    "MissingCredentialError",
    "PRIMORDIAL_REGION",
    "PolicyDocument",
    "PolicyFormFields",
    "PolicySigner",
    "PolicySigningError",
    "SignedPolicyResult",
    "SigningRequest",
    "StartsWithCondition",
    "SystemClock",
    "compute_signature",
    "derive_signing_key",
    "endpoint_alias",
    "normalize_region",
    "sign_policy",
]
