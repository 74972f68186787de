"""
SigV4 signing of S3 browser-upload (POST) policies.

The output must match what S3 recomputes on its side, so the steps here
are fixed by the provider:

1. Capture the time once and derive the date stamp and ``x-amz-date``.
2. Build the policy conditions in a fixed order and base64 the JSON.
3. Derive the signing key through the four-step HMAC-SHA256 chain
   (date, region, service, request type).
4. Sign the base64 policy with that key and hex-encode the result.

``x-amz-date`` is pinned to midnight (``T000000Z``) of the signing day
instead of the exact second. S3 accepts this because the credential
scope is day-granular, and existing verifiers expect it, so it stays.
The policy's own five minute expiration is what bounds its use.
"""

import hashlib
import hmac
import logging
from datetime import datetime, timedelta
from typing import Optional

from .clock import Clock, FixedClock, SystemClock, read_utc
from .errors import PolicySigningError
from .models import (
    ALGORITHM,
    REQUEST_TYPE,
    SERVICE,
    CredentialScope,
    EqualityCondition,
    PolicyDocument,
    PolicyFormFields,
    SignedPolicyResult,
    SigningRequest,
    StartsWithCondition,
)
from .regions import endpoint_alias

logger = logging.getLogger(__name__)

POLICY_LIFETIME = timedelta(minutes=5)
SUCCESS_ACTION_STATUS = "201"
REQUESTED_WITH = "xhr"


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def derive_signing_key(
    secret_key: str,
    date_stamp: str,
    region: str,
    service: str = SERVICE,
) -> bytes:
    """
    Derive the SigV4 signing key for one day, region and service.

    kDate = HMAC("AWS4" + secret, date)
    kRegion = HMAC(kDate, region)
    kService = HMAC(kRegion, service)
    kSigning = HMAC(kService, "aws4_request")
    """
    k_date = _hmac_sha256(f"AWS4{secret_key}".encode("utf-8"), date_stamp)
    k_region = _hmac_sha256(k_date, region)
    k_service = _hmac_sha256(k_region, service)
    return _hmac_sha256(k_service, REQUEST_TYPE)


def compute_signature(signing_key: bytes, policy_base64: str) -> str:
    """Hex HMAC-SHA256 of the base64 policy under the derived key."""
    return hmac.new(signing_key, policy_base64.encode("utf-8"), hashlib.sha256).hexdigest()


# ---------------------------------------------------------------------------
# Policy construction
# ---------------------------------------------------------------------------

def _truncate_to_millis(instant: datetime) -> datetime:
    return instant.replace(microsecond=(instant.microsecond // 1000) * 1000)


def build_policy_document(
    request: SigningRequest,
    scope: CredentialScope,
    amz_date: str,
    now: datetime,
) -> PolicyDocument:
    """
    Assemble the policy in the order S3's form parser validates against.

    The session token clause is appended last and only for temporary
    credentials.
    """
    conditions = [
        EqualityCondition("bucket", request.bucket),
        EqualityCondition("acl", request.acl),
        EqualityCondition("success_action_status", SUCCESS_ACTION_STATUS),
        EqualityCondition("x-requested-with", REQUESTED_WITH),
        EqualityCondition("x-amz-algorithm", ALGORITHM),
        EqualityCondition("x-amz-credential", str(scope)),
        EqualityCondition("x-amz-date", amz_date),
        StartsWithCondition("key", request.key_start),
        StartsWithCondition("Content-Type", ""),
    ]
    if request.has_session_token:
        conditions.append(StartsWithCondition("x-amz-security-token", request.session_token))

    return PolicyDocument(
        expiration=_truncate_to_millis(now + POLICY_LIFETIME),
        conditions=tuple(conditions),
    )


# ---------------------------------------------------------------------------
# Signer
# ---------------------------------------------------------------------------

class PolicySigner:
    """
    Issues signed upload policies.

    Holds nothing but the clock, so one instance can be shared freely
    between threads and requests.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()

    def sign(self, request: SigningRequest) -> SignedPolicyResult:
        """Build and sign a policy for ``request``. Raises PolicySigningError subclasses."""
        if not isinstance(request, SigningRequest):
            raise PolicySigningError(
                f"Expected SigningRequest, got {type(request).__name__}"
            )

        region = request.canonical_region
        now = read_utc(self._clock)

        date_stamp = now.strftime("%Y%m%d")
        amz_date = f"{date_stamp}T000000Z"
        scope = CredentialScope(
            access_key_id=request.access_key_id,
            date_stamp=date_stamp,
            region=region,
        )

        document = build_policy_document(request, scope, amz_date, now)
        policy_base64 = document.encode()

        signing_key = derive_signing_key(request.secret_key, date_stamp, region)
        signature = compute_signature(signing_key, policy_base64)

        params = PolicyFormFields(
            acl=request.acl,
            policy=policy_base64,
            credential=str(scope),
            date=amz_date,
            signature=signature,
            security_token=request.session_token if request.has_session_token else None,
        )

        logger.debug(
            "Signed upload policy",
            extra={
                "bucket": request.bucket,
                "region": region,
                "key_start": request.key_start,
                "temporary_credentials": request.has_session_token,
                "expiration": document.to_json()["expiration"],
            }
        )

        return SignedPolicyResult(
            bucket=request.bucket,
            region=endpoint_alias(region),
            key_start=request.key_start,
            params=params,
            expires_at=document.expiration,
        )


def sign_policy(request: SigningRequest, now: Optional[datetime] = None) -> SignedPolicyResult:
    """
    Sign ``request`` in one call.

    ``now`` pins the signing instant (it must be timezone-aware); when
    omitted the system clock is read.
    """
    clock = FixedClock(now) if now is not None else SystemClock()
    return PolicySigner(clock).sign(request)
