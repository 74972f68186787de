"""
Domain models for signed upload policies.

Every model here is a frozen value object, built fresh for one signing
call and never mutated afterwards. None of them know about HTTP, settings
or where credentials come from.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .errors import InvalidRequestError, MissingCredentialError
from .regions import normalize_region

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
REQUEST_TYPE = "aws4_request"

_EXPIRATION_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_expiration(instant: datetime) -> str:
    """Render an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    instant = instant.astimezone(timezone.utc)
    return f"{instant.strftime(_EXPIRATION_FORMAT)}.{instant.microsecond // 1000:03d}Z"


def parse_expiration(value: str) -> datetime:
    """Inverse of format_expiration. Accepts the value with or without milliseconds."""
    if not isinstance(value, str) or not value.endswith("Z"):
        raise ValueError(f"Expiration must be an ISO-8601 UTC string, got {value!r}")
    body = value[:-1]
    fmt = f"{_EXPIRATION_FORMAT}.%f" if "." in body else _EXPIRATION_FORMAT
    return datetime.strptime(body, fmt).replace(tzinfo=timezone.utc)


def _is_utf8_encodable(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


@dataclass(frozen=True)
class SigningRequest:
    """
    Everything needed to issue one upload policy.

    Validation happens at construction so a bad request never reaches
    the hashing code. The secret key and session token are excluded from
    repr to keep them out of logs and tracebacks.
    """
    bucket: str
    key_start: str
    acl: str
    access_key_id: str
    secret_key: str = field(repr=False)
    region: Optional[str] = None
    session_token: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        # Credentials are checked first so a request with missing
        # credentials always reports that, whatever else is wrong.
        if not isinstance(self.access_key_id, str) or not self.access_key_id.strip():
            raise MissingCredentialError("Access key is required")
        if not isinstance(self.secret_key, str) or not self.secret_key.strip():
            raise MissingCredentialError("Secret key is required")

        if not isinstance(self.bucket, str) or not self.bucket.strip():
            raise InvalidRequestError("Bucket is required")
        if not isinstance(self.acl, str) or not self.acl.strip():
            raise InvalidRequestError("ACL is required")
        if not isinstance(self.key_start, str):
            raise InvalidRequestError("Key prefix must be a string")
        if self.session_token is not None and not isinstance(self.session_token, str):
            raise InvalidRequestError("Session token must be a string")

        # Every field is hashed or serialized as UTF-8; lone surrogates cannot be.
        for label, value in (
            ("Access key", self.access_key_id),
            ("Secret key", self.secret_key),
            ("Bucket", self.bucket),
            ("ACL", self.acl),
            ("Key prefix", self.key_start),
            ("Session token", self.session_token),
        ):
            if value is not None and not _is_utf8_encodable(value):
                raise InvalidRequestError(f"{label} is not valid UTF-8 text")

        normalize_region(self.region)

    @property
    def canonical_region(self) -> str:
        """Region as it appears in the credential scope."""
        return normalize_region(self.region)

    @property
    def has_session_token(self) -> bool:
        """True for temporary credentials. An empty token counts as absent."""
        return bool(self.session_token)


@dataclass(frozen=True)
class CredentialScope:
    """
    The ``access-key/date/region/s3/aws4_request`` scope string.

    Derived per signing call; ``str(scope)`` is the value of the
    ``x-amz-credential`` field.
    """
    access_key_id: str
    date_stamp: str
    region: str
    service: str = SERVICE
    request_type: str = REQUEST_TYPE

    def __str__(self) -> str:
        return "/".join(
            [self.access_key_id, self.date_stamp, self.region, self.service, self.request_type]
        )


@dataclass(frozen=True)
class EqualityCondition:
    """Exact-match clause, serialized as ``{name: value}``."""
    name: str
    value: str

    def to_json(self) -> dict[str, str]:
        return {self.name: self.value}


@dataclass(frozen=True)
class StartsWithCondition:
    """Prefix-match clause, serialized as ``["starts-with", "$name", prefix]``."""
    name: str
    prefix: str

    def to_json(self) -> list[str]:
        return ["starts-with", f"${self.name}", self.prefix]


Condition = Union[EqualityCondition, StartsWithCondition]


def condition_from_json(raw: Any) -> Condition:
    """Parse one serialized condition back into its model."""
    if isinstance(raw, dict) and len(raw) == 1:
        ((name, value),) = raw.items()
        return EqualityCondition(name=name, value=value)
    if (
        isinstance(raw, list)
        and len(raw) == 3
        and raw[0] == "starts-with"
        and isinstance(raw[1], str)
        and raw[1].startswith("$")
    ):
        return StartsWithCondition(name=raw[1][1:], prefix=raw[2])
    raise ValueError(f"Unsupported policy condition: {raw!r}")


@dataclass(frozen=True)
class PolicyDocument:
    """
    The JSON policy the storage service checks the upload form against.

    Conditions keep their construction order; nothing is sorted or
    deduplicated.
    """
    expiration: datetime
    conditions: tuple[Condition, ...]

    def to_json(self) -> dict[str, Any]:
        return {
            "expiration": format_expiration(self.expiration),
            "conditions": [condition.to_json() for condition in self.conditions],
        }

    def encode(self) -> str:
        """Compact JSON, UTF-8, base64. This is the string that gets signed."""
        document = json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)
        return base64.b64encode(document.encode("utf-8")).decode("ascii")

    @classmethod
    def from_json(cls, data: Any) -> "PolicyDocument":
        if not isinstance(data, dict) or "expiration" not in data or "conditions" not in data:
            raise ValueError("Policy document must contain expiration and conditions")
        if not isinstance(data["conditions"], list):
            raise ValueError("Policy conditions must be a list")
        return cls(
            expiration=parse_expiration(data["expiration"]),
            conditions=tuple(condition_from_json(raw) for raw in data["conditions"]),
        )

    @classmethod
    def decode(cls, policy_base64: str) -> "PolicyDocument":
        """Parse the base64 ``policy`` form field back into a document."""
        try:
            raw = base64.b64decode(policy_base64, validate=True)
            data = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Policy is not valid base64-encoded JSON: {e}") from e
        return cls.from_json(data)


@dataclass(frozen=True)
class PolicyFormFields:
    """Hidden form fields the client posts alongside the file."""
    acl: str
    policy: str
    credential: str
    date: str
    signature: str
    algorithm: str = ALGORITHM
    security_token: Optional[str] = field(default=None, repr=False)

    def to_dict(self) -> dict[str, str]:
        fields = {
            "acl": self.acl,
            "policy": self.policy,
            "x-amz-algorithm": self.algorithm,
            "x-amz-credential": self.credential,
            "x-amz-date": self.date,
            "x-amz-signature": self.signature,
        }
        if self.security_token:
            fields["x-amz-security-token"] = self.security_token
        return fields


@dataclass(frozen=True)
class SignedPolicyResult:
    """
    What the caller hands to the browser.

    ``region`` is the endpoint alias (``s3`` or ``s3-us-west-2``), not the
    canonical region used in the credential scope.
    """
    bucket: str
    region: str
    key_start: str
    params: PolicyFormFields
    expires_at: datetime

    @property
    def upload_url(self) -> str:
        """Virtual-hosted endpoint the form is posted to."""
        return f"https://{self.bucket}.{self.region}.amazonaws.com/"

    def to_dict(self) -> dict[str, Any]:
        """The ``{bucket, region, keyStart, params}`` shape editor clients expect."""
        return {
            "bucket": self.bucket,
            "region": self.region,
            "keyStart": self.key_start,
            "params": self.params.to_dict(),
        }


__all__ = [
    "ALGORITHM",
    "Condition",
    "CredentialScope",
    "EqualityCondition",
    "PolicyDocument",
    "PolicyFormFields",
    "SignedPolicyResult",
    "SigningRequest",
    "StartsWithCondition",
    "condition_from_json",
    "format_expiration",
    "parse_expiration",
]
