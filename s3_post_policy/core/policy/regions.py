"""
Region normalization for S3 credential scopes.

S3 has two names for its original region: the generic endpoint token
``s3`` and the canonical identifier ``us-east-1``. The scope string must
always carry the canonical form, while the endpoint hostname uses the
``s3`` / ``s3-{region}`` aliases.
"""

import re
from typing import Optional

from .errors import InvalidRegionError

PRIMORDIAL_REGION = "us-east-1"
GENERIC_REGION_ALIAS = "s3"

# Matches us-east-1, eu-central-2, us-gov-west-1, cn-northwest-1, eusc-de-east-1 ...
_REGION_PATTERN = re.compile(r"[a-z]{2,4}(-[a-z]+)+-\d+")


def is_valid_region(region: str) -> bool:
    """True if ``region`` looks like a canonical provider region identifier."""
    return bool(_REGION_PATTERN.fullmatch(region))


def normalize_region(region: Optional[str]) -> str:
    """
    Return the canonical region used inside the credential scope.

    Absent or empty regions and the generic ``s3`` token all map to
    ``us-east-1``. Anything else must already be a canonical identifier.
    """
    if region is None or region == "" or region == GENERIC_REGION_ALIAS:
        return PRIMORDIAL_REGION
    if not isinstance(region, str) or not is_valid_region(region):
        raise InvalidRegionError(f"Unrecognized region: {region!r}")
    return region


def endpoint_alias(region: str) -> str:
    """Endpoint-style alias for a normalized region: ``s3`` or ``s3-{region}``."""
    if region == PRIMORDIAL_REGION:
        return GENERIC_REGION_ALIAS
    return f"{GENERIC_REGION_ALIAS}-{region}"
