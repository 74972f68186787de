"""Unit tests for region normalization and endpoint aliases."""

from datetime import datetime, timezone

import pytest

from s3_post_policy.core.policy import (
    InvalidRegionError,
    SigningRequest,
    endpoint_alias,
    normalize_region,
    sign_policy,
)
from s3_post_policy.core.policy.regions import is_valid_region


FROZEN = datetime(2024, 1, 1, tzinfo=timezone.utc)


def sign_for_region(region):
    request = SigningRequest(
        bucket="b",
        region=region,
        key_start="editor/",
        acl="public-read",
        access_key_id="AK",
        secret_key="SK",
    )
    return sign_policy(request, now=FROZEN)


class TestNormalizeRegion:
    """Tests for the canonical region used in the scope string."""

    @pytest.mark.parametrize("region", [None, "", "s3"])
    def test_primordial_aliases_map_to_us_east_1(self, region):
        assert normalize_region(region) == "us-east-1"

    @pytest.mark.parametrize(
        "region",
        [
            "us-east-1",
            "us-west-2",
            "eu-central-1",
            "ap-southeast-2",
            "us-gov-west-1",
            "cn-northwest-1",
            "eusc-de-east-1",
        ],
    )
    def test_canonical_regions_pass_through(self, region):
        assert normalize_region(region) == region

    @pytest.mark.parametrize(
        "region",
        ["s3-us-west-2", "US-WEST-2", "us-west", "moon", "us_west_2", " us-west-2", "us-west-2\n"],
    )
    def test_unrecognized_regions_raise(self, region):
        assert not is_valid_region(region)
        with pytest.raises(InvalidRegionError, match="Unrecognized region"):
            normalize_region(region)

    def test_non_string_region_raises(self):
        with pytest.raises(InvalidRegionError):
            normalize_region(42)


class TestEndpointAlias:
    """Tests for the endpoint-style region in the output."""

    def test_us_east_1_is_plain_s3(self):
        assert endpoint_alias("us-east-1") == "s3"

    def test_other_regions_are_prefixed(self):
        assert endpoint_alias("eu-west-1") == "s3-eu-west-1"


class TestRegionInSignedOutput:
    """Scope region and output region differ on purpose."""

    @pytest.mark.parametrize("region", [None, "s3", "us-east-1"])
    def test_primordial_region(self, region):
        result = sign_for_region(region)

        assert result.region == "s3"
        assert result.params.credential == "AK/20240101/us-east-1/s3/aws4_request"

    def test_s3_alias_signs_like_us_east_1(self):
        """The alias is resolved before hashing, so signatures agree."""
        assert sign_for_region("s3").params.signature == (
            "38ab30412af3d7496537850be98f919f1a3636d9985ca52c22d19773cb6ba5d5"
        )
        assert sign_for_region("s3") == sign_for_region("us-east-1")

    def test_other_region(self):
        result = sign_for_region("ap-northeast-2")

        assert result.region == "s3-ap-northeast-2"
        assert result.params.credential == "AK/20240101/ap-northeast-2/s3/aws4_request"
