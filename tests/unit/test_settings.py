"""Unit tests for environment-driven settings."""

import pytest

from s3_post_policy.config import Settings, get_settings
from s3_post_policy.core.policy import InvalidRegionError, MissingCredentialError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate each test from the developer's real environment and .env file."""
    for name in (
        "S3_BUCKET",
        "S3_REGION",
        "S3_KEY_START",
        "S3_ACL",
        "S3_ACCESS_KEY",
        "S3_SECRET_KEY",
        "S3_SESSION_TOKEN",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


class TestSettings:
    """Tests for settings loading and validation."""

    def test_defaults(self):
        settings = make_settings()

        assert settings.s3_region == "us-east-1"
        assert settings.s3_key_start == "uploads/"
        assert settings.s3_acl == "public-read"
        assert settings.s3_session_token is None
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("S3_BUCKET", "env-bucket")
        monkeypatch.setenv("S3_SECRET_KEY", "env-secret")

        settings = get_settings()

        assert settings.s3_bucket == "env-bucket"
        assert settings.s3_secret_key.get_secret_value() == "env-secret"

    def test_secret_key_is_masked(self):
        settings = make_settings(s3_secret_key="super-secret")

        assert "super-secret" not in repr(settings)

    def test_validate_required_fields_lists_missing(self):
        assert make_settings().validate_required_fields() == [
            "S3_BUCKET",
            "S3_ACCESS_KEY",
            "S3_SECRET_KEY",
        ]

    def test_validate_required_fields_when_complete(self):
        settings = make_settings(s3_bucket="b", s3_access_key="AK", s3_secret_key="SK")

        assert settings.validate_required_fields() == []


class TestToSigningRequest:
    """Tests for converting settings into a signing request."""

    def test_builds_request(self):
        settings = make_settings(
            s3_bucket="b",
            s3_region="eu-west-1",
            s3_access_key="AK",
            s3_secret_key="SK",
            s3_session_token="TOKEN",
        )

        request = settings.to_signing_request()

        assert request.bucket == "b"
        assert request.canonical_region == "eu-west-1"
        assert request.key_start == "uploads/"
        assert request.secret_key == "SK"
        assert request.session_token == "TOKEN"

    def test_empty_session_token_becomes_none(self):
        settings = make_settings(
            s3_bucket="b", s3_access_key="AK", s3_secret_key="SK", s3_session_token=""
        )

        assert settings.to_signing_request().session_token is None

    def test_missing_credentials_raise(self):
        with pytest.raises(MissingCredentialError):
            make_settings(s3_bucket="b").to_signing_request()

    def test_invalid_region_raises(self):
        settings = make_settings(
            s3_bucket="b", s3_region="nowhere", s3_access_key="AK", s3_secret_key="SK"
        )

        with pytest.raises(InvalidRegionError):
            settings.to_signing_request()
