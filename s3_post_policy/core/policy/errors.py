"""Errors raised while building or signing an upload policy."""


class PolicySigningError(Exception):
    """Raised when a policy cannot be issued."""
    pass


class MissingCredentialError(PolicySigningError):
    """Access key or secret key is absent or blank."""
    pass


class InvalidRequestError(PolicySigningError):
    """A non-credential field of the signing request is unusable."""
    pass


class InvalidRegionError(PolicySigningError):
    """The region is not a recognizable provider region identifier."""
    pass


class ClockError(PolicySigningError):
    """
    The current time could not be read.

    Not retryable: every field of the policy is derived from this instant.
    """
    pass
