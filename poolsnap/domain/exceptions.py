from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidArgumentError(DomainError):
    """Caller input is malformed."""


class PoolNotFoundError(DomainError):
    """No pool record matches the requested tokens and fee tier."""


class MalformedResponseError(DomainError):
    """Upstream response is missing the expected container or cannot be decoded."""


class DecimalsNotFoundError(DomainError):
    """Token configuration record is absent."""


class RemoteQuoteFailureError(DomainError):
    """Authoritative quote endpoint errored or returned an unparseable payload."""
