"""Exceptions raised by the AEZA client.

API-level and transport failures are not exceptions: they come back as
`FetchFailure` data on a `BalanceSnapshot`. Only conditions that callers
must not confuse with a failed fetch are raised.
"""


class AezaError(Exception):
    """Base class for AEZA domain errors."""


class ConfigurationError(AezaError):
    """A realm was requested that has no API key configured."""

    def __init__(self, realm):
        self.realm = realm
        super().__init__(f"API key for account '{realm.value}' is not configured")


class MalformedPayloadError(AezaError):
    """The API answered successfully but the body is not a usable account payload."""
