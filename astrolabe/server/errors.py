# server/errors.py
"""
Error taxonomy for the ASTROLABE plan endpoint.

Every error carries the HTTP status it maps to; app.py turns them into
`{ "error": ... }` bodies.
"""

from typing import Iterable


class PlanError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(PlanError):
    """A required request field is missing or blank."""

    status_code = 400

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__("Missing input fields: " + ", ".join(self.missing))


class ProviderCredentialMissing(PlanError):
    """The provider API key is not set in the environment."""

    def __init__(self, env_name: str):
        self.env_name = env_name
        super().__init__(f"{env_name} is not configured on the server")


class UpstreamFormatError(PlanError):
    """The provider answered, but not with a nine-step plan."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Provider returned malformed plan: {reason}")
