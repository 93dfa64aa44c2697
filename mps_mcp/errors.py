"""Project-level exception hierarchy."""

from __future__ import annotations


class MpsError(Exception):
    """Base for all mps-mcp exceptions."""


class ConfigError(MpsError):
    """Configuration could not be loaded or validated."""


class AuthError(MpsError):
    """Authentication against the platform failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotAuthenticatedError(AuthError):
    """No live session when an authenticated call was attempted."""


class RemoteCallError(MpsError):
    """Platform endpoint returned an error or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: object = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ExportError(MpsError):
    """Code template archive could not be downloaded or extracted."""


class SecurityError(MpsError):
    """Security violation detected."""


class PathValidationError(SecurityError):
    """File path failed validation."""
