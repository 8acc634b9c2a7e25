"""
Exception classes for playstore-publisher.

Errors derived from ``ValidationError`` are raised before any remote
mutation begins; everything else may be raised while an edit is open.
"""

from typing import List, Optional


class PlayStoreError(Exception):
    """Base exception class for Play Store publishing errors."""

    pass


# ===== LOCAL VALIDATION ERRORS =====


class ValidationError(PlayStoreError):
    """Raised when run inputs fail validation before any remote call."""

    pass


class ConfigurationError(ValidationError):
    """Raised when run inputs are missing or contradictory."""

    pass


class CredentialFormatError(ValidationError):
    """Raised when the service account blob cannot be decoded."""

    pass


class ArtifactNotFoundError(ValidationError, FileNotFoundError):
    """Raised when the artifact to upload does not exist."""

    pass


class UnsupportedArtifactError(ValidationError):
    """Raised when the artifact is neither an app bundle nor an APK."""

    pass


class InvalidRolloutError(ValidationError):
    """Raised when the rollout percentage is not an integer in [5, 100]."""

    pass


class InvalidPriorityError(ValidationError):
    """Raised when the in-app update priority is not an integer in [0, 5]."""

    pass


class UnknownDeviceClassError(ValidationError):
    """Raised when a screenshot directory names an unknown device class."""

    pass


# ===== EDIT / RELEASE ERRORS =====


class EditStateError(PlayStoreError):
    """Raised when an edit is used after reaching a terminal state."""

    pass


class ReleaseResolutionError(PlayStoreError):
    """Raised when promote mode cannot resolve a version code."""

    pass


class NoReleasesFoundError(ReleaseResolutionError):
    """Raised when the source track has no releases."""

    pass


class NoVersionCodesError(ReleaseResolutionError):
    """Raised when the latest release on the source track lists no codes."""

    pass


# ===== REMOTE API ERRORS =====


class RemoteAPIError(PlayStoreError):
    """
    Raised when the Play Developer API returns an error.

    Args:
        message: Error message from the API (or transport)
        status_code: HTTP status code, if a response was received
        details: Individual error messages from the response body
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = list(details or [])
        self.hint: Optional[str] = None

    def __str__(self) -> str:
        text = self.message
        if self.details:
            text += "\n\nDetails:\n" + "\n".join(f"- {d}" for d in self.details)
        if self.hint:
            text += f"\n\n{self.hint}"
        return text


class AuthorizationError(RemoteAPIError):
    """Raised when credentials or permissions are rejected."""

    pass


class NotFoundError(RemoteAPIError):
    """Raised when requested resource is not found."""

    pass


class AppNotFoundError(NotFoundError):
    """Raised when the package is not registered in Play Console."""

    pass


class VersionConflictError(RemoteAPIError):
    """Raised when the version code is already used."""

    pass


class RateLimitError(RemoteAPIError):
    """Raised when rate limits are exceeded."""

    pass


class ServerError(RemoteAPIError):
    """Raised when server returns 5xx error."""

    pass
