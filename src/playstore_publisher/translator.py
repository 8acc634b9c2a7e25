"""
Classification and remediation of Play Developer API failures.
"""

import logging
from typing import List, Optional, Tuple

import requests

from .exceptions import (
    AppNotFoundError,
    AuthorizationError,
    NotFoundError,
    RateLimitError,
    RemoteAPIError,
    ServerError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_HINT = (
    "Common cause: The app may not exist in Play Console yet.\n"
    "Apps must be created manually at https://play.google.com/console "
    "before they can be published."
)

AUTHORIZATION_HINT = (
    "Common causes:\n"
    "- Service account may not have proper permissions in Play Console\n"
    "- Service account JSON may be invalid or expired\n"
    "- Package name may not match the app in Play Console"
)

VERSION_CONFLICT_HINT = (
    "This version code already exists on this track.\n"
    "Increment the version code in your app and rebuild."
)


def app_not_found_message(package_name: str) -> str:
    """Remediation text for a package that is not registered."""
    return (
        "App not found in Play Console!\n\n"
        f"Package name: {package_name}\n\n"
        "The app must be created manually in Play Console first:\n"
        "1. Go to https://play.google.com/console\n"
        '2. Click "Create app"\n'
        f"3. Fill in app details with package name: {package_name}\n"
        "4. Complete the required setup (content rating, store presence, etc.)\n"
        "5. Then try publishing again\n\n"
        "Note: The Google Play API cannot create new apps - only manage existing ones."
    )


def parse_error_body(response: requests.Response) -> Tuple[str, List[str]]:
    """
    Extract the message and detail list from a Google API error response.

    Args:
        response: The failed HTTP response

    Returns:
        Tuple of (message, details)
    """
    try:
        error = response.json().get("error", {})
    except ValueError:
        return response.text or f"HTTP {response.status_code}", []

    if not isinstance(error, dict):
        return str(error), []

    message = error.get("message") or response.text or f"HTTP {response.status_code}"
    details = [
        e["message"]
        for e in error.get("errors", [])
        if isinstance(e, dict) and e.get("message") and e["message"] != message
    ]
    return message, details


def _is_version_conflict(message: str) -> bool:
    lowered = message.lower()
    return "version" in lowered and "already" in lowered


def classify_error(
    status_code: Optional[int], message: str, details: Optional[List[str]] = None
) -> RemoteAPIError:
    """
    Map an API failure into the matching exception class.

    Args:
        status_code: HTTP status code of the failure
        message: Error message from the response body
        details: Additional per-error messages

    Returns:
        An un-raised RemoteAPIError subclass instance
    """
    if _is_version_conflict(message) or status_code == 409:
        cls = VersionConflictError
    elif status_code in (401, 403):
        cls = AuthorizationError
    elif status_code == 404:
        cls = NotFoundError
    elif status_code == 429:
        cls = RateLimitError
    elif status_code is not None and status_code >= 500:
        cls = ServerError
    else:
        cls = RemoteAPIError
    return cls(message, status_code=status_code, details=details)


def remediation_hint(error: BaseException) -> Optional[str]:
    """Return the remediation text for an error category, if any."""
    if isinstance(error, AppNotFoundError):
        # Message already carries the registration steps
        return None
    if isinstance(error, VersionConflictError):
        return VERSION_CONFLICT_HINT
    if isinstance(error, NotFoundError):
        return NOT_FOUND_HINT
    if isinstance(error, AuthorizationError):
        return AUTHORIZATION_HINT
    return None


def translate_error(error: BaseException) -> BaseException:
    """
    Attach a remediation hint to a remote API error.

    The error keeps its class; only its rendered message changes.

    Args:
        error: The failure raised while an edit was open

    Returns:
        The same error object
    """
    if isinstance(error, RemoteAPIError) and error.hint is None:
        error.hint = remediation_hint(error)
        logger.error(
            f"API Error {error.status_code}: {error.message}"
            if error.status_code
            else f"API Error: {error.message}"
        )
    return error
