"""
Utility functions for playstore-publisher.

This module provides helper functions for input validation, file type
detection and log formatting.
"""

import re
from pathlib import Path
from typing import Optional, Union

from .exceptions import ConfigurationError, UnsupportedArtifactError

ARTIFACT_MIME_TYPES = {
    ".aab": "application/octet-stream",
    ".apk": "application/vnd.android.package-archive",
}

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


def validate_package_name(package_name: str) -> str:
    """
    Validate an Android application package name.

    Args:
        package_name: The package name to validate (e.g., 'com.example.app')

    Returns:
        The validated package name

    Raises:
        ConfigurationError: If the package name is invalid
    """
    if not package_name:
        raise ConfigurationError("Package name cannot be empty")

    package_name = str(package_name).strip()

    # At least two dot-separated segments, each starting with a letter
    if not re.match(r"^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)+$", package_name):
        raise ConfigurationError(
            f"Invalid package name format. Expected format: 'com.example.app', "
            f"got: {package_name}"
        )

    return package_name


def validate_track(track: str) -> str:
    """
    Validate a release track name.

    Args:
        track: Track name (production, beta, alpha, internal or a custom track)

    Returns:
        The validated track name

    Raises:
        ConfigurationError: If the track name is empty or malformed
    """
    if not track:
        raise ConfigurationError("Track cannot be empty")

    track = track.strip()

    # Custom closed testing tracks and form factor tracks ("wear:production")
    if not re.match(r"^[A-Za-z0-9][A-Za-z0-9_:\-]*$", track):
        raise ConfigurationError(f"Invalid track name: {track}")

    return track


def parse_bool(value: Optional[Union[str, bool]]) -> bool:
    """Interpret a workflow input string ("true", "1", "yes") as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return value.strip().lower() in ("true", "1", "yes", "y", "on")


def artifact_mime_type(path: Union[str, Path]) -> str:
    """
    Get the upload mime type for a release artifact.

    Raises:
        UnsupportedArtifactError: If the file is not a .aab or .apk
    """
    suffix = Path(path).suffix.lower()
    try:
        return ARTIFACT_MIME_TYPES[suffix]
    except KeyError:
        raise UnsupportedArtifactError(
            f"Unsupported file type: {suffix or Path(path).name}. Must be .aab or .apk"
        ) from None


def image_mime_type(path: Union[str, Path]) -> str:
    """Return image/png for .png files and image/jpeg otherwise."""
    return "image/png" if Path(path).suffix.lower() == ".png" else "image/jpeg"


def is_image_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length allowed
        suffix: Suffix to append if truncated

    Returns:
        Truncated string
    """
    if not text or len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def preview(text: str, max_length: int = 50) -> str:
    """Single-line preview of multi-line listing text for logs."""
    return truncate_string(" ".join(text.split()), max_length)
