"""
Run configuration for the publish and listing workflows.

Inputs can be passed directly or read from the environment the way
GitHub Actions exposes them (``INPUT_<NAME>`` with the input name
upper-cased, e.g. ``INPUT_PACKAGE-NAME``).
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError
from .utils import parse_bool, validate_package_name, validate_track


def read_input(
    name: str,
    environ: Optional[Mapping[str, str]] = None,
    required: bool = False,
) -> Optional[str]:
    """
    Read a workflow input from the environment.

    Both ``INPUT_PACKAGE-NAME`` and ``INPUT_PACKAGE_NAME`` spellings are
    accepted for an input named ``package-name``.

    Args:
        name: Input name, e.g. 'package-name'
        environ: Environment mapping (defaults to os.environ)
        required: Raise if the input is missing or blank

    Returns:
        The stripped value, or None when unset or blank

    Raises:
        ConfigurationError: If a required input is missing
    """
    environ = os.environ if environ is None else environ
    key = f"INPUT_{name.upper()}"
    value = environ.get(key)
    if value is None:
        value = environ.get(key.replace("-", "_"))
    value = value.strip() if value else None

    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value or None


@dataclass
class PublishOptions:
    """Inputs for publishing a build to a track."""

    service_account_json: str
    package_name: str
    track: str
    release_file: Optional[str] = None
    promote_track: Optional[str] = None
    promote_version_code: Optional[str] = None
    status: Optional[str] = None
    rollout_percentage: Optional[str] = None
    update_priority: Optional[str] = None
    whats_new_directory: Optional[str] = None

    def __post_init__(self):
        if not self.service_account_json:
            raise ConfigurationError("Input required and not supplied: service-account-json")
        self.package_name = validate_package_name(self.package_name)
        self.track = validate_track(self.track)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PublishOptions":
        return cls(
            service_account_json=read_input("service-account-json", environ, required=True),
            package_name=read_input("package-name", environ, required=True),
            track=read_input("track", environ, required=True),
            release_file=read_input("release-files", environ),
            promote_track=read_input("promote-track", environ),
            promote_version_code=read_input("promote-release-code", environ),
            status=read_input("status", environ),
            rollout_percentage=read_input("rollout-percentage", environ),
            update_priority=read_input("in-app-update-priority", environ),
            whats_new_directory=read_input("whats-new-directory", environ),
        )


@dataclass
class ListingOptions:
    """Inputs for synchronizing the store listing from a metadata directory."""

    service_account_json: str
    package_name: str
    metadata_path: str
    dry_run: bool = False

    def __post_init__(self):
        if not self.service_account_json:
            raise ConfigurationError("Input required and not supplied: service-account-json")
        if not self.metadata_path:
            raise ConfigurationError("Input required and not supplied: metadata-path")
        self.package_name = validate_package_name(self.package_name)
        self.dry_run = parse_bool(self.dry_run)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ListingOptions":
        return cls(
            service_account_json=read_input("service-account-json", environ, required=True),
            package_name=read_input("package-name", environ, required=True),
            metadata_path=read_input("metadata-path", environ, required=True),
            dry_run=parse_bool(read_input("dry-run", environ)),
        )
