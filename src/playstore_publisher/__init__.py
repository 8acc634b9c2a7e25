"""
playstore-publisher

Publish app builds and store listing metadata to Google Play through
the Play Developer API's transactional edits.
"""

__version__ = "1.0.0"

from .client import PlayStoreAPI
from .credentials import Credential, resolve_credential
from .transaction import EditState, EditTransaction
from .release import ReleasePublisher, ReleaseSpec, ReleaseStatus
from .metadata import ListingMetadata, load_metadata, load_release_notes
from .listing import ListingSynchronizer
from .config import ListingOptions, PublishOptions
from .workflows import RunResult, RunStage, publish_release, update_listing
from .exceptions import (
    PlayStoreError,
    ValidationError,
    ConfigurationError,
    CredentialFormatError,
    ArtifactNotFoundError,
    UnsupportedArtifactError,
    InvalidRolloutError,
    InvalidPriorityError,
    UnknownDeviceClassError,
    EditStateError,
    NoReleasesFoundError,
    NoVersionCodesError,
    RemoteAPIError,
    AuthorizationError,
    NotFoundError,
    AppNotFoundError,
    VersionConflictError,
    RateLimitError,
    ServerError,
)
from . import utils

__all__ = [
    "PlayStoreAPI",
    "Credential",
    "resolve_credential",
    "EditState",
    "EditTransaction",
    "ReleasePublisher",
    "ReleaseSpec",
    "ReleaseStatus",
    "ListingMetadata",
    "load_metadata",
    "load_release_notes",
    "ListingSynchronizer",
    "ListingOptions",
    "PublishOptions",
    "RunResult",
    "RunStage",
    "publish_release",
    "update_listing",
    "PlayStoreError",
    "ValidationError",
    "ConfigurationError",
    "CredentialFormatError",
    "ArtifactNotFoundError",
    "UnsupportedArtifactError",
    "InvalidRolloutError",
    "InvalidPriorityError",
    "UnknownDeviceClassError",
    "EditStateError",
    "NoReleasesFoundError",
    "NoVersionCodesError",
    "RemoteAPIError",
    "AuthorizationError",
    "NotFoundError",
    "AppNotFoundError",
    "VersionConflictError",
    "RateLimitError",
    "ServerError",
    "utils",
]
