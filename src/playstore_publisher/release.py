"""
Release publishing: artifact upload or track-to-track promotion.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import (
    ArtifactNotFoundError,
    ConfigurationError,
    InvalidPriorityError,
    InvalidRolloutError,
    NoReleasesFoundError,
    NoVersionCodesError,
)
from .metadata import ReleaseNote, load_release_notes
from .transaction import EditTransaction
from .utils import artifact_mime_type, validate_track

logger = logging.getLogger(__name__)

MIN_ROLLOUT_PERCENTAGE = 5
MAX_ROLLOUT_PERCENTAGE = 100
MAX_UPDATE_PRIORITY = 5


class ReleaseStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "inProgress"
    HALTED = "halted"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Optional[Union[str, "ReleaseStatus"]]) -> "ReleaseStatus":
        """Parse a status input; empty means completed."""
        if not value:
            return cls.COMPLETED
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ConfigurationError(
                f"Invalid release status: {value}. Must be one of: {valid}"
            ) from None


class PublishMode(Enum):
    UPLOAD = "upload"
    PROMOTE = "promote"


def parse_rollout_percentage(value: Optional[Union[str, int]]) -> Optional[float]:
    """
    Convert a rollout percentage input to a user fraction.

    Args:
        value: Integer percentage between 5 and 100, or empty for no rollout

    Returns:
        The fraction (percentage / 100), or None when no value was given

    Raises:
        InvalidRolloutError: If the value is not an integer in [5, 100]
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    try:
        percentage = int(str(value).strip())
    except ValueError:
        percentage = None

    if (
        percentage is None
        or percentage < MIN_ROLLOUT_PERCENTAGE
        or percentage > MAX_ROLLOUT_PERCENTAGE
    ):
        raise InvalidRolloutError(
            f"rollout-percentage must be a number between {MIN_ROLLOUT_PERCENTAGE} "
            f"and {MAX_ROLLOUT_PERCENTAGE}, got: {value}"
        )
    return percentage / 100


def parse_update_priority(value: Optional[Union[str, int]]) -> int:
    """
    Validate an in-app update priority input.

    Raises:
        InvalidPriorityError: If the value is not an integer in [0, 5]
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0

    try:
        priority = int(str(value).strip())
    except ValueError:
        priority = None

    if priority is None or priority < 0 or priority > MAX_UPDATE_PRIORITY:
        raise InvalidPriorityError(
            f"in-app-update-priority must be between 0 and {MAX_UPDATE_PRIORITY}, "
            f"got: {value}"
        )
    return priority


@dataclass
class ReleaseSpec:
    """A single release entry applied to a track."""

    version_codes: List[str]
    status: ReleaseStatus = ReleaseStatus.COMPLETED
    rollout_fraction: Optional[float] = None
    update_priority: int = 0
    release_notes: List[ReleaseNote] = field(default_factory=list)

    def __post_init__(self):
        # Ordered set of codes
        codes = list(dict.fromkeys(str(code) for code in self.version_codes))
        if not codes:
            raise ConfigurationError("A release needs at least one version code")
        self.version_codes = codes
        self.status = ReleaseStatus.parse(self.status)

        if self.rollout_fraction is not None and not 0 < self.rollout_fraction <= 1:
            raise InvalidRolloutError(
                f"Rollout fraction must be in (0, 1], got: {self.rollout_fraction}"
            )
        if not 0 <= self.update_priority <= MAX_UPDATE_PRIORITY:
            raise InvalidPriorityError(
                f"Update priority must be between 0 and {MAX_UPDATE_PRIORITY}, "
                f"got: {self.update_priority}"
            )

        # A staged rollout cannot also be completed
        if self.rollout_fraction is not None and self.status is ReleaseStatus.COMPLETED:
            self.status = ReleaseStatus.IN_PROGRESS
            logger.info("Changed status to inProgress for staged rollout")

    def to_request(self) -> Dict[str, Any]:
        release: Dict[str, Any] = {
            "versionCodes": list(self.version_codes),
            "status": self.status.value,
        }
        if self.rollout_fraction is not None:
            release["userFraction"] = self.rollout_fraction
        if self.update_priority > 0:
            release["inAppUpdatePriority"] = self.update_priority
        if self.release_notes:
            release["releaseNotes"] = [note.to_request() for note in self.release_notes]
        return release


@dataclass
class PublishPlan:
    """Validated inputs for one publish run, resolved before any remote call."""

    mode: PublishMode
    track: str
    status: ReleaseStatus = ReleaseStatus.COMPLETED
    rollout_fraction: Optional[float] = None
    update_priority: int = 0
    release_notes: List[ReleaseNote] = field(default_factory=list)
    artifact_path: Optional[Path] = None
    source_track: Optional[str] = None
    version_code: Optional[str] = None


class ReleasePublisher:
    """
    Uploads or promotes a build and assigns it to a track.

    Args:
        plan: Validated run inputs (see ``ReleasePublisher.prepare``)
    """

    def __init__(self, plan: PublishPlan):
        self.plan = plan

    @classmethod
    def prepare(
        cls,
        track: str,
        release_file: Optional[Union[str, Path]] = None,
        promote_track: Optional[str] = None,
        promote_version_code: Optional[str] = None,
        status: Optional[str] = None,
        rollout_percentage: Optional[Union[str, int]] = None,
        update_priority: Optional[Union[str, int]] = None,
        whats_new_directory: Optional[Union[str, Path]] = None,
    ) -> "ReleasePublisher":
        """
        Validate publish inputs without touching the remote API.

        Raises:
            ConfigurationError: If neither or both of release_file and
                promote_track are given, or the status is unknown
            UnsupportedArtifactError: If the artifact is not .aab or .apk
            ArtifactNotFoundError: If the artifact does not exist
            InvalidRolloutError: If the rollout percentage is out of range
            InvalidPriorityError: If the update priority is out of range
        """
        if release_file and promote_track:
            raise ConfigurationError(
                "Provide either release-files (for upload) or promote-track "
                "(for promotion), not both"
            )
        if not release_file and not promote_track:
            raise ConfigurationError(
                "Must provide either release-files (for upload) or "
                "promote-track (for promotion)"
            )

        artifact_path = None
        version_code = None
        if release_file:
            mode = PublishMode.UPLOAD
            artifact_path = Path(release_file)
            artifact_mime_type(artifact_path)
            if not artifact_path.is_file():
                raise ArtifactNotFoundError(f"Release file not found: {artifact_path}")
        else:
            mode = PublishMode.PROMOTE
            promote_track = validate_track(promote_track)
            if promote_version_code:
                version_code = str(promote_version_code).strip()
                if not version_code.isdigit():
                    raise ConfigurationError(
                        f"promote-release-code must be an integer, got: {promote_version_code}"
                    )

        rollout_fraction = parse_rollout_percentage(rollout_percentage)
        if rollout_fraction is not None:
            logger.info(f"Staged rollout: {int(round(rollout_fraction * 100))}%")

        plan = PublishPlan(
            mode=mode,
            track=validate_track(track),
            status=ReleaseStatus.parse(status),
            rollout_fraction=rollout_fraction,
            update_priority=parse_update_priority(update_priority),
            release_notes=load_release_notes(whats_new_directory),
            artifact_path=artifact_path,
            source_track=promote_track,
            version_code=version_code,
        )
        return cls(plan)

    def resolve_version_code(self, tx: EditTransaction) -> str:
        """
        Upload the artifact or look up the build to promote.

        Args:
            tx: Open edit transaction

        Returns:
            The version code to release

        Raises:
            NoReleasesFoundError: If the source track has no releases
            NoVersionCodesError: If its latest release lists no version codes
        """
        tx.require_open()
        plan = self.plan

        if plan.mode is PublishMode.UPLOAD:
            size_mb = plan.artifact_path.stat().st_size / 1024 / 1024
            logger.info(f"Upload mode: {plan.artifact_path} ({size_mb:.2f} MB)")
            version_code = tx.api.upload_artifact(
                tx.package_name, tx.edit_id, plan.artifact_path
            )
            logger.info(f"Artifact uploaded successfully. Version code: {version_code}")
            return version_code

        logger.info(f"Promote mode: {plan.source_track} -> {plan.track}")
        if plan.version_code:
            logger.info(f"Using specified version code: {plan.version_code}")
            return plan.version_code

        logger.info(f"Getting latest version from {plan.source_track} track...")
        releases = tx.api.get_track(tx.package_name, tx.edit_id, plan.source_track)
        if not releases:
            raise NoReleasesFoundError(f"No releases found on {plan.source_track} track")

        # Play lists the latest release first
        version_codes = releases[0].get("versionCodes") or []
        if not version_codes:
            raise NoVersionCodesError(
                f"No version codes found in latest release on {plan.source_track} track"
            )

        version_code = str(max(version_codes, key=int))
        logger.info(f"Latest version code from {plan.source_track}: {version_code}")
        return version_code

    def build_release(self, version_code: str) -> ReleaseSpec:
        plan = self.plan
        if plan.release_notes:
            logger.info(f"Processed {len(plan.release_notes)} release note(s)")
        return ReleaseSpec(
            version_codes=[version_code],
            status=plan.status,
            rollout_fraction=plan.rollout_fraction,
            update_priority=plan.update_priority,
            release_notes=list(plan.release_notes),
        )

    def apply(self, tx: EditTransaction, version_code: str) -> ReleaseSpec:
        """
        Put a single release with the version code on the target track.

        Args:
            tx: Open edit transaction
            version_code: Version code returned by ``resolve_version_code``

        Returns:
            The release that was applied
        """
        tx.require_open()
        release = self.build_release(version_code)
        logger.info(f"Updating {self.plan.track} track...")
        tx.api.update_track(
            tx.package_name, tx.edit_id, self.plan.track, [release.to_request()]
        )
        logger.info(f"Track {self.plan.track} updated successfully")
        return release
