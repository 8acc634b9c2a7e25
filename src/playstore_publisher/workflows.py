"""
Publish and listing workflows.

Each workflow validates its inputs, opens one edit, applies its changes
and commits (or validates and abandons in dry-run mode). The outcome is
returned as a ``RunResult`` rather than raised, recording whether the
run failed before the edit was opened or after it (when the edit has
been abandoned).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .client import PlayStoreAPI
from .config import ListingOptions, PublishOptions
from .credentials import Credential, resolve_credential
from .listing import ListingSynchronizer
from .metadata import load_metadata
from .release import ReleasePublisher
from .reports import format_summary, listing_summary, release_summary
from .transaction import EditTransaction
from .translator import translate_error

logger = logging.getLogger(__name__)

ApiFactory = Callable[[Credential], PlayStoreAPI]


class RunStage(Enum):
    VALIDATION = "validation"  # failed before any remote call
    OPEN = "open"  # the edit could not be opened
    EDIT = "edit"  # failed after open; the edit was abandoned
    COMPLETE = "complete"


@dataclass
class RunResult:
    """Outcome of one workflow run."""

    success: bool
    stage: RunStage
    message: str
    edit_id: Optional[str] = None
    version_code: Optional[str] = None
    updated_components: List[str] = field(default_factory=list)
    error: Optional[Exception] = None
    cleanup_error: Optional[Exception] = None
    summary: Optional[str] = None

    @property
    def rolled_back(self) -> bool:
        return self.stage is RunStage.EDIT

    def outputs(self) -> dict:
        """Workflow outputs, keyed by output name."""
        outputs = {}
        if self.edit_id:
            outputs["edit-id"] = self.edit_id
        if self.version_code:
            outputs["version-code"] = self.version_code
        return outputs


def _failure(
    prefix: str,
    stage: RunStage,
    error: Exception,
    tx: Optional[EditTransaction] = None,
) -> RunResult:
    translate_error(error)
    message = f"{prefix}: {error}"
    logger.error(message)
    return RunResult(
        success=False,
        stage=stage,
        message=message,
        edit_id=tx.edit_id if tx else None,
        error=error,
        cleanup_error=tx.cleanup_error if tx else None,
    )


def publish_release(
    options: PublishOptions, api_factory: ApiFactory = PlayStoreAPI
) -> RunResult:
    """
    Upload or promote a build and release it to a track.

    Args:
        options: Run inputs
        api_factory: Builds the API client from the resolved credential

    Returns:
        RunResult describing the outcome
    """
    prefix = "Google Play publishing failed"
    logger.info("Starting Google Play publishing process...")

    try:
        publisher = ReleasePublisher.prepare(
            track=options.track,
            release_file=options.release_file,
            promote_track=options.promote_track,
            promote_version_code=options.promote_version_code,
            status=options.status,
            rollout_percentage=options.rollout_percentage,
            update_priority=options.update_priority,
            whats_new_directory=options.whats_new_directory,
        )
        logger.info("Parsing service account credentials...")
        api = api_factory(resolve_credential(options.service_account_json))
    except Exception as e:
        return _failure(prefix, RunStage.VALIDATION, e)

    try:
        tx = EditTransaction.open(api, options.package_name)
    except Exception as e:
        return _failure(prefix, RunStage.OPEN, e)

    try:
        with tx:
            version_code = publisher.resolve_version_code(tx)
            release = publisher.apply(tx, version_code)
            tx.commit()
    except Exception as e:
        return _failure(prefix, RunStage.EDIT, e, tx)

    summary = format_summary(
        "SUCCESSFULLY PUBLISHED TO PLAY STORE",
        [],
        release_summary(options.package_name, options.track, release),
    )
    logger.info(summary)
    return RunResult(
        success=True,
        stage=RunStage.COMPLETE,
        message=f"Published version {version_code} to {options.track}",
        edit_id=tx.edit_id,
        version_code=version_code,
        summary=summary,
    )


def update_listing(
    options: ListingOptions, api_factory: ApiFactory = PlayStoreAPI
) -> RunResult:
    """
    Synchronize the store listing from a metadata directory.

    In dry-run mode the edit is validated and then abandoned; nothing is
    committed.

    Args:
        options: Run inputs
        api_factory: Builds the API client from the resolved credential

    Returns:
        RunResult describing the outcome
    """
    prefix = "Play Store listing update failed"
    logger.info("Starting Play Store listing update...")
    if options.dry_run:
        logger.info("DRY RUN MODE - No changes will be published")

    synchronizer = ListingSynchronizer()
    try:
        logger.info("Parsing service account credentials...")
        credential = resolve_credential(options.service_account_json)
        logger.info("Loading processed metadata...")
        metadata = load_metadata(options.metadata_path)
        synchronizer.check(metadata)
    except Exception as e:
        return _failure(prefix, RunStage.VALIDATION, e)

    if metadata.is_empty:
        message = "No components to update. Metadata directory appears to be empty."
        logger.warning(message)
        return RunResult(success=True, stage=RunStage.COMPLETE, message=message)

    logger.info(f"Components to update: {', '.join(metadata.updated_components)}")

    try:
        api = api_factory(credential)
    except Exception as e:
        return _failure(prefix, RunStage.VALIDATION, e)

    try:
        tx = EditTransaction.open(api, options.package_name)
    except Exception as e:
        return _failure(prefix, RunStage.OPEN, e)

    try:
        with tx:
            applied = synchronizer.apply(tx, metadata)
            if options.dry_run:
                tx.validate_only()
            else:
                # Draft apps only accept listing changes that skip review
                tx.commit(changes_not_sent_for_review=True)
    except Exception as e:
        return _failure(prefix, RunStage.EDIT, e, tx)

    lines = [
        f"Package: {options.package_name}",
        f"Updated: {', '.join(applied)}",
    ]
    if metadata.listings:
        lines.append(f"Locales: {', '.join(metadata.listings)}")
    title = "DRY RUN VALIDATION SUCCESSFUL" if options.dry_run else "LISTING UPDATED SUCCESSFULLY"
    summary = format_summary(title, lines, listing_summary(metadata))
    logger.info(summary)

    return RunResult(
        success=True,
        stage=RunStage.COMPLETE,
        message=(
            "Validation successful - changes were NOT published (dry run)"
            if options.dry_run
            else "Listing updated successfully"
        ),
        edit_id=tx.edit_id,
        updated_components=applied,
        summary=summary,
    )
