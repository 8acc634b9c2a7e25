"""
Edit transaction lifecycle.

Every change to a Play listing or track happens inside an "edit": a
server-side draft that must be committed or deleted. ``EditTransaction``
owns one edit and guarantees that, once opened, it ends either committed
or abandoned::

    tx = EditTransaction.open(api, "com.example.app")
    with tx:
        api.update_track(tx.package_name, tx.edit_id, "beta", releases)
        tx.commit()

Leaving the ``with`` block through an exception abandons the edit exactly
once and re-raises the primary error with its remediation hint attached.
Leaving it normally without a commit also abandons the edit.
"""

import logging
from enum import Enum
from typing import Optional

from .client import PlayStoreAPI
from .exceptions import AppNotFoundError, EditStateError, NotFoundError
from .translator import app_not_found_message, translate_error

logger = logging.getLogger(__name__)


class EditState(Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ABANDONED = "abandoned"
    VALIDATED_ONLY = "validated_only"


class EditTransaction:
    """
    One open edit against one package.

    Args:
        api: Client used for every call against the edit
        package_name: Application package name
        edit_id: Id of the already-opened edit
    """

    def __init__(self, api: PlayStoreAPI, package_name: str, edit_id: str):
        self.api = api
        self.package_name = package_name
        self.edit_id = edit_id
        self.state = EditState.OPEN
        self.cleanup_error: Optional[Exception] = None

    @classmethod
    def open(cls, api: PlayStoreAPI, package_name: str) -> "EditTransaction":
        """
        Open a new edit.

        Raises:
            AppNotFoundError: If the package is not registered in Play Console
        """
        logger.info(f"Creating edit for package: {package_name}")
        try:
            edit_id = api.insert_edit(package_name)
        except NotFoundError as e:
            raise AppNotFoundError(
                app_not_found_message(package_name),
                status_code=e.status_code,
            ) from e

        logger.info(f"Edit created: {edit_id}")
        return cls(api, package_name, edit_id)

    def __repr__(self) -> str:
        return (
            f"EditTransaction(package_name={self.package_name!r}, "
            f"edit_id={self.edit_id!r}, state={self.state.value})"
        )

    @property
    def is_open(self) -> bool:
        return self.state is EditState.OPEN

    def require_open(self) -> None:
        """Raise EditStateError unless the edit can still be mutated."""
        if not self.is_open:
            raise EditStateError(
                f"Edit {self.edit_id} is {self.state.value} and can no longer be changed"
            )

    def commit(self, changes_not_sent_for_review: bool = False) -> None:
        """
        Commit the edit.

        On failure the edit stays open; the enclosing ``with`` block
        abandons it.

        Args:
            changes_not_sent_for_review: Save the changes without sending
                them for review
        """
        self.require_open()
        logger.info("Committing changes...")
        self.api.commit_edit(
            self.package_name,
            self.edit_id,
            changes_not_sent_for_review=changes_not_sent_for_review,
        )
        self.state = EditState.COMMITTED
        logger.info("Changes committed successfully!")

    def validate_only(self) -> None:
        """
        Check the edit for consistency, then abandon it without committing.

        A validation failure propagates with the edit still open.
        """
        self.require_open()
        logger.info("Validating edit...")
        self.api.validate_edit(self.package_name, self.edit_id)
        logger.info("Validation successful - all changes are valid")
        self._delete()
        self.state = EditState.VALIDATED_ONLY

    def abandon(self) -> bool:
        """
        Abandon the edit if it is still open.

        Deletion failures are logged as warnings and kept on
        ``cleanup_error``; they are never raised.

        Returns:
            True if the remote edit was deleted by this call
        """
        if not self.is_open:
            return False
        logger.info("Attempting to clean up failed edit...")
        deleted = self._delete()
        self.state = EditState.ABANDONED
        return deleted

    def _delete(self) -> bool:
        try:
            self.api.delete_edit(self.package_name, self.edit_id)
        except Exception as e:
            self.cleanup_error = e
            logger.warning(f"Failed to clean up edit {self.edit_id}: {e}")
            return False
        logger.info("Edit cleaned up")
        return True

    def __enter__(self) -> "EditTransaction":
        self.require_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self.is_open:
            if exc is None:
                logger.warning(f"Edit {self.edit_id} was neither committed nor validated")
            self.abandon()
        if isinstance(exc, Exception):
            translate_error(exc)
        return False
