"""
Store listing synchronization.

Applies loaded ``ListingMetadata`` to an open edit in a fixed order:
app details, then per-locale listing text, then icon, feature graphic
and screenshots. Image slots are replaced, never merged.
"""

import logging
from pathlib import Path
from typing import Dict, List

from .exceptions import NotFoundError, UnknownDeviceClassError
from .metadata import (
    COMPONENT_DETAILS,
    COMPONENT_FEATURE_GRAPHIC,
    COMPONENT_ICON,
    COMPONENT_LISTINGS,
    COMPONENT_SCREENSHOTS,
    AppDetails,
    Listing,
    ListingMetadata,
)
from .transaction import EditTransaction
from .utils import preview

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"

ICON = "icon"
FEATURE_GRAPHIC = "featureGraphic"

DEVICE_CLASS_SLOTS: Dict[str, str] = {
    "phone": "phoneScreenshots",
    "tablet": "sevenInchScreenshots",
    "sevenInch": "sevenInchScreenshots",
    "tenInch": "tenInchScreenshots",
    "wear": "wearScreenshots",
    "wearable": "wearScreenshots",
    "tv": "tvScreenshots",
}


def screenshot_slot(device_class: str) -> str:
    """
    Map a screenshot directory name to its Play image type.

    Raises:
        UnknownDeviceClassError: If the device class is not recognized
    """
    try:
        return DEVICE_CLASS_SLOTS[device_class]
    except KeyError:
        valid = ", ".join(sorted(DEVICE_CLASS_SLOTS))
        raise UnknownDeviceClassError(
            f"Unknown device type: {device_class}. Must be one of: {valid}"
        ) from None


class ListingSynchronizer:
    """
    Pushes listing metadata into an edit.

    Args:
        default_locale: Locale used for the icon and feature graphic when
            the metadata does not name a default language
    """

    def __init__(self, default_locale: str = DEFAULT_LOCALE):
        self.default_locale = default_locale

    def check(self, metadata: ListingMetadata) -> None:
        """Resolve every screenshot slot before any remote call is made."""
        for device_classes in metadata.images.screenshots.values():
            for device_class in device_classes:
                screenshot_slot(device_class)

    def image_locale(self, metadata: ListingMetadata) -> str:
        if metadata.details and metadata.details.default_language:
            return metadata.details.default_language
        return self.default_locale

    def apply(self, tx: EditTransaction, metadata: ListingMetadata) -> List[str]:
        """
        Apply metadata to an open edit.

        Args:
            tx: Open edit transaction
            metadata: Metadata loaded by ``load_metadata``

        Returns:
            Components that were sent to the edit
        """
        self.check(metadata)
        applied = []

        if metadata.details is not None:
            if self.apply_details(tx, metadata.details):
                applied.append(COMPONENT_DETAILS)

        for locale, listing in metadata.listings.items():
            self.apply_listing(tx, locale, listing)
        if metadata.listings:
            applied.append(COMPONENT_LISTINGS)

        images = metadata.images
        locale = self.image_locale(metadata)
        if images.icon:
            self.replace_images(tx, locale, ICON, [images.icon])
            applied.append(COMPONENT_ICON)
        if images.feature_graphic:
            self.replace_images(tx, locale, FEATURE_GRAPHIC, [images.feature_graphic])
            applied.append(COMPONENT_FEATURE_GRAPHIC)

        for screenshot_locale, device_classes in images.screenshots.items():
            for device_class, paths in device_classes.items():
                logger.info(
                    f"Uploading {len(paths)} {device_class} screenshot(s) "
                    f"for {screenshot_locale}..."
                )
                self.replace_images(
                    tx, screenshot_locale, screenshot_slot(device_class), paths
                )
        if images.screenshots:
            applied.append(COMPONENT_SCREENSHOTS)

        return applied

    def apply_details(self, tx: EditTransaction, details: AppDetails) -> bool:
        """Patch the app details; returns False when nothing was sendable."""
        tx.require_open()
        logger.info("Updating app details...")
        if details.category:
            # Category is set in Play Console, not through the details resource
            logger.info(f"  Category: {details.category} (not updated via API)")
        if details.privacy_policy_url:
            logger.info(f"  Privacy Policy: {details.privacy_policy_url} (not updated via API)")

        body = details.to_request()
        if not body:
            logger.info("No app details to update")
            return False

        for key, value in body.items():
            logger.info(f"  {key}: {value}")
        tx.api.update_details(tx.package_name, tx.edit_id, body)
        logger.info("App details updated")
        return True

    def apply_listing(self, tx: EditTransaction, locale: str, listing: Listing) -> None:
        """
        Update the listing for a locale, creating it if it does not exist.

        The update is attempted first; only a not-found response leads to
        an insert.
        """
        tx.require_open()
        logger.info(f"Updating listing for {locale}...")
        body = listing.to_request()
        if listing.title:
            logger.info(f"  Title: {listing.title}")
        if listing.short_description:
            logger.info(f"  Short description: {preview(listing.short_description)}")
        if listing.full_description:
            logger.info(f"  Full description: {preview(listing.full_description, 100)}")

        try:
            tx.api.update_listing(tx.package_name, tx.edit_id, locale, body)
            logger.info(f"Listing updated for {locale}")
        except NotFoundError:
            logger.info(f"  Creating new listing for {locale}...")
            tx.api.insert_listing(tx.package_name, tx.edit_id, locale, body)
            logger.info(f"Listing created for {locale}")

    def replace_images(
        self,
        tx: EditTransaction,
        locale: str,
        image_type: str,
        paths: List[Path],
    ) -> None:
        """Delete every image in a slot, then upload the given files in order."""
        tx.require_open()
        try:
            tx.api.delete_all_images(tx.package_name, tx.edit_id, locale, image_type)
        except NotFoundError:
            logger.debug(f"No existing {image_type} images for {locale}")

        for index, path in enumerate(paths, start=1):
            tx.api.upload_image(tx.package_name, tx.edit_id, locale, image_type, path)
            logger.info(f"  Uploaded {image_type} {index}/{len(paths)} for {locale}")

