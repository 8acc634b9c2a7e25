"""
Store listing metadata loading.

Reads a metadata directory laid out as::

    details/{category,website,email,phone,privacy_policy_url,default_language}.txt
    listings/<locale>/{title,short_description,full_description,video}.txt
    images/icon.png
    images/feature-graphic.png
    images/screenshots/<locale>/<device class>/*.{png,jpg,jpeg}

Every file is optional. A missing or blank file means "leave unchanged".
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional, Union

from .utils import is_image_file

logger = logging.getLogger(__name__)

COMPONENT_DETAILS = "app-details"
COMPONENT_LISTINGS = "app-info"
COMPONENT_ICON = "icon"
COMPONENT_FEATURE_GRAPHIC = "feature-graphic"
COMPONENT_SCREENSHOTS = "screenshots"

RELEASE_NOTES_PREFIX = "whatsnew-"


def read_text_file(path: Path) -> Optional[str]:
    """Read and strip a text file; missing or blank files give None."""
    if not path.is_file():
        return None
    text = path.read_text(encoding="utf-8").strip()
    return text or None


@dataclass(frozen=True)
class AppDetails:
    """App-level contact details."""

    category: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    privacy_policy_url: Optional[str] = None
    default_language: Optional[str] = None

    @property
    def has_changes(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    def to_request(self) -> Dict[str, str]:
        """
        Fields accepted by the details resource, omitting absent values.

        Category and privacy policy URL have no counterpart on the
        details resource and are not included.
        """
        mapping = {
            "contactWebsite": self.website,
            "contactEmail": self.email,
            "contactPhone": self.phone,
            "defaultLanguage": self.default_language,
        }
        return {key: value for key, value in mapping.items() if value is not None}


@dataclass(frozen=True)
class Listing:
    """Localized store listing text."""

    title: Optional[str] = None
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    video: Optional[str] = None

    @property
    def has_changes(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    def to_request(self) -> Dict[str, str]:
        mapping = {
            "title": self.title,
            "shortDescription": self.short_description,
            "fullDescription": self.full_description,
            "video": self.video,
        }
        return {key: value for key, value in mapping.items() if value is not None}


@dataclass(frozen=True)
class ImageSet:
    """Graphic assets; screenshots are keyed by locale, then device class."""

    icon: Optional[Path] = None
    feature_graphic: Optional[Path] = None
    screenshots: Dict[str, Dict[str, List[Path]]] = field(default_factory=dict)


@dataclass(frozen=True)
class ListingMetadata:
    details: Optional[AppDetails] = None
    listings: Dict[str, Listing] = field(default_factory=dict)
    images: ImageSet = field(default_factory=ImageSet)
    updated_components: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.updated_components


@dataclass(frozen=True)
class ReleaseNote:
    locale: str
    text: str

    def to_request(self) -> Dict[str, str]:
        return {"language": self.locale, "text": self.text}


def _subdirectories(path: Path) -> List[Path]:
    if not path.is_dir():
        return []
    return sorted(p for p in path.iterdir() if p.is_dir())


def _load_details(details_dir: Path) -> Optional[AppDetails]:
    if not details_dir.is_dir():
        return None
    details = AppDetails(
        category=read_text_file(details_dir / "category.txt"),
        website=read_text_file(details_dir / "website.txt"),
        email=read_text_file(details_dir / "email.txt"),
        phone=read_text_file(details_dir / "phone.txt"),
        privacy_policy_url=read_text_file(details_dir / "privacy_policy_url.txt"),
        default_language=read_text_file(details_dir / "default_language.txt"),
    )
    return details if details.has_changes else None


def _load_listings(listings_dir: Path) -> Dict[str, Listing]:
    listings = {}
    for locale_dir in _subdirectories(listings_dir):
        listing = Listing(
            title=read_text_file(locale_dir / "title.txt"),
            short_description=read_text_file(locale_dir / "short_description.txt"),
            full_description=read_text_file(locale_dir / "full_description.txt"),
            video=read_text_file(locale_dir / "video.txt"),
        )
        if listing.has_changes:
            listings[locale_dir.name] = listing
        else:
            logger.info(f"Skipping listing {locale_dir.name}: no listing files found")
    return listings


def _load_screenshots(screenshots_dir: Path) -> Dict[str, Dict[str, List[Path]]]:
    screenshots: Dict[str, Dict[str, List[Path]]] = {}
    for locale_dir in _subdirectories(screenshots_dir):
        by_device = {}
        for device_dir in _subdirectories(locale_dir):
            # Play shows screenshots in upload order
            files = sorted(
                (p for p in device_dir.iterdir() if p.is_file() and is_image_file(p)),
                key=lambda p: p.name,
            )
            if files:
                by_device[device_dir.name] = files
        if by_device:
            screenshots[locale_dir.name] = by_device
    return screenshots


def load_metadata(root_path: Union[str, Path]) -> ListingMetadata:
    """
    Load listing metadata from a directory tree.

    Args:
        root_path: Metadata root directory

    Returns:
        ListingMetadata with only the fields that were found
    """
    root = Path(root_path)
    if not root.is_dir():
        logger.warning(f"Metadata directory not found: {root}")
        return ListingMetadata()

    images_dir = root / "images"
    icon = images_dir / "icon.png"
    feature_graphic = images_dir / "feature-graphic.png"

    details = _load_details(root / "details")
    listings = _load_listings(root / "listings")
    images = ImageSet(
        icon=icon if icon.is_file() else None,
        feature_graphic=feature_graphic if feature_graphic.is_file() else None,
        screenshots=_load_screenshots(images_dir / "screenshots"),
    )

    components = []
    if details is not None:
        components.append(COMPONENT_DETAILS)
    if listings:
        components.append(COMPONENT_LISTINGS)
    if images.icon:
        components.append(COMPONENT_ICON)
    if images.feature_graphic:
        components.append(COMPONENT_FEATURE_GRAPHIC)
    if images.screenshots:
        components.append(COMPONENT_SCREENSHOTS)

    return ListingMetadata(
        details=details,
        listings=listings,
        images=images,
        updated_components=components,
    )


def load_release_notes(directory: Optional[Union[str, Path]]) -> List[ReleaseNote]:
    """
    Load per-locale release notes from ``whatsnew-<locale>`` files.

    Args:
        directory: Directory holding the release note files (may be None)

    Returns:
        Release notes in filename order; blank files are skipped
    """
    if not directory:
        return []

    notes_dir = Path(directory)
    if not notes_dir.is_dir():
        logger.warning(f"Release notes directory not found: {notes_dir}")
        return []

    notes = []
    for path in sorted(notes_dir.glob(f"{RELEASE_NOTES_PREFIX}*")):
        if not path.is_file():
            continue
        text = read_text_file(path)
        if text:
            locale = path.name[len(RELEASE_NOTES_PREFIX):]
            notes.append(ReleaseNote(locale=locale, text=text))
            logger.info(f"Added release notes for locale: {locale}")
    return notes
