"""
Run summaries for playstore-publisher.

Builds small pandas tables describing what a run published, used for
the success summary written to the log.
"""

from typing import Optional

import pandas as pd

from .metadata import ListingMetadata
from .release import ReleaseSpec

SEPARATOR = "=" * 39


def release_summary(package_name: str, track: str, release: ReleaseSpec) -> pd.DataFrame:
    """
    One-row table describing a published release.

    Args:
        package_name: Application package name
        track: Target track
        release: The release applied to the track

    Returns:
        DataFrame with package, track, version code, status, rollout,
        priority and release note locales
    """
    rollout = (
        f"{release.rollout_fraction * 100:g}%" if release.rollout_fraction is not None else ""
    )
    return pd.DataFrame(
        [
            {
                "package": package_name,
                "track": track,
                "version_codes": ", ".join(release.version_codes),
                "status": release.status.value,
                "rollout": rollout,
                "update_priority": release.update_priority,
                "release_notes": ", ".join(n.locale for n in release.release_notes),
            }
        ]
    )


def listing_summary(metadata: ListingMetadata) -> pd.DataFrame:
    """
    Per-locale table of listing fields and screenshot counts.

    Columns for listing text hold booleans (field present); one
    ``screenshots_<device class>`` column per device class holds counts.
    """
    locales = sorted(set(metadata.listings) | set(metadata.images.screenshots))
    rows = []
    for locale in locales:
        listing = metadata.listings.get(locale)
        row = {
            "locale": locale,
            "title": bool(listing and listing.title),
            "short_description": bool(listing and listing.short_description),
            "full_description": bool(listing and listing.full_description),
            "video": bool(listing and listing.video),
        }
        for device_class, paths in metadata.images.screenshots.get(locale, {}).items():
            row[f"screenshots_{device_class}"] = len(paths)
        rows.append(row)

    df = pd.DataFrame(rows, columns=None if rows else ["locale"])
    screenshot_columns = [c for c in df.columns if c.startswith("screenshots_")]
    if screenshot_columns:
        df[screenshot_columns] = df[screenshot_columns].fillna(0).astype(int)
    return df


def format_summary(title: str, lines: list, table: Optional[pd.DataFrame] = None) -> str:
    """Render a boxed summary block with an optional table."""
    parts = ["", SEPARATOR, f"  {title}", SEPARATOR]
    parts.extend(lines)
    if table is not None and not table.empty:
        parts.append(table.to_string(index=False))
    parts.append(SEPARATOR)
    return "\n".join(parts)
