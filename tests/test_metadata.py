"""
Tests for loading metadata and release notes from disk.
"""

from playstore_publisher.metadata import (
    AppDetails,
    Listing,
    ReleaseNote,
    load_metadata,
    load_release_notes,
    read_text_file,
)


class TestReadTextFile:
    def test_missing_and_blank(self, tmp_path, write_file):
        assert read_text_file(tmp_path / "missing.txt") is None
        assert read_text_file(write_file(tmp_path / "blank.txt", "  \n\n")) is None

    def test_strips(self, tmp_path, write_file):
        assert read_text_file(write_file(tmp_path / "t.txt", "\n Title \n")) == "Title"


class TestLoadMetadata:
    """Test the metadata directory walk."""

    def test_full_tree(self, metadata_dir):
        metadata = load_metadata(metadata_dir)

        assert metadata.details == AppDetails(
            category="PRODUCTIVITY",
            website="https://example.com",
            email="support@example.com",
        )
        assert metadata.listings["en-US"] == Listing(
            title="Example App",
            short_description="Does things",
            full_description="Does many\nthings.",
        )
        assert metadata.listings["fr-FR"].title == "Application Exemple"
        assert metadata.listings["fr-FR"].full_description is None
        assert metadata.images.icon == metadata_dir / "images" / "icon.png"
        assert metadata.images.feature_graphic == metadata_dir / "images" / "feature-graphic.png"
        assert metadata.updated_components == [
            "app-details",
            "app-info",
            "icon",
            "feature-graphic",
            "screenshots",
        ]

    def test_screenshots_sorted_by_filename(self, metadata_dir):
        metadata = load_metadata(metadata_dir)

        phone = metadata.images.screenshots["en-US"]["phone"]
        assert [p.name for p in phone] == ["a.png", "b.png", "c.jpg"]
        assert [p.name for p in metadata.images.screenshots["en-US"]["tablet"]] == ["1.png"]

    def test_non_images_and_empty_dirs_ignored(self, tmp_path, write_file, write_image):
        root = tmp_path / "metadata"
        write_file(root / "images" / "screenshots" / "en-US" / "phone" / "notes.txt", "x")
        (root / "images" / "screenshots" / "de-DE" / "phone").mkdir(parents=True)
        write_image(root / "images" / "screenshots" / "en-US" / "tablet" / "shot.JPEG")

        metadata = load_metadata(root)

        assert metadata.images.screenshots == {
            "en-US": {"tablet": [root / "images" / "screenshots" / "en-US" / "tablet" / "shot.JPEG"]}
        }

    def test_missing_root(self, tmp_path):
        metadata = load_metadata(tmp_path / "nope")
        assert metadata.is_empty
        assert metadata.details is None
        assert metadata.listings == {}

    def test_empty_sections_are_absent(self, tmp_path, write_file):
        root = tmp_path / "metadata"
        write_file(root / "details" / "website.txt", "   ")
        (root / "listings" / "en-US").mkdir(parents=True)
        write_file(root / "listings" / "de-DE" / "title.txt", "")
        (root / "images" / "screenshots").mkdir(parents=True)

        metadata = load_metadata(root)

        assert metadata.details is None
        assert metadata.listings == {}
        assert metadata.images.screenshots == {}
        assert metadata.is_empty

    def test_listing_request_omits_absent_fields(self):
        listing = Listing(title="T", video="https://youtu.be/x")
        assert listing.to_request() == {"title": "T", "video": "https://youtu.be/x"}

    def test_details_request(self):
        details = AppDetails(
            category="GAME",
            website="https://example.com",
            phone="+1 555",
            privacy_policy_url="https://example.com/privacy",
            default_language="en-GB",
        )
        assert details.to_request() == {
            "contactWebsite": "https://example.com",
            "contactPhone": "+1 555",
            "defaultLanguage": "en-GB",
        }


class TestLoadReleaseNotes:
    """Test whatsnew-<locale> loading."""

    def test_loads_sorted_non_blank(self, tmp_path, write_file):
        write_file(tmp_path / "whatsnew-fr-FR", "Corrections\n")
        write_file(tmp_path / "whatsnew-en-US", "Bug fixes")
        write_file(tmp_path / "whatsnew-de-DE", "  ")
        write_file(tmp_path / "README.md", "ignored")

        assert load_release_notes(tmp_path) == [
            ReleaseNote("en-US", "Bug fixes"),
            ReleaseNote("fr-FR", "Corrections"),
        ]

    def test_no_directory(self, tmp_path):
        assert load_release_notes(None) == []
        assert load_release_notes("") == []
        assert load_release_notes(tmp_path / "missing") == []
