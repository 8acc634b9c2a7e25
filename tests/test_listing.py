"""
Tests for applying listing metadata to an edit.
"""

import pytest

from playstore_publisher.exceptions import (
    NotFoundError,
    ServerError,
    UnknownDeviceClassError,
)
from playstore_publisher.listing import ListingSynchronizer, screenshot_slot
from playstore_publisher.metadata import (
    AppDetails,
    ImageSet,
    Listing,
    ListingMetadata,
    load_metadata,
)
from playstore_publisher.transaction import EditTransaction

PACKAGE = "com.example.app"


@pytest.fixture
def synchronizer():
    return ListingSynchronizer()


def open_tx(api):
    return EditTransaction(api, PACKAGE, "edit-1")


class TestDeviceClasses:
    @pytest.mark.parametrize(
        "device_class,slot",
        [
            ("phone", "phoneScreenshots"),
            ("tablet", "sevenInchScreenshots"),
            ("wear", "wearScreenshots"),
            ("wearable", "wearScreenshots"),
        ],
    )
    def test_known(self, device_class, slot):
        assert screenshot_slot(device_class) == slot

    def test_unknown(self):
        with pytest.raises(UnknownDeviceClassError, match="watch"):
            screenshot_slot("watch")

    def test_check_rejects_unknown_before_any_call(self, fake_api, synchronizer, tmp_path, write_image):
        write_image(tmp_path / "images" / "screenshots" / "en-US" / "fridge" / "1.png")
        metadata = load_metadata(tmp_path)

        with pytest.raises(UnknownDeviceClassError):
            synchronizer.check(metadata)
        with pytest.raises(UnknownDeviceClassError):
            synchronizer.apply(open_tx(fake_api), metadata)
        assert fake_api.calls == []


class TestListings:
    """Test the update-then-insert listing upsert."""

    def test_existing_locale_only_updates(self, make_api, synchronizer):
        api = make_api(existing_listings={"en-US"})

        synchronizer.apply_listing(open_tx(api), "en-US", Listing(title="Example"))

        assert api.call_names() == ["update_listing"]
        assert api.calls_to("update_listing") == [(PACKAGE, "edit-1", "en-US", {"title": "Example"})]

    def test_new_locale_falls_back_to_insert(self, fake_api, synchronizer):
        synchronizer.apply_listing(open_tx(fake_api), "ja-JP", Listing(title="Example"))

        assert fake_api.call_names() == ["update_listing", "insert_listing"]
        assert fake_api.calls_to("insert_listing") == [
            (PACKAGE, "edit-1", "ja-JP", {"title": "Example"})
        ]

    def test_other_update_errors_propagate(self, make_api, synchronizer):
        api = make_api(fail={"update_listing": ServerError("Backend error", 500)})

        with pytest.raises(ServerError):
            synchronizer.apply_listing(open_tx(api), "en-US", Listing(title="Example"))
        assert "insert_listing" not in api.call_names()


class TestDetails:
    def test_partial_patch(self, fake_api, synchronizer):
        applied = synchronizer.apply_details(
            open_tx(fake_api), AppDetails(email="support@example.com")
        )

        assert applied is True
        assert fake_api.calls_to("update_details") == [
            (PACKAGE, "edit-1", {"contactEmail": "support@example.com"})
        ]

    def test_nothing_sendable(self, fake_api, synchronizer):
        applied = synchronizer.apply_details(open_tx(fake_api), AppDetails(category="GAME"))

        assert applied is False
        assert fake_api.calls == []


class TestImages:
    """Test replace semantics for image slots."""

    def test_delete_then_upload_in_order(self, fake_api, synchronizer, tmp_path):
        paths = [tmp_path / "a.png", tmp_path / "b.png"]

        synchronizer.replace_images(open_tx(fake_api), "en-US", "phoneScreenshots", paths)

        assert fake_api.call_names() == ["delete_all_images", "upload_image", "upload_image"]
        assert [args[4] for args in fake_api.calls_to("upload_image")] == paths

    def test_delete_not_found_is_ignored(self, make_api, synchronizer, tmp_path):
        api = make_api(fail={"delete_all_images": NotFoundError("No images", 404)})

        synchronizer.replace_images(open_tx(api), "en-US", "icon", [tmp_path / "icon.png"])

        assert api.call_names() == ["delete_all_images", "upload_image"]

    def test_delete_other_error_propagates(self, make_api, synchronizer, tmp_path):
        api = make_api(fail={"delete_all_images": ServerError("Backend error", 500)})

        with pytest.raises(ServerError):
            synchronizer.replace_images(open_tx(api), "en-US", "icon", [tmp_path / "icon.png"])
        assert "upload_image" not in api.call_names()


class TestApply:
    """Test the full ordered sync."""

    def test_full_sync_order(self, make_api, synchronizer, metadata_dir):
        api = make_api(existing_listings={"en-US"})
        metadata = load_metadata(metadata_dir)

        applied = synchronizer.apply(open_tx(api), metadata)

        assert applied == metadata.updated_components
        assert api.call_names() == [
            "update_details",
            "update_listing",  # en-US
            "update_listing",  # fr-FR, not found
            "insert_listing",
            "delete_all_images",  # icon
            "upload_image",
            "delete_all_images",  # feature graphic
            "upload_image",
            "delete_all_images",  # phone
            "upload_image",
            "upload_image",
            "upload_image",
            "delete_all_images",  # tablet
            "upload_image",
        ]

        uploads = api.calls_to("upload_image")
        assert uploads[0][2:4] == ("en-US", "icon")
        assert uploads[1][2:4] == ("en-US", "featureGraphic")
        assert [args[4].name for args in uploads[2:5]] == ["a.png", "b.png", "c.jpg"]
        assert {args[3] for args in uploads[2:5]} == {"phoneScreenshots"}
        assert uploads[5][3] == "sevenInchScreenshots"

    def test_graphics_use_default_language(self, fake_api, tmp_path, write_image):
        icon = write_image(tmp_path / "icon.png")
        metadata = ListingMetadata(
            details=AppDetails(default_language="de-DE"),
            images=ImageSet(icon=icon),
            updated_components=["app-details", "icon"],
        )

        ListingSynchronizer(default_locale="en-US").apply(open_tx(fake_api), metadata)

        assert fake_api.calls_to("delete_all_images") == [(PACKAGE, "edit-1", "de-DE", "icon")]
