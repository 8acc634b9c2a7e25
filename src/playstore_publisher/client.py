"""
Google Play Developer API client.

This module provides a thin client for the Android Publisher v3 "edits"
resource: opening and closing edits, uploading artifacts and images,
and updating tracks, details and store listings.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from ratelimit import limits, sleep_and_retry

from .auth import ServiceAccountAuth
from .credentials import Credential
from .exceptions import RemoteAPIError, UnsupportedArtifactError, ValidationError
from .translator import classify_error, parse_error_body
from .utils import artifact_mime_type, image_mime_type, validate_package_name

logger = logging.getLogger(__name__)


class PlayStoreAPI:
    """
    Google Play Developer API client.

    Args:
        credential: Decoded service account credential
        auth: Optional token provider (built from the credential by default)
        timeout: Transport timeout in seconds for each request
    """

    BASE_URL = "https://androidpublisher.googleapis.com/androidpublisher/v3"
    UPLOAD_URL = "https://androidpublisher.googleapis.com/upload/androidpublisher/v3"

    def __init__(
        self,
        credential: Credential,
        auth: Optional[ServiceAccountAuth] = None,
        timeout: int = 300,
    ):
        """Initialize the Play Developer API client."""
        if credential is None:
            raise ValidationError("A service account credential is required")
        self.credential = credential
        self.auth = auth or ServiceAccountAuth(credential)
        self.timeout = timeout

    def _make_request_raw(
        self,
        method: str = "GET",
        endpoint: str = "",
        params: Optional[Dict] = None,
        data: Optional[Dict] = None,
        content: Optional[bytes] = None,
        content_type: Optional[str] = None,
        upload: bool = False,
    ) -> requests.Response:
        """Make a request to the API and raise on error responses."""
        url = f"{self.UPLOAD_URL if upload else self.BASE_URL}{endpoint}"
        headers = self.auth.headers()
        if content is not None:
            headers["Content-Type"] = content_type or "application/octet-stream"
            params = dict(params or {}, uploadType="media")

        logger.info(f"_make_request: {method} {url}")
        if params:
            logger.debug(f"_make_request: params={params}")

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=data,
                data=content,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"_make_request: Request failed: {e}")
            raise RemoteAPIError(f"Request failed: {e}")

        logger.debug(f"_make_request: Response received - status={response.status_code}")

        if response.status_code >= 400:
            message, details = parse_error_body(response)
            raise classify_error(response.status_code, message, details)

        return response

    @sleep_and_retry
    @limits(calls=3000, period=60)  # Play Developer API per-minute quota
    def _make_request(self, *args, **kwargs) -> requests.Response:
        """Rate-limited wrapper for _make_request_raw."""
        return self._make_request_raw(*args, **kwargs)

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        if not response.content:
            return {}
        return response.json()

    def _edit_path(self, package_name: str, edit_id: str) -> str:
        return f"/applications/{package_name}/edits/{edit_id}"

    # ===== EDIT LIFECYCLE =====

    def insert_edit(self, package_name: str) -> str:
        """Open a new edit for a package and return its id."""
        package_name = validate_package_name(package_name)
        response = self._make_request(
            method="POST", endpoint=f"/applications/{package_name}/edits", data={}
        )
        return self._json(response)["id"]

    def get_edit(self, package_name: str, edit_id: str) -> Dict[str, Any]:
        """Get an open edit."""
        response = self._make_request(
            method="GET", endpoint=self._edit_path(package_name, edit_id)
        )
        return self._json(response)

    def validate_edit(self, package_name: str, edit_id: str) -> Dict[str, Any]:
        """Check an edit for consistency without committing it."""
        response = self._make_request(
            method="POST", endpoint=f"{self._edit_path(package_name, edit_id)}:validate"
        )
        return self._json(response)

    def commit_edit(
        self,
        package_name: str,
        edit_id: str,
        changes_not_sent_for_review: bool = False,
    ) -> Dict[str, Any]:
        """
        Commit an edit.

        Args:
            package_name: Application package name
            edit_id: Edit to commit
            changes_not_sent_for_review: Save changes without sending them
                for review (required for listing updates on draft apps)

        Returns:
            The committed edit resource
        """
        params = None
        if changes_not_sent_for_review:
            params = {"changesNotSentForReview": "true"}
        response = self._make_request(
            method="POST",
            endpoint=f"{self._edit_path(package_name, edit_id)}:commit",
            params=params,
        )
        return self._json(response)

    def delete_edit(self, package_name: str, edit_id: str) -> None:
        """Abandon an edit."""
        self._make_request(method="DELETE", endpoint=self._edit_path(package_name, edit_id))

    # ===== ARTIFACTS AND TRACKS =====

    def upload_artifact(
        self, package_name: str, edit_id: str, artifact_path: Union[str, Path]
    ) -> str:
        """
        Upload an app bundle (.aab) or APK (.apk) to an edit.

        Args:
            package_name: Application package name
            edit_id: Open edit id
            artifact_path: Path to the artifact

        Returns:
            The version code assigned by Play, as a string
        """
        path = Path(artifact_path)
        suffix = path.suffix.lower()
        if suffix == ".aab":
            collection = "bundles"
        elif suffix == ".apk":
            collection = "apks"
        else:
            raise UnsupportedArtifactError(
                f"Unsupported file type: {suffix or path.name}. Must be .aab or .apk"
            )

        response = self._make_request(
            method="POST",
            endpoint=f"{self._edit_path(package_name, edit_id)}/{collection}",
            content=path.read_bytes(),
            content_type=artifact_mime_type(path),
            upload=True,
        )
        return str(self._json(response)["versionCode"])

    def get_track(
        self, package_name: str, edit_id: str, track: str
    ) -> List[Dict[str, Any]]:
        """Get the releases currently on a track, in Play's order."""
        response = self._make_request(
            method="GET", endpoint=f"{self._edit_path(package_name, edit_id)}/tracks/{track}"
        )
        return self._json(response).get("releases", [])

    def update_track(
        self,
        package_name: str,
        edit_id: str,
        track: str,
        releases: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Replace the releases on a track."""
        response = self._make_request(
            method="PUT",
            endpoint=f"{self._edit_path(package_name, edit_id)}/tracks/{track}",
            data={"track": track, "releases": releases},
        )
        return self._json(response)

    # ===== STORE LISTING =====

    def update_details(
        self, package_name: str, edit_id: str, details: Dict[str, str]
    ) -> Dict[str, Any]:
        """Patch app details (contact info, default language)."""
        response = self._make_request(
            method="PATCH",
            endpoint=f"{self._edit_path(package_name, edit_id)}/details",
            data=details,
        )
        return self._json(response)

    def update_listing(
        self, package_name: str, edit_id: str, locale: str, fields: Dict[str, str]
    ) -> Dict[str, Any]:
        """Patch an existing localized listing. Raises NotFoundError if absent."""
        response = self._make_request(
            method="PATCH",
            endpoint=f"{self._edit_path(package_name, edit_id)}/listings/{locale}",
            data=dict(fields, language=locale),
        )
        return self._json(response)

    def insert_listing(
        self, package_name: str, edit_id: str, locale: str, fields: Dict[str, str]
    ) -> Dict[str, Any]:
        """Create a localized listing."""
        response = self._make_request(
            method="PUT",
            endpoint=f"{self._edit_path(package_name, edit_id)}/listings/{locale}",
            data=dict(fields, language=locale),
        )
        return self._json(response)

    def delete_all_images(
        self, package_name: str, edit_id: str, locale: str, image_type: str
    ) -> None:
        """Delete every image of one type for a locale."""
        self._make_request(
            method="DELETE",
            endpoint=f"{self._edit_path(package_name, edit_id)}/listings/{locale}/{image_type}",
        )

    def upload_image(
        self,
        package_name: str,
        edit_id: str,
        locale: str,
        image_type: str,
        image_path: Union[str, Path],
    ) -> Dict[str, Any]:
        """Upload one image into a listing image slot."""
        path = Path(image_path)
        response = self._make_request(
            method="POST",
            endpoint=f"{self._edit_path(package_name, edit_id)}/listings/{locale}/{image_type}",
            content=path.read_bytes(),
            content_type=image_mime_type(path),
            upload=True,
        )
        return self._json(response)
