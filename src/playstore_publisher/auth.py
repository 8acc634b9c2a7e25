"""
OAuth token handling for service account credentials.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import jwt
import requests

from .credentials import Credential
from .exceptions import AuthorizationError, CredentialFormatError

SCOPE = "https://www.googleapis.com/auth/androidpublisher"
GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"

logger = logging.getLogger(__name__)


class ServiceAccountAuth:
    """
    Exchanges a signed service account assertion for access tokens.

    Args:
        credential: Decoded service account credential
        scope: OAuth scope to request
    """

    def __init__(self, credential: Credential, scope: str = SCOPE):
        if not credential.client_email or not credential.private_key:
            raise CredentialFormatError(
                "Service account JSON is missing client_email or private_key"
            )
        self.credential = credential
        self.scope = scope
        self._token: Optional[str] = None
        self._token_expiry: Optional[int] = None

    def _build_assertion(self, issued_at: int) -> str:
        """Sign the JWT assertion sent to the token endpoint."""
        payload = {
            "iss": self.credential.client_email,
            "scope": self.scope,
            "aud": self.credential.token_uri,
            "iat": issued_at,
            "exp": issued_at + 3600,
        }
        headers = {}
        if self.credential.private_key_id:
            headers["kid"] = self.credential.private_key_id

        try:
            return jwt.encode(
                payload,
                self.credential.private_key,
                algorithm="RS256",
                headers=headers,
            )
        except Exception as e:
            raise CredentialFormatError(f"Failed to sign service account assertion: {e}")

    def get_token(self) -> str:
        """Return a cached access token, fetching a new one when expired."""
        current_time = int(datetime.now(timezone.utc).timestamp())

        if self._token and self._token_expiry and current_time < self._token_expiry:
            return self._token

        assertion = self._build_assertion(current_time)
        logger.info(f"get_token: Requesting access token for {self.credential.client_email}")

        try:
            response = requests.post(
                self.credential.token_uri,
                data={"grant_type": GRANT_TYPE, "assertion": assertion},
                timeout=30,
            )
        except requests.exceptions.RequestException as e:
            raise AuthorizationError(f"Token request failed: {e}")

        if response.status_code != 200:
            try:
                error_msg = response.json().get("error_description", response.text)
            except ValueError:
                error_msg = response.text
            raise AuthorizationError(
                f"Service account authentication failed: {error_msg}",
                status_code=response.status_code,
            )

        body = response.json()
        self._token = body["access_token"]
        # Refresh 1 minute before expiry
        self._token_expiry = current_time + int(body.get("expires_in", 3600)) - 60
        return self._token

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.get_token()}"}
