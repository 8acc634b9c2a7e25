"""
Service account credential decoding.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import CredentialFormatError

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class Credential:
    """Decoded service account identity."""

    info: Dict[str, Any] = field(repr=False)

    @property
    def client_email(self) -> Optional[str]:
        return self.info.get("client_email")

    @property
    def private_key(self) -> Optional[str]:
        return self.info.get("private_key")

    @property
    def private_key_id(self) -> Optional[str]:
        return self.info.get("private_key_id")

    @property
    def token_uri(self) -> str:
        return self.info.get("token_uri") or DEFAULT_TOKEN_URI


def _parse_json_object(text: str) -> Dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("service account JSON must be an object")
    return data


def resolve_credential(raw: str) -> Credential:
    """
    Decode a service account blob into a Credential.

    The blob is tried as plain JSON first, then as base64-encoded JSON.

    Args:
        raw: Service account JSON, or the same JSON base64-encoded

    Returns:
        The decoded Credential

    Raises:
        CredentialFormatError: If neither interpretation yields a JSON object
    """
    if not raw or not raw.strip():
        raise CredentialFormatError("Service account JSON is empty")

    try:
        return Credential(info=_parse_json_object(raw))
    except ValueError:
        pass

    try:
        decoded = base64.b64decode(raw.strip()).decode("utf-8")
        return Credential(info=_parse_json_object(decoded))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise CredentialFormatError(
            "Failed to parse service account JSON. "
            "Must be valid JSON or base64-encoded JSON."
        ) from None
