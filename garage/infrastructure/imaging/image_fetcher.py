from __future__ import annotations

import base64
import binascii
import urllib.error
import urllib.parse
import urllib.request

from garage.domain.entities import ExternalServiceError, ServiceUnavailableError
from garage.domain.ports import ImageFetcherPort


def decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:"):
        raise ValueError("Not a data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError("Invalid base64 payload") from exc
    return urllib.parse.unquote_to_bytes(payload)


class UrlImageFetcher(ImageFetcherPort):
    """Loads image bytes for preview, from data: URIs or over HTTP(S)."""

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    def fetch(self, url: str) -> bytes:
        if url.startswith("data:"):
            try:
                return decode_data_uri(url)
            except ValueError as exc:
                raise ExternalServiceError(str(exc)) from exc
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as exc:
            raise ExternalServiceError(f"HTTP {exc.code}", status_code=exc.code) from exc
        except (urllib.error.URLError, OSError) as exc:
            raise ServiceUnavailableError(str(exc)) from exc
        except ValueError as exc:
            raise ExternalServiceError(str(exc)) from exc
