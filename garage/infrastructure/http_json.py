from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any, Dict, Optional

from garage.domain.entities import (
    ExternalServiceError,
    InvalidResponseError,
    ServiceUnavailableError,
)


def request_json(
    method: str,
    url: str,
    payload: Optional[Dict[str, Any]] = None,
    *,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    req_headers = {"Accept": "application/json"}
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        req_headers["Content-Type"] = "application/json"
    if headers:
        req_headers.update(headers)
    req = urllib.request.Request(url, data=data, headers=req_headers, method=method)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            body = response.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        detail = ""
        try:
            detail = exc.read().decode("utf-8")
        except Exception:
            detail = ""
        message = extract_error_message(detail) or f"Server error: {exc.code}"
        raise ExternalServiceError(message, status_code=exc.code) from exc
    except urllib.error.URLError as exc:
        if isinstance(exc.reason, TimeoutError):
            raise ExternalServiceError(_timeout_message(timeout)) from exc
        raise ServiceUnavailableError(str(exc.reason)) from exc
    except TimeoutError as exc:
        raise ExternalServiceError(_timeout_message(timeout)) from exc
    except OSError as exc:
        raise ServiceUnavailableError(str(exc)) from exc
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise InvalidResponseError("Invalid JSON response") from exc
    if not isinstance(data, dict):
        raise InvalidResponseError("Unexpected JSON response")
    return data


def extract_error_message(raw: str) -> Optional[str]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    message = data.get("error") if isinstance(data, dict) else None
    if isinstance(message, dict):
        message = message.get("message") or message.get("detail")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


def _timeout_message(timeout: float) -> str:
    return f"Request timed out after {timeout:g} seconds. Please try again."
