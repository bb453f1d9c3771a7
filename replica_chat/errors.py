"""
Exception types for the Sensay client and the chat session, plus the
extractor chain that turns a failed call into one line for the user.

API error bodies come back in several shapes depending on which layer
rejected the request, so extraction tries each known shape in order and
falls through on mismatch:

  1. {"error": {"message": "..."}}
  2. {"error": "..."}            (or any other error value, JSON-encoded)
  3. {"message": "..."}
  4. {"response": {"status": 500, "data": ...}}
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional, Tuple


DEFAULT_SEND_ERROR = "Failed to send message. Please check your API key and try again."
SESSION_INIT_ERROR = "Failed to initialize session. Please check your API key."


class ReplicaChatError(Exception):
    """Base class for errors raised by replica_chat."""


class ApiError(ReplicaChatError):
    """Raised when the API answers with a non-2xx status.

    `data` is the decoded JSON body when the body is JSON, else the raw text.
    """

    def __init__(self, status: int, data: Any = None, *, method: str = "", path: str = "") -> None:
        self.status = status
        self.data = data
        self.method = method
        self.path = path
        where = f" {method} {path}".rstrip() if method or path else ""
        super().__init__(f"API request failed ({status}){where}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def payload(self) -> dict:
        return {"response": {"status": self.status, "data": self.data}}


class SessionInitError(ReplicaChatError):
    """Raised when the demo user or replica could not be provisioned."""

    def __init__(self, message: str = SESSION_INIT_ERROR) -> None:
        super().__init__(message)


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _error_object_message(payload: Mapping[str, Any]) -> Optional[str]:
    err = payload.get("error")
    if isinstance(err, Mapping) and err.get("message"):
        return str(err["message"])
    return None


def _error_field(payload: Mapping[str, Any]) -> Optional[str]:
    err = payload.get("error")
    if not err:
        return None
    return err if isinstance(err, str) else _dumps(err)


def _message_field(payload: Mapping[str, Any]) -> Optional[str]:
    msg = payload.get("message")
    return str(msg) if msg else None


def _response_data(payload: Mapping[str, Any]) -> Optional[str]:
    resp = payload.get("response")
    if not isinstance(resp, Mapping) or resp.get("data") is None:
        return None
    data = resp["data"]
    if isinstance(data, Mapping):
        nested = _error_object_message(data) or _message_field(data)
        if nested:
            return nested
    elif isinstance(data, str) and data.strip():
        return data
    return f"API Error ({resp.get('status')}): {_dumps(data)}"


EXTRACTORS: Tuple[Callable[[Mapping[str, Any]], Optional[str]], ...] = (
    _error_object_message,
    _error_field,
    _message_field,
    _response_data,
)


def extract_error_message(payload: Any, default: str = DEFAULT_SEND_ERROR) -> str:
    """Return the most specific message found in an error payload."""
    if not isinstance(payload, Mapping):
        return default
    for extract in EXTRACTORS:
        msg = extract(payload)
        if msg:
            return msg
    return default


def describe_error(exc: BaseException, default: str = DEFAULT_SEND_ERROR) -> str:
    """Map an exception raised during an exchange to a display message."""
    if isinstance(exc, SessionInitError):
        return str(exc)
    if isinstance(exc, ApiError):
        return extract_error_message(exc.payload, default)
    return extract_error_message({"message": str(exc)}, default)
