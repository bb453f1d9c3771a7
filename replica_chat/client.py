from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from .config import get_settings
from .constants import COMPLETION_SOURCE
from .errors import ApiError


@lru_cache(maxsize=1)
def get_http_session() -> requests.Session:
    """Return the process-wide requests session shared by every SensayClient."""
    logger.debug("Initializing shared requests session")
    return requests.Session()


class SensayClient:
    """Thin wrapper around the Sensay REST API.

    Every request is authenticated with the organization secret. Passing
    `user_id` makes the client user-scoped (adds X-USER-ID), which the
    replica and completion endpoints act on.
    """

    def __init__(
        self,
        organization_secret: str,
        user_id: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        settings = get_settings()
        self.organization_secret = organization_secret
        self.user_id = user_id
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.api_version = api_version or settings.api_version
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.http = session or get_http_session()

    def _headers(self, versioned: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "X-ORGANIZATION-SECRET": self.organization_secret,
        }
        if self.user_id:
            headers["X-USER-ID"] = self.user_id
        if versioned:
            headers["X-API-Version"] = self.api_version
        return headers

    def _request(self, method: str, path: str, *, json: Any = None, versioned: bool = False) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"api_request | {method} {path} user={self.user_id or '-'}")
        resp = self.http.request(
            method,
            url,
            headers=self._headers(versioned),
            json=json,
            timeout=self.timeout,
        )
        try:
            data = resp.json()
        except ValueError:
            data = resp.text
        if not 200 <= resp.status_code < 300:
            logger.debug(f"api_error | {method} {path} status={resp.status_code}")
            raise ApiError(resp.status_code, data, method=method, path=path)
        return data

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/v1/users/{user_id}")

    def create_user(self, user_id: str, email: str, name: str) -> Dict[str, Any]:
        body = {"id": user_id, "email": email, "name": name}
        return self._request("POST", "/v1/users", json=body, versioned=True)

    def list_replicas(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/v1/replicas")
        if isinstance(data, dict):
            items = data.get("items")
            return list(items) if isinstance(items, list) else []
        return []

    def create_replica(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/v1/replicas", json=payload, versioned=True)

    def chat_completion(
        self,
        replica_uuid: str,
        content: str,
        source: str = COMPLETION_SOURCE,
        skip_chat_history: bool = False,
    ) -> Dict[str, Any]:
        body = {"content": content, "source": source, "skip_chat_history": skip_chat_history}
        return self._request(
            "POST", f"/v1/replicas/{replica_uuid}/chat/completions", json=body, versioned=True
        )
