from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from replica_chat.client import SensayClient
from replica_chat.config import get_settings
from replica_chat.errors import ApiError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SENSAY_API_KEY_SECRET", "SENSAY_API_URL", "SENSAY_API_VERSION", "SENSAY_REQUEST_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeBackend:
    """In-memory stand-in for the Sensay API, shared by every FakeClient."""

    def __init__(self, users=(), replicas=(), completion: Optional[Dict[str, Any]] = None) -> None:
        self.users = set(users)
        self.replicas: List[Dict[str, Any]] = [dict(r) for r in replicas]
        self.completion = completion if completion is not None else {"content": "Hi there"}
        self.errors: Dict[str, Exception] = {}
        self.calls: List[tuple] = []

    def factory(self, credential: str, user_id: Optional[str] = None) -> "FakeClient":
        return FakeClient(self, credential, user_id)

    def ops(self) -> List[str]:
        return [c[0] for c in self.calls]


class FakeClient:
    def __init__(self, backend: FakeBackend, credential: str, user_id: Optional[str]) -> None:
        self.backend = backend
        self.credential = credential
        self.user_id = user_id

    def _call(self, op: str, *args) -> None:
        self.backend.calls.append((op, self.credential, self.user_id) + args)
        if op in self.backend.errors:
            raise self.backend.errors[op]

    def get_user(self, user_id):
        self._call("get_user", user_id)
        if user_id not in self.backend.users:
            raise ApiError(404, {"error": "User not found"})
        return {"id": user_id}

    def create_user(self, user_id, email, name):
        self._call("create_user", user_id, email, name)
        self.backend.users.add(user_id)
        return {"id": user_id, "email": email, "name": name}

    def list_replicas(self):
        self._call("list_replicas")
        return list(self.backend.replicas)

    def create_replica(self, payload):
        self._call("create_replica", payload)
        replica = dict(payload, uuid=f"replica-{len(self.backend.replicas) + 1}")
        self.backend.replicas.append(replica)
        return replica

    def chat_completion(self, replica_uuid, content, source="web", skip_chat_history=False):
        self._call("chat_completion", replica_uuid, content, source, skip_chat_history)
        return self.backend.completion


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


class StubResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class StubSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return self.responses.pop(0)


def stub_factory(http):
    """Client factory building real SensayClients over a StubSession."""
    def factory(credential, user_id=None):
        return SensayClient(credential, user_id, base_url="https://api.test", session=http)
    return factory
