from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import requests
from loguru import logger

from .client import SensayClient
from .constants import COMPLETION_SOURCE
from .errors import ReplicaChatError, describe_error
from .provisioner import ClientFactory, SessionProvisioner
from .states import ChatMessage, ExchangeState, Role, Session


MISSING_API_KEY = "Please provide an API key"


class ChatSessionManager:
    """Credential, transcript and exchange state for one browser session.

    An exchange runs in two steps so the UI can render the optimistic
    transcript before the network calls: `start_exchange` appends the user
    message and an empty assistant placeholder, `finish_exchange` provisions
    the replica, requests the completion and fills or drops the placeholder.
    """

    def __init__(
        self,
        credential: Optional[str] = None,
        client_factory: ClientFactory = SensayClient,
        provisioner: Optional[SessionProvisioner] = None,
    ) -> None:
        self.credential = credential or ""
        self.client_factory = client_factory
        self.provisioner = provisioner or SessionProvisioner(Session(), client_factory)
        self.messages: List[ChatMessage] = []
        self.state = ExchangeState.IDLE
        self.error: Optional[str] = None
        self._pending: Optional[ChatMessage] = None

    @property
    def in_progress(self) -> bool:
        return self.state != ExchangeState.IDLE

    @property
    def session(self) -> Session:
        return self.provisioner.session

    def set_credential(self, credential: Optional[str]) -> None:
        credential = credential or ""
        if credential == self.credential:
            return
        self.credential = credential
        self.provisioner.reset()
        logger.info(f"credential_changed | set={bool(credential)}")

    def clear(self) -> None:
        if self.in_progress:
            return
        self.messages = []
        self.error = None

    def transcript(self) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in self.messages]

    def start_exchange(self, text: str) -> bool:
        if not (text or "").strip() or self.in_progress:
            return False
        if not self.credential:
            self.error = MISSING_API_KEY
            return False

        self.error = None
        user_msg = ChatMessage(Role.USER, text)
        self.messages.append(user_msg)
        self.messages.append(ChatMessage(Role.ASSISTANT, ""))
        self._pending = user_msg
        self.state = ExchangeState.SUBMITTING
        self._log_turn(Role.USER, text)
        return True

    def finish_exchange(self) -> Optional[str]:
        if self._pending is None:
            return None
        content = self._pending.content
        reply: Optional[str] = None
        try:
            replica_uuid = self.provisioner.resolve(self.credential)
            client = self.client_factory(self.credential, self.session.user_id)
            self.state = ExchangeState.AWAITING_COMPLETION
            logger.info(f"chat_exchange:request | replica={replica_uuid} chars={len(content)}")
            response = client.chat_completion(
                replica_uuid, content, source=COMPLETION_SOURCE, skip_chat_history=False
            )
            reply = _completion_text(response)
        except (ReplicaChatError, requests.RequestException) as e:
            self.error = describe_error(e)
            logger.error(f"chat_exchange:failed | {type(e).__name__}: {e} | shown='{self.error}'")
            return None
        finally:
            # The placeholder only survives a completed exchange.
            if reply is None:
                self._drop_placeholder()
            self._pending = None
            self.state = ExchangeState.IDLE

        self.messages[-1].content = reply
        self._log_turn(Role.ASSISTANT, reply)
        return reply

    def send(self, text: str) -> Optional[str]:
        if not self.start_exchange(text):
            return None
        return self.finish_exchange()

    def _drop_placeholder(self) -> None:
        last = self.messages[-1] if self.messages else None
        if last is not None and last.role == Role.ASSISTANT and not last.content:
            self.messages.pop()

    def _log_turn(self, role: Role, text: str) -> None:
        raw = text or ""
        snippet = raw if len(raw) <= 200 else raw[:200] + '...'
        one_line = ' '.join(snippet.split())
        logger.info(f"chat_exchange:turn | role={role.value} n={len(self.messages)} | msg='{one_line}'")


def _completion_text(response: Any) -> str:
    if not isinstance(response, Mapping) or not isinstance(response.get("content"), str):
        raise ReplicaChatError(f"unexpected completion response: {response!r}"[:300])
    return response["content"]
