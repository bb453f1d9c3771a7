from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .constants import SAMPLE_USER_ID


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ExchangeState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_COMPLETION = "awaiting_completion"


@dataclass
class ChatMessage:
    role: Role
    content: str = ""
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        d = {"role": self.role.value, "content": self.content}
        if self.name:
            d["name"] = self.name
        return d

    def as_markdown(self) -> str:
        # Markdown joins single newlines; force a hard break on each one.
        return (self.content or "").replace("\r\n", "\n").replace("\n", "  \n")


@dataclass
class Session:
    user_id: str = SAMPLE_USER_ID
    replica_uuid: Optional[str] = None
    # credential the replica_uuid was resolved with
    credential: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.replica_uuid is not None

    def matches(self, credential: str) -> bool:
        return self.resolved and self.credential == credential

    def reset(self) -> None:
        self.replica_uuid = None
        self.credential = None
