"""Conversation state for chat clients.

Conversations and messages are immutable; every change is a pure function
from the latest snapshot to a new one, applied through `ConversationStore.update`
so updates land in the order they are issued.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Literal

Role = Literal["user", "assistant"]

DEFAULT_TITLE = "New chat"
TITLE_MAX_LENGTH = 40
TITLE_ELLIPSIS = "…"
ERROR_PREFIX = "⚠️"
UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Conversation:
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    title: str = DEFAULT_TITLE
    created_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    messages: tuple[Message, ...] = ()

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None


def derive_title(text: str) -> str:
    """Build a conversation title from the first user message."""
    title = re.sub(r"\s+", " ", text.strip())
    if not title:
        return DEFAULT_TITLE
    if len(title) > TITLE_MAX_LENGTH:
        return title[:TITLE_MAX_LENGTH].rstrip() + TITLE_ELLIPSIS
    return title


def outgoing_history(
    conversation: Conversation, user_message: Message
) -> list[dict[str, str]]:
    """History sent upstream: prior user/assistant messages plus the new one."""
    prior = [
        m.to_dict() for m in conversation.messages if m.role in ("user", "assistant")
    ]
    return [*prior, user_message.to_dict()]


def begin_turn(conversation: Conversation, user_message: Message) -> Conversation:
    """Append the user message and an empty assistant placeholder together."""
    placeholder = Message(role="assistant", content="")
    return replace(
        conversation, messages=(*conversation.messages, user_message, placeholder)
    )


def append_to_assistant(conversation: Conversation, text: str) -> Conversation:
    """Append text to the trailing assistant message.

    The conversation is returned unchanged when the last message is not an
    assistant message (e.g. the conversation was cleared mid-stream).
    """
    last = conversation.last_message
    if not text or last is None or last.role != "assistant":
        return conversation
    grown = replace(last, content=last.content + text)
    return replace(conversation, messages=(*conversation.messages[:-1], grown))


def format_error(message: str | None) -> str:
    return f"\n\n{ERROR_PREFIX} {message or UNKNOWN_ERROR}"


def append_error(conversation: Conversation, message: str | None) -> Conversation:
    """Annotate the trailing assistant message with a visible error line."""
    return append_to_assistant(conversation, format_error(message))


def finalize_title(conversation: Conversation) -> Conversation:
    if conversation.title != DEFAULT_TITLE:
        return conversation
    first_user = next((m for m in conversation.messages if m.role == "user"), None)
    if first_user is None:
        return conversation
    return replace(conversation, title=derive_title(first_user.content))


def reset_messages(
    conversation: Conversation, greeting: str | None = None
) -> Conversation:
    messages = (Message(role="assistant", content=greeting),) if greeting else ()
    return replace(conversation, messages=messages)


Listener = Callable[[Conversation], None]


class ConversationStore:
    """Holds all conversations plus the identifier of the displayed one.

    Args:
        greeting: Optional assistant message every new conversation starts with.
        cleared_message: Assistant message a cleared conversation restarts with;
            falls back to ``greeting``.
    """

    def __init__(
        self, greeting: str | None = None, cleared_message: str | None = None
    ) -> None:
        self.greeting = greeting
        self.cleared_message = cleared_message or greeting
        self._conversations: dict[str, Conversation] = {}
        self.active_id: str | None = None
        self._listeners: list[Listener] = []

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._conversations

    def __len__(self) -> int:
        return len(self._conversations)

    def get(self, conversation_id: str) -> Conversation:
        return self._conversations[conversation_id]

    @property
    def active(self) -> Conversation | None:
        if self.active_id is None:
            return None
        return self._conversations.get(self.active_id)

    def list_conversations(self) -> list[Conversation]:
        """Conversations, newest first."""
        return sorted(
            self._conversations.values(), key=lambda c: c.created_at, reverse=True
        )

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _commit(self, conversation: Conversation) -> Conversation:
        self._conversations[conversation.id] = conversation
        for listener in self._listeners:
            listener(conversation)
        return conversation

    def add(self, conversation: Conversation, set_active: bool = False) -> Conversation:
        self._commit(conversation)
        if set_active or self.active_id is None:
            self.active_id = conversation.id
        return conversation

    def create(
        self, title: str = DEFAULT_TITLE, set_active: bool = True
    ) -> Conversation:
        conversation = reset_messages(Conversation(title=title), self.greeting)
        return self.add(conversation, set_active=set_active)

    def select(self, conversation_id: str) -> Conversation:
        conversation = self.get(conversation_id)
        self.active_id = conversation_id
        return conversation

    def delete(self, conversation_id: str) -> None:
        self._conversations.pop(conversation_id, None)
        if self.active_id == conversation_id:
            remaining = self.list_conversations()
            self.active_id = remaining[0].id if remaining else None

    def update(
        self, conversation_id: str, fn: Callable[[Conversation], Conversation]
    ) -> Conversation | None:
        """Apply ``fn`` to the latest snapshot; no-op if the id is gone."""
        current = self._conversations.get(conversation_id)
        if current is None:
            return None
        updated = fn(current)
        if updated is current:
            return current
        return self._commit(updated)
