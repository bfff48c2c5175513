"""Best-effort JSON persistence for the client's conversation list.

Failures never propagate: a store that cannot be saved keeps working in
memory, and an unreadable file loads as an empty list.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from chatrelay.client.conversation import Conversation, ConversationStore, Message
from chatrelay.utils.logger import client_logger


def conversation_to_dict(conversation: Conversation) -> dict[str, Any]:
    return {
        "id": conversation.id,
        "title": conversation.title,
        "created_at": conversation.created_at,
        "messages": [m.to_dict() for m in conversation.messages],
    }


def conversation_from_dict(data: dict[str, Any]) -> Conversation | None:
    conversation_id = data.get("id")
    if not isinstance(conversation_id, str):
        return None
    messages = tuple(
        Message(role=m["role"], content=m["content"])
        for m in data.get("messages") or []
        if isinstance(m, dict)
        and m.get("role") in ("user", "assistant")
        and isinstance(m.get("content"), str)
    )
    kwargs: dict[str, Any] = {"id": conversation_id, "messages": messages}
    if isinstance(data.get("title"), str):
        kwargs["title"] = data["title"]
    if isinstance(data.get("created_at"), str):
        kwargs["created_at"] = data["created_at"]
    return Conversation(**kwargs)


class ConversationFileStorage:
    def __init__(self, path: Path) -> None:
        self.path = path

    def load_into(self, store: ConversationStore) -> int:
        """Load saved conversations into ``store``; return how many were loaded."""
        if not self.path.exists():
            return 0
        try:
            index = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as e:
            client_logger.warning(
                "Ignoring unreadable conversations file",
                path=str(self.path),
                error=str(e),
            )
            return 0
        if not isinstance(index, dict):
            return 0

        loaded = 0
        for item in index.get("conversations") or []:
            conversation = (
                conversation_from_dict(item) if isinstance(item, dict) else None
            )
            if conversation is not None:
                store.add(conversation)
                loaded += 1

        active_id = index.get("active_id")
        if isinstance(active_id, str) and active_id in store:
            store.select(active_id)
        return loaded

    def save(self, store: ConversationStore) -> bool:
        """Atomically write the store to disk; return False on failure."""
        index = {
            "active_id": store.active_id,
            "conversations": [
                conversation_to_dict(c) for c in store.list_conversations()
            ],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            data = json.dumps(index, ensure_ascii=False, indent=2)
            tmp_path.write_text(data, encoding="utf-8")
            tmp_path.replace(self.path)
            return True
        except Exception as e:
            client_logger.warning(
                "Failed to save conversations", path=str(self.path), error=str(e)
            )
            return False
