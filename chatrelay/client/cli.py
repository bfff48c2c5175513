"""Interactive terminal chat client for the relay.

Type a message and press Enter to send it. Lines starting with ``/`` are
commands: /new, /list, /switch <n>, /delete, /clear, /quit.
"""

from __future__ import annotations

import asyncio
import sys
from argparse import ArgumentParser
from pathlib import Path

import httpx

from chatrelay.client.conversation import Conversation, ConversationStore
from chatrelay.client.storage import ConversationFileStorage
from chatrelay.client.turn import TurnController
from chatrelay.config import settings

GREETING = "Hi 👋 I'm your local ChatGPT clone. How can I help?"
CLEARED_MESSAGE = "Chat cleared ✅ What can I help you with now?"
DEFAULT_STORAGE_PATH = Path.home() / ".chatrelay" / "conversations.json"


class TerminalRenderer:
    """Prints the growing assistant message of the active conversation."""

    def __init__(self, store: ConversationStore, out=None) -> None:
        self.store = store
        self.out = out or sys.stdout
        self._printed: tuple[str, int, int] | None = None

    def begin(self, conversation_id: str) -> None:
        conversation = self.store.get(conversation_id)
        # The placeholder is appended next, at this index
        self._printed = (conversation_id, len(conversation.messages) + 1, 0)

    def end(self, newline: bool = True) -> None:
        self._printed = None
        if newline:
            self.out.write("\n")
            self.out.flush()

    def __call__(self, conversation: Conversation) -> None:
        if self._printed is None:
            return
        conversation_id, index, length = self._printed
        if conversation.id != conversation_id or len(conversation.messages) <= index:
            return
        content = conversation.messages[index].content
        if len(content) > length:
            self.out.write(content[length:])
            self.out.flush()
            self._printed = (conversation_id, index, len(content))

    def show(self, conversation: Conversation) -> None:
        self.out.write(f"== {conversation.title} ==\n")
        for message in conversation.messages:
            label = "You" if message.role == "user" else "Assistant"
            self.out.write(f"[{label}] {message.content}\n")
        self.out.flush()


def _print_list(store: ConversationStore) -> None:
    for n, conversation in enumerate(store.list_conversations(), start=1):
        marker = "*" if conversation.id == store.active_id else " "
        print(f"{marker} {n}. {conversation.title}")


async def run_chat(base_url: str, storage_path: Path | None) -> None:
    store = ConversationStore(greeting=GREETING, cleared_message=CLEARED_MESSAGE)
    storage = ConversationFileStorage(storage_path) if storage_path else None
    if storage is None or storage.load_into(store) == 0:
        store.create()

    renderer = TerminalRenderer(store)
    store.subscribe(renderer)

    timeout = httpx.Timeout(None, connect=settings.upstream_connect_timeout)
    async with httpx.AsyncClient(timeout=timeout) as http:
        controller = TurnController(store, http, base_url)
        if store.active is not None:
            renderer.show(store.active)

        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            command, _, arg = line.strip().partition(" ")

            if command == "/quit":
                break
            elif command == "/new":
                renderer.show(store.create())
            elif command == "/list":
                _print_list(store)
            elif command == "/switch":
                conversations = store.list_conversations()
                if arg.isdigit() and 1 <= int(arg) <= len(conversations):
                    renderer.show(store.select(conversations[int(arg) - 1].id))
                else:
                    print("Usage: /switch <n> (see /list)")
            elif command == "/delete":
                if store.active_id is not None:
                    store.delete(store.active_id)
                if store.active is None:
                    store.create()
                renderer.show(store.active)
            elif command == "/clear":
                if store.active_id and controller.clear(store.active_id):
                    renderer.show(store.active)
            elif store.active_id is not None:
                conversation_id = store.active_id
                renderer.begin(conversation_id)
                accepted = await controller.send(conversation_id, line)
                renderer.end(newline=accepted)

            if storage is not None:
                storage.save(store)


def main(argv: list[str] | None = None) -> None:
    parser = ArgumentParser(description="Chat with a local model through the relay")
    parser.add_argument(
        "--url",
        default=None,
        help="Relay base URL. Overrides CHATRELAY_URL env var.",
    )
    parser.add_argument(
        "--storage",
        default=str(DEFAULT_STORAGE_PATH),
        help="Conversations file (best effort). Pass an empty string to disable.",
    )
    args = parser.parse_args(argv)

    base_url = args.url or settings.relay_url
    storage_path = Path(args.storage).expanduser() if args.storage else None
    try:
        asyncio.run(run_chat(base_url, storage_path))
    except KeyboardInterrupt:
        print("\nBye")


if __name__ == "__main__":
    main()
