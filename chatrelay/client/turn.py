"""Turn controller: one user request and its streamed assistant reply.

A conversation is either idle or sending. A send is accepted only while the
conversation is idle; it appends the user message and an empty assistant
placeholder in one store update, routes streamed deltas into that
placeholder, and always returns the conversation to idle, whether the stream
ends normally or fails.
"""

from __future__ import annotations

import httpx

from chatrelay.client.conversation import (
    ConversationStore,
    Message,
    append_error,
    append_to_assistant,
    begin_turn,
    finalize_title,
    outgoing_history,
    reset_messages,
)
from chatrelay.client.sse_parser import Frame, parse_event_stream
from chatrelay.domain.events import DeltaEvent, ErrorEvent
from chatrelay.errors import RelayResponseError
from chatrelay.utils.logger import client_logger

CHAT_STREAM_PATH = "/api/chat/stream"


class TurnController:
    """Runs chat turns against the relay for conversations held in a store.

    The in-flight guard is keyed by conversation id, so switching the displayed
    conversation does not release or bypass it.
    """

    def __init__(
        self, store: ConversationStore, http: httpx.AsyncClient, base_url: str
    ) -> None:
        self.store = store
        self._http = http
        self.base_url = base_url.rstrip("/")
        self._in_flight: set[str] = set()

    @property
    def stream_url(self) -> str:
        return f"{self.base_url}{CHAT_STREAM_PATH}"

    def is_sending(self, conversation_id: str) -> bool:
        return conversation_id in self._in_flight

    async def send(self, conversation_id: str, text: str) -> bool:
        """Run one turn; return False if the send was not accepted.

        Rejected sends (blank input, unknown conversation, turn already in
        flight) leave the conversation untouched.
        """
        content = text.strip()
        if not content or conversation_id in self._in_flight:
            return False
        if conversation_id not in self.store:
            client_logger.warning("Send to unknown conversation", id=conversation_id)
            return False

        user_message = Message(role="user", content=content)
        history = outgoing_history(self.store.get(conversation_id), user_message)

        self._in_flight.add(conversation_id)
        self.store.update(conversation_id, lambda c: begin_turn(c, user_message))

        completed = False
        try:
            completed = await self._stream(conversation_id, history)
        except Exception as e:
            client_logger.warning(
                "Chat turn failed", error_type=type(e).__name__, error=str(e)
            )
            message = str(e) or type(e).__name__
            self.store.update(conversation_id, lambda c: append_error(c, message))
        finally:
            self._in_flight.discard(conversation_id)

        if completed:
            self.store.update(conversation_id, finalize_title)
        return True

    async def _stream(
        self, conversation_id: str, history: list[dict[str, str]]
    ) -> bool:
        """Route frames into the conversation; False if the relay sent an error."""
        errored = False
        async with self._http.stream(
            "POST", self.stream_url, json={"messages": history}
        ) as response:
            if not response.is_success:
                raise RelayResponseError(status_code=response.status_code)

            async for frame in parse_event_stream(response.aiter_bytes()):
                if not self._dispatch(conversation_id, frame):
                    errored = True
        return not errored

    def _dispatch(self, conversation_id: str, frame: Frame) -> bool:
        event = frame.decode()
        if isinstance(event, DeltaEvent):
            self.store.update(
                conversation_id, lambda c: append_to_assistant(c, event.delta)
            )
        elif isinstance(event, ErrorEvent):
            client_logger.info("Relay reported error", error=event.error)
            self.store.update(conversation_id, lambda c: append_error(c, event.error))
            return False
        # done frames carry no action: the end of the byte stream ends the turn
        return True

    def clear(self, conversation_id: str) -> bool:
        """Reset a conversation's messages; refused while a turn is in flight."""
        if conversation_id in self._in_flight or conversation_id not in self.store:
            return False
        self.store.update(
            conversation_id, lambda c: reset_messages(c, self.store.cleared_message)
        )
        return True
