"""Chat client: SSE parsing, conversation state and the turn controller."""

from .conversation import Conversation, ConversationStore, Message
from .sse_parser import Frame, parse_event_stream
from .turn import TurnController

__all__ = [
    "Conversation",
    "ConversationStore",
    "Frame",
    "Message",
    "TurnController",
    "parse_event_stream",
]
