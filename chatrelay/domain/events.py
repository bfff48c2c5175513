"""Domain event types and factory for the relay's SSE protocol.

Each event maps to one named frame on the wire: the event type becomes the
SSE ``event:`` field and the remaining fields become the JSON ``data:`` payload.
The same types are used by the client to decode frames it receives.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar


class EventType(str, Enum):
    DELTA = "delta"
    DONE = "done"
    ERROR = "error"


@dataclass
class BaseEvent:
    type: ClassVar[EventType]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_sse(self) -> dict[str, str]:
        return {
            "event": self.type.value,
            "data": json.dumps(self.to_dict(), ensure_ascii=False),
        }


@dataclass
class DeltaEvent(BaseEvent):
    type: ClassVar[EventType] = EventType.DELTA
    delta: str = ""


@dataclass
class DoneEvent(BaseEvent):
    type: ClassVar[EventType] = EventType.DONE
    ok: bool = True


@dataclass
class ErrorEvent(BaseEvent):
    type: ClassVar[EventType] = EventType.ERROR
    error: str = ""


class EventFactory:
    @staticmethod
    def delta(text: str) -> DeltaEvent:
        return DeltaEvent(delta=text)

    @staticmethod
    def done() -> DoneEvent:
        return DoneEvent()

    @staticmethod
    def error(message: str) -> ErrorEvent:
        return ErrorEvent(error=message)

    @staticmethod
    def from_frame(event: str, payload: dict[str, Any]) -> BaseEvent | None:
        """Decode a parsed frame into a typed event.

        Missing or mistyped fields fall back to their defaults; unknown event
        names decode to ``None``.
        """
        if event == EventType.DELTA:
            text = payload.get("delta")
            return DeltaEvent(delta=text if isinstance(text, str) else "")
        if event == EventType.ERROR:
            message = payload.get("error")
            return ErrorEvent(error=message if isinstance(message, str) else "")
        if event == EventType.DONE:
            return DoneEvent(ok=bool(payload.get("ok", True)))
        return None
