"""Exception types shared by the relay server and the chat client."""

from __future__ import annotations


class ChatRelayError(Exception):
    """Base class for relay errors that carry a user-facing message."""


class UpstreamUnavailableError(ChatRelayError):
    """The model service could not be reached or answered with a failure."""

    DEFAULT_MESSAGE = (
        "Ollama did not respond. Check that it is running and that the model exists."
    )

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or self.DEFAULT_MESSAGE)
        self.status_code = status_code


class RelayResponseError(ChatRelayError):
    """The relay endpoint answered without a usable event stream."""

    DEFAULT_MESSAGE = (
        "Could not open the stream (the backend did not respond correctly)."
    )

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or self.DEFAULT_MESSAGE)
        self.status_code = status_code
