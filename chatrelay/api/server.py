"""ASGI entrypoint for the chat relay.

This module is a thin shim that delegates to create_app().
"""

from chatrelay.api.app import create_app

app = create_app()
