"""Streaming chat relay between a local Ollama service and chat clients."""

__version__ = "0.1.0"
