"""Voicedoc: speech-to-summary proxy in front of a local Ollama server."""

__version__ = "0.1.0"
