"""Producer/Auditor pipeline over a JSON-mode chat-completions service."""

__version__ = "0.1.0"
