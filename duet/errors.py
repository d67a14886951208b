from __future__ import annotations


class DeepSeekError(Exception):
    """Base class for every classified failure of the chat-completions transport."""

    retryable = False

    def user_message(self) -> str:
        return str(self)

    def tip(self) -> str:
        return "Check the DeepSeek API documentation for more details."


class ServerBusy(DeepSeekError):
    retryable = True

    def __init__(self) -> None:
        super().__init__("DeepSeek servers are currently busy. Please try again in a few moments.")

    def tip(self) -> str:
        return "Try again in a few minutes when server load is lower."


class NetworkError(DeepSeekError):
    retryable = True

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Network connection failed: {message}")

    def user_message(self) -> str:
        return "Network connection failed. Please check your internet connection and try again."

    def tip(self) -> str:
        return "Check your internet connection and firewall settings."


class Timeout(DeepSeekError):
    def __init__(self, seconds: int) -> None:
        self.seconds = seconds
        super().__init__(f"Request timed out after {seconds} seconds")

    def user_message(self) -> str:
        return f"Request timed out after {self.seconds} seconds. The server might be overloaded."

    def tip(self) -> str:
        return "The server might be overloaded. Try again later."


class ApiError(DeepSeekError):
    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"API error ({status}): {message}")

    def user_message(self) -> str:
        if self.status == 429:
            return "Rate limit exceeded. Please wait a moment before trying again."
        if self.status == 503:
            return "Service temporarily unavailable. Please try again later."
        if self.status in (502, 504):
            return "Server gateway error. Please try again in a few moments."
        return f"API error ({self.status}). Please try again later."

    def tip(self) -> str:
        if self.status == 401:
            return "Check your DEEPSEEK_API_KEY environment variable."
        if self.status == 403:
            return "Your API key may not have sufficient permissions."
        if self.status == 429:
            return "You've hit the rate limit. Wait before trying again."
        return super().tip()


class ParseError(DeepSeekError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Failed to parse response: {message}")

    def user_message(self) -> str:
        return "Failed to parse server response. Please try again."

    def tip(self) -> str:
        return "The server response was unexpected. Try rephrasing your query."


class ConfigError(DeepSeekError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Configuration error: {message}")

    def tip(self) -> str:
        return "Check your environment variables and configuration."


class AgentError(Exception):
    """Stage failure that did not come from the transport."""


class DecodeError(AgentError, ValueError):
    """The model reply (or a task file) is not JSON of the expected shape."""


class ArtifactPathError(AgentError):
    pass
