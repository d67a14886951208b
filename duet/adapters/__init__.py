from duet.adapters.http_adapter import HttpTransport
from duet.adapters.llm_base import ChatMessage, ChatTransport
from duet.adapters.mock_adapter import MockTransport
from duet.adapters.openai_adapter import OpenAISdkTransport, is_official_host

__all__ = [
    "ChatMessage",
    "ChatTransport",
    "HttpTransport",
    "MockTransport",
    "OpenAISdkTransport",
    "is_official_host",
]
