from .groq_client import LLMError, chat_json, transcribe

__all__ = ["LLMError", "chat_json", "transcribe"]
