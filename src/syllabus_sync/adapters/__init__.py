"""Adapters - I/O implementations of ports."""

from .google_calendar import GoogleCalendarAdapter, AuthenticationError
from .openai_chat import OpenAIChatService, LLMError
from .pdf_text import PdfTextExtractor

__all__ = [
    "GoogleCalendarAdapter",
    "AuthenticationError",
    "OpenAIChatService",
    "LLMError",
    "PdfTextExtractor",
]
