"""Ports - interfaces/protocols for external dependencies."""

from .calendar_service import CalendarService
from .llm_service import LLMService
from .text_extractor import TextExtractor

__all__ = [
    "CalendarService",
    "LLMService",
    "TextExtractor",
]
