"""LLM integration package.

This package provides:
- ChatBackend / LiteLLMBackend: the "send prompts, get text" capability
- BackendFactory: backend selection from a provider string
- ModelGateway: detect_language, extract and translate operations
- Response parsing of the final-answer protocol
"""

from .backends import BackendFactory, ChatBackend, LiteLLMBackend
from .gateway import ModelGateway
from .response import (
    FINAL_ANSWER_MARKER,
    ExtractionResult,
    extract_final_answer,
    split_extraction,
    strip_wrappers,
)

__all__ = [
    "BackendFactory",
    "ChatBackend",
    "LiteLLMBackend",
    "ModelGateway",
    "FINAL_ANSWER_MARKER",
    "ExtractionResult",
    "extract_final_answer",
    "split_extraction",
    "strip_wrappers",
]
