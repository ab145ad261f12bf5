"""Prompt templates for model operations."""

from .loader import PromptLoader, PromptTemplate

__all__ = ["PromptLoader", "PromptTemplate"]
