"""Shared utilities."""

from .text import one_line, preview_json, safe_truncate

__all__ = ["safe_truncate", "preview_json", "one_line"]
