"""Errors raised by the localization pipeline."""

from pathlib import Path
from typing import Optional

from autol10n.utils.text import safe_truncate


class L10nError(Exception):
    """Base class for all autol10n errors."""


class BundleFolderNotFound(L10nError):
    """The configured bundle folder does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Bundle folder not found: {path}")


class SourceFileNotFound(L10nError):
    """The first input file, needed for language detection, does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Source file not found: {path}")


class SourceFileUnreadable(L10nError):
    """The first input file exists but cannot be read as UTF-8 text."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read source file {path}: {cause}")


class MissingPromptTemplate(L10nError):
    """A system/user prompt pair could not be loaded."""

    def __init__(self, name: str, system_path: Path, user_path: Path):
        self.name = name
        self.system_path = system_path
        self.user_path = user_path
        super().__init__(f"Missing prompt {name}: {system_path} or {user_path}")


class InvalidModelResponse(L10nError):
    """The model answered in a shape the pipeline cannot use."""

    def __init__(self, reason: str, response: Optional[str] = None):
        self.reason = reason
        self.response = response
        message = reason
        if response is not None:
            message = f"{reason}: {safe_truncate(response, 200)!r}"
        super().__init__(message)


class BundleFormatError(L10nError, ValueError):
    """Text that should hold a bundle is not a JSON object."""


class UnknownProviderError(L10nError, ValueError):
    """No backend is registered for the requested provider."""
