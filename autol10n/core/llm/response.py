"""Parsing of free-text model answers.

Models are asked to reason freely and then write a final-answer marker
followed by the structured payload:

    ...reasoning, ignored...
    REPONSE FINALE :
    <JSON>
    {"greeting": "Hello"}
    </JSON>
    <dart>
    ...rewritten source...
    </dart>

Only the text after the last marker is used. For extraction answers the
payload is split once more on the source block separator.
"""

import re
from dataclasses import dataclass

from autol10n.exceptions import InvalidModelResponse

FINAL_ANSWER_MARKER = "REPONSE FINALE :"

# Opens the rewritten-source block of an extraction answer
SOURCE_SEPARATOR = "<dart>"

# Tokens wrapping answer blocks, dropped before parsing
WRAPPER_TOKENS = ("<JSON>", "</JSON>", "</dart>")

# Markdown code fence around a whole block: ```json ... ```
FENCE_PATTERN = re.compile(r"\A```[\w-]*[ \t]*\n(.*?)\n?```\Z", re.DOTALL)


@dataclass
class ExtractionResult:
    """Extraction answer split into its two parts."""

    keys_json: str
    rewritten_source: str

    @property
    def has_rewrite(self) -> bool:
        return bool(self.rewritten_source)


def extract_final_answer(raw: str, marker: str = FINAL_ANSWER_MARKER) -> str:
    """Get the text after the last final-answer marker.

    Raises:
        InvalidModelResponse: If the marker does not appear in ``raw``
    """
    head, found, answer = raw.rpartition(marker)
    if not found:
        raise InvalidModelResponse(f"Final answer marker {marker!r} not found", raw)
    return answer.strip()


def strip_fences(text: str) -> str:
    """Remove a markdown code fence enclosing the whole text."""
    text = text.strip()
    match = FENCE_PATTERN.match(text)
    if match:
        return match.group(1).strip()
    return text


def strip_wrappers(text: str) -> str:
    """Remove wrapper tokens and code fences from an answer block."""
    for token in WRAPPER_TOKENS:
        text = text.replace(token, "")
    return strip_fences(text)


def split_extraction(answer: str, separator: str = SOURCE_SEPARATOR) -> ExtractionResult:
    """Split an extraction answer into the keys JSON and the rewritten source.

    A missing separator means the model proposed no rewrite.
    """
    keys_part, _, source_part = answer.strip().partition(separator)
    return ExtractionResult(
        keys_json=strip_wrappers(keys_part),
        rewritten_source=strip_wrappers(source_part),
    )
