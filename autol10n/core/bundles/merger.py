"""Non-destructive merge of resource bundles.

A bundle is a JSON object mapping keys to strings. Values are never
interpreted: ICU plural/select syntax and ARB ``@key`` metadata objects pass
through unchanged.

Precedence is one-directional: content already on disk (curated or edited by
hand) always wins over freshly extracted or translated content. Only keys the
existing bundle does not have are taken from the incoming side.
"""

import json
import logging
from typing import Any, Dict

from autol10n.exceptions import BundleFormatError

logger = logging.getLogger(__name__)

Bundle = Dict[str, Any]


def parse_bundle(text: str) -> Bundle:
    """Parse bundle text into a dict.

    Empty or whitespace-only text is the empty bundle.

    Raises:
        BundleFormatError: If the text is not JSON or not a JSON object
    """
    if not text or not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BundleFormatError(f"Invalid bundle JSON: {e}") from e

    if not isinstance(data, dict):
        raise BundleFormatError(
            f"Bundle must be a JSON object, got {type(data).__name__}"
        )
    return data


def dump_bundle(data: Bundle) -> str:
    """Serialize a bundle with 2-space indentation, keeping key order."""
    return json.dumps(data, ensure_ascii=False, indent=2)


def merge_bundles(existing: str, incoming: str) -> str:
    """Merge ``incoming`` into ``existing``; existing keys always win.

    Existing keys keep their on-disk order; new keys are appended in the
    order they appear in ``incoming``.

    Args:
        existing: Current bundle text (usually the file on disk)
        incoming: Newly extracted or translated bundle text

    Returns:
        The merged bundle text. If either side cannot be parsed, ``existing``
        is returned unchanged so a bad model answer never corrupts a bundle.
    """
    logger.debug("Merging bundles...")
    try:
        existing_data = parse_bundle(existing)
        incoming_data = parse_bundle(incoming)
    except BundleFormatError as e:
        logger.warning(f"Bundle merge skipped, keeping existing content: {e}")
        return existing

    merged = dict(existing_data)
    added = 0
    for key, value in incoming_data.items():
        if key not in merged:
            merged[key] = value
            added += 1

    logger.debug(
        f"Merged bundles: {len(existing_data)} existing, {added} added, "
        f"{len(incoming_data) - added} kept from existing"
    )
    return dump_bundle(merged)
