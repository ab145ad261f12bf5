"""Resource bundle handling.

This package provides:
- BundleCatalog: bundle file naming and lookup by language tag
- merge_bundles: existing-wins merge of two bundle documents
"""

from .catalog import BundleCatalog, sanitize_tag
from .merger import Bundle, dump_bundle, merge_bundles, parse_bundle

__all__ = [
    "BundleCatalog",
    "sanitize_tag",
    "Bundle",
    "dump_bundle",
    "merge_bundles",
    "parse_bundle",
]
