"""Bundle files of one localization folder.

Bundles are named ``<prefix><tag><extension>`` (``app_fr.arb`` by default).
Everything between the prefix and the extension is the language tag, so
compound tags such as ``app_pt_BR.arb`` map to ``pt_BR``.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional

from autol10n.core.storage import read_text

logger = logging.getLogger(__name__)

# Characters allowed in a language tag used as a file name fragment
TAG_DISALLOWED = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_tag(raw: str) -> str:
    """Drop every character outside ``[a-zA-Z0-9_-]``."""
    return TAG_DISALLOWED.sub("", raw)


class BundleCatalog:
    """Lookup of bundle files by language tag inside one folder."""

    def __init__(self, folder: Path, prefix: str = "app_", extension: str = ".arb"):
        self.folder = Path(folder)
        self.prefix = prefix
        self.extension = extension

    def tag_from_filename(self, name: str) -> Optional[str]:
        """Get the language tag encoded in a bundle file name.

        Returns:
            The tag, or None if ``name`` does not follow the naming convention
        """
        if not (name.startswith(self.prefix) and name.endswith(self.extension)):
            return None
        tag = name[len(self.prefix): len(name) - len(self.extension)]
        if not tag or sanitize_tag(tag) != tag:
            return None
        return tag

    def path_for(self, tag: str) -> Path:
        return self.folder / f"{self.prefix}{tag}{self.extension}"

    def list_tags(self) -> List[str]:
        """List the tags of all bundle files in the folder, sorted."""
        tags = []
        for path in self.folder.iterdir():
            if not path.is_file():
                continue
            tag = self.tag_from_filename(path.name)
            if tag is not None:
                tags.append(tag)
        tags.sort()
        logger.debug(f"Detected languages: {tags}")
        return tags

    def read(self, tag: str) -> str:
        """Read a bundle's text, or ``"{}"`` if the file does not exist."""
        return read_text(self.path_for(tag), default="{}")

    def exists(self, tag: str) -> bool:
        return self.path_for(tag).is_file()
