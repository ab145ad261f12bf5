"""Crash-safe file writes.

Bundles and rewritten source files are replaced through a sibling temporary
file and a single rename, so a target path always holds either its previous
content or the complete new content.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

BACKUP_SUFFIX = ".bak"
TEMP_PREFIX = ".tmp-"
NEW_FILE_MODE = 0o644


def backup_path_for(path: PathLike) -> Path:
    """Get the path of the backup copy kept next to ``path``."""
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def backup_file(path: PathLike) -> Optional[Path]:
    """Copy ``path`` to ``<path>.bak`` if it exists.

    Backups are advisory: a missing source file or a failed copy is logged
    and reported as ``None``, never raised.
    """
    path = Path(path)
    if not path.exists():
        return None

    target = backup_path_for(path)
    try:
        shutil.copy2(path, target)
    except OSError as e:
        logger.warning(f"Backup of {path} failed: {e}")
        return None

    logger.debug(f"Backup created: {target}")
    return target


def atomic_write(path: PathLike, content: str, backup: bool = False) -> None:
    """Replace the content of ``path`` atomically.

    Args:
        path: Target file
        content: Complete new text content (written as UTF-8)
        backup: Copy the current file to ``<path>.bak`` first

    Raises:
        OSError: If the temporary file cannot be written or renamed. The
            target is left untouched in that case.
    """
    path = Path(path)
    if backup:
        backup_file(path)

    # Same directory as the target so the rename stays on one filesystem
    fd, tmp_name = tempfile.mkstemp(
        prefix=f"{TEMP_PREFIX}{path.name}-",
        dir=path.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600 files; keep the target's permissions
        if path.exists():
            shutil.copymode(path, tmp_name)
        else:
            os.chmod(tmp_name, NEW_FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

    logger.debug(f"File atomically updated: {path}")


def read_text(path: PathLike, default: Optional[str] = None) -> str:
    """Read a UTF-8 file, returning ``default`` when it does not exist.

    Raises:
        FileNotFoundError: If the file is missing and no default is given
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        if default is None:
            raise
        return default
