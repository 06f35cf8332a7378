"""Apply a merge to a file on disk."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path

from scaffold_merge.config import PARSE_ERROR_SENTINEL
from scaffold_merge.merge import MergeOptions, merge_content
from scaffold_merge.schemas import MergeResult

logger = logging.getLogger(__name__)

# Process umask, read once at import; os.umask can only be queried by setting it.
_UMASK = os.umask(0)
os.umask(_UMASK)


async def merge_into_file(
    path: Path,
    generated: str,
    *,
    options: MergeOptions | None = None,
    dry_run: bool = False,
    encoding: str = "utf-8",
) -> MergeResult:
    """Merge generated content into the file at ``path``.

    A missing file is treated as empty, so the generated content is written
    as-is. The merged content replaces the file atomically.

    Args:
        path: Target file; its suffix selects the merge strategy.
        generated: Freshly generated content for the file.
        options: Structured merge options. Uses defaults if None.
        dry_run: If True, compute the merge without touching the file.
        encoding: Text encoding of the file.

    Returns:
        The MergeResult that was (or, for a dry run, would be) written.

    Raises:
        UnsupportedFormatError: If the file suffix has no merge strategy.
    """
    existing = await asyncio.to_thread(_read_existing, path, encoding)
    result = merge_content(path, existing, generated, options=options)

    if PARSE_ERROR_SENTINEL in result.preserved:
        logger.warning("%s could not be parsed; generated content was not merged", path)

    if dry_run:
        return result

    await asyncio.to_thread(write_atomic, path, result.content, encoding)
    logger.info(
        "Wrote %s (%d preserved, %d added)",
        path,
        len(result.preserved),
        len(result.added),
    )
    return result


def _read_existing(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except FileNotFoundError:
        return ""


def write_atomic(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to ``path`` through a temporary file and ``os.replace``.

    Parent directories are created as needed. An existing file keeps its
    permission bits; a new file gets the usual ``0o666`` minus the umask.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
        if path.exists():
            shutil.copymode(path, tmp_name)
        else:
            os.chmod(tmp_name, 0o666 & ~_UMASK)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
