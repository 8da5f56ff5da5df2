from __future__ import annotations

"""
Archive Writer.

Packs a materialized directory into a zip archive. Entries are written in
sorted order with paths relative to the source directory, so two packs of
the same tree list identical entries. Empty directories are kept as
explicit `dir/` entries.
"""

import io
import logging
import os
import zipfile
from typing import IO, Optional, Union

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def pack_directory(source_dir: str) -> bytes:
    """
    Zip a directory in memory.

    Args:
        source_dir: Directory whose contents become the archive root.

    Returns:
        bytes: Archive content.
    """
    buffer = io.BytesIO()
    _write_zip(source_dir, buffer)
    return buffer.getvalue()


def write_archive(source_dir: str, archive_path: str) -> str:
    """
    Zip a directory to a file.

    The archive may live inside `source_dir`; it is never added to itself.

    Args:
        source_dir: Directory whose contents become the archive root.
        archive_path: Destination .zip path (parent directories are created).

    Returns:
        str: Absolute path of the written archive.

    Raises:
        OSError: If the archive cannot be written.
    """
    archive_path = os.path.abspath(archive_path)
    os.makedirs(os.path.dirname(archive_path), exist_ok=True)
    _write_zip(source_dir, archive_path, skip=archive_path)
    logger.info(f"Archive written: {archive_path}")
    return archive_path

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _write_zip(
        source_dir: str,
        target: Union[str, IO[bytes]],
        skip: Optional[str] = None,
) -> None:
    source_dir = os.path.abspath(source_dir)
    entries = 0

    with zipfile.ZipFile(
            target, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESSION_LEVEL
    ) as zf:
        for current, dirs, files in os.walk(source_dir):
            dirs.sort()
            rel_dir = os.path.relpath(current, source_dir)

            if rel_dir != "." and not dirs and not files:
                zf.writestr(_arc_name(rel_dir) + "/", b"")
                entries += 1
                continue

            for name in sorted(files):
                full = os.path.join(current, name)
                if skip and os.path.abspath(full) == skip:
                    continue
                zf.write(full, _arc_name(os.path.relpath(full, source_dir)))
                entries += 1

    logger.debug(f"Packed {entries} entries from {source_dir}")


def _arc_name(rel_path: str) -> str:
    return rel_path.replace(os.sep, "/")
