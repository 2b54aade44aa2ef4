"""Filesystem writes for scaffolding.

``write_file`` writes one file below a root directory, creating whatever
ancestors are missing. ``copy_tree`` mirrors a static directory. Both are
best-effort: a failure part-way leaves earlier files on disk.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from ..errors import FilesystemError
from ..models import FileWrite


def write_file(root: str | Path, relative_path: str | Path, content: str) -> Path:
    """Write *content* to ``root / relative_path``, overwriting any existing file.

    Raises:
        FilesystemError: If a directory cannot be created or the file cannot
            be written.
    """
    target = Path(root) / relative_path
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError.from_os_error(exc, target) from exc
    return target


def copy_tree(src: str | Path, dest: str | Path) -> list[Path]:
    """Recursively mirror *src* into *dest*.

    Subdirectories are recreated and files copied byte-for-byte. Existing
    directories are reused and existing files overwritten.

    Returns:
        The destination paths of every copied file, in traversal order.

    Raises:
        FilesystemError: ``not_found`` if *src* is missing,
            ``permission_denied`` if *dest* cannot be written.
    """
    src_path = Path(src)
    dest_path = Path(dest)
    if not src_path.is_dir():
        raise FilesystemError(
            FilesystemError.NOT_FOUND, src_path, f"Template folder not found: {src_path}"
        )

    try:
        dest_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError.from_os_error(exc, dest_path) from exc

    copied: list[Path] = []
    for entry in sorted(src_path.iterdir()):
        target = dest_path / entry.name
        if entry.is_dir():
            copied.extend(copy_tree(entry, target))
            continue
        try:
            shutil.copyfile(entry, target)
        except OSError as exc:
            raise FilesystemError.from_os_error(exc, target) from exc
        copied.append(target)
    return copied


def ensure_dirs(root: str | Path, relative_dirs: list[str]) -> None:
    """Create each of *relative_dirs* under *root* (no-op for existing ones)."""
    for rel in relative_dirs:
        target = Path(root) / rel
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError.from_os_error(exc, target) from exc


# ---------------------------------------------------------------------------
# Async wrappers
# ---------------------------------------------------------------------------


async def write_file_async(root: str | Path, relative_path: str | Path, content: str) -> Path:
    """Run :func:`write_file` in a worker thread."""
    return await asyncio.to_thread(write_file, root, relative_path, content)


async def copy_tree_async(src: str | Path, dest: str | Path) -> list[Path]:
    """Run :func:`copy_tree` in a worker thread."""
    return await asyncio.to_thread(copy_tree, src, dest)


async def ensure_dirs_async(root: str | Path, relative_dirs: list[str]) -> None:
    """Run :func:`ensure_dirs` in a worker thread."""
    await asyncio.to_thread(ensure_dirs, root, relative_dirs)


async def flush(writes: list[FileWrite]) -> list[Path]:
    """Write each ``FileWrite`` in order and return the written paths."""
    written: list[Path] = []
    for item in writes:
        written.append(await write_file_async(item.path.parent, item.path.name, item.content))
    return written
