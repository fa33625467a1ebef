"""
Async filesystem helpers.

Blocking file operations run in worker threads via asyncio.to_thread so the
event loop stays free. A missing file is a normal outcome for reads, deletes
and signatures; every other OSError propagates.
"""

import asyncio
import os
import uuid
from pathlib import Path


async def ensure_directory(directory: Path) -> None:
    """Create a directory (and parents) if it does not exist."""
    await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)


def _write_atomic(file_path: Path, contents: str) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = file_path.parent / f".{file_path.name}.{uuid.uuid4().hex}"
    try:
        with open(temp_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(contents)
        os.replace(temp_path, file_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


async def write_file_atomic(file_path: Path, contents: str) -> None:
    """
    Write contents to a hidden sibling temp file, then rename it over file_path.

    Readers see either the old file or the complete new one, never a partial write.
    """
    await asyncio.to_thread(_write_atomic, file_path, contents)


def _read_if_exists(file_path: Path) -> str | None:
    try:
        with open(file_path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None


async def read_file_if_exists(file_path: Path) -> str | None:
    """Read a UTF-8 file, returning None when it does not exist."""
    return await asyncio.to_thread(_read_if_exists, file_path)


def _delete_if_exists(file_path: Path) -> bool:
    try:
        file_path.unlink()
    except FileNotFoundError:
        return False
    return True


async def delete_if_exists(file_path: Path) -> bool:
    """Remove a file; returns False when it was already gone."""
    return await asyncio.to_thread(_delete_if_exists, file_path)


def _list_files(directory: Path) -> list[Path]:
    try:
        names = os.listdir(directory)
    except FileNotFoundError:
        return []
    return [directory / name for name in sorted(names) if not name.startswith(".")]


async def list_files(directory: Path) -> list[Path]:
    """Non-hidden entries of a directory sorted by name; empty when the directory is absent."""
    return await asyncio.to_thread(_list_files, directory)


def _file_signature(file_path: Path) -> int | None:
    try:
        return file_path.stat().st_mtime_ns
    except FileNotFoundError:
        return None


async def get_file_signature(file_path: Path) -> int | None:
    """Modification time in nanoseconds, or None when the file is gone."""
    return await asyncio.to_thread(_file_signature, file_path)
