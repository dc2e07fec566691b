"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Filesystem probe and write helpers.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional


def file_exists(path: Path) -> bool:
    """Membership test. Unreadable or inaccessible paths count as absent."""
    try:
        return Path(path).exists()
    except OSError:
        return False


def read_text_or_none(path: Path) -> Optional[str]:
    """Read a UTF-8 file, or None if it cannot be read."""
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError):
        return None


def write_file(path: Path, content: str, executable: bool = False):
    """Write content, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    if executable:
        path.chmod(0o755)


def atomic_write_text(path: Path, text: str):
    """Replace ``path`` in one step via a temp file in the same directory."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            dir=str(path.parent),
            prefix=path.name + '.',
            suffix='.tmp',
            delete=False,
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(str(temp_path), str(path))
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()


def dump_json(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False) + '\n'


def atomic_write_json(path: Path, obj: Any):
    atomic_write_text(path, dump_json(obj))


def remove_file(path: Path):
    """
    Delete a file.

    A file that vanished before we got to it is already satisfied.
    Other OSErrors propagate.
    """
    try:
        Path(path).unlink()
    except FileNotFoundError:
        pass


def prune_empty_dirs(*dirs: Path):
    """Remove each directory if it exists and is empty, in the given order."""
    for d in dirs:
        try:
            d.rmdir()
        except OSError:
            continue
