"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Auto-guard hook (PostToolUse, matcher Write|Edit|MultiEdit).

Records each changed file path in a per-session list for hydra-guard to scan
later. The scan itself is not run here; that would slow down every edit.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from ..fsutil import read_text_or_none
from ..paths import HydraPaths
from . import dig, read_payload


logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]')


def session_file(tracking_dir: Path, session_id: Any) -> Path:
    """Tracking file for a session; ids are reduced to a safe filename."""
    name = _UNSAFE_CHARS.sub('_', str(session_id)) if session_id else ''
    if name.strip('.') == '':
        name = 'unknown'
    return Path(tracking_dir) / f'{name}.txt'


def changed_path(payload: Dict[str, Any]) -> Optional[str]:
    path = dig(payload, 'tool_input', 'file_path') or dig(payload, 'tool_input', 'path')
    if not isinstance(path, str) or not path or '\n' in path:
        return None
    return path


def tracked_files(tracking_dir: Path, session_id: Any) -> List[str]:
    text = read_text_or_none(session_file(tracking_dir, session_id)) or ''
    return [line for line in text.split('\n') if line]


def record_changed_file(payload: Dict[str, Any], tracking_dir: Path) -> Optional[Path]:
    """
    Append the payload's file path to the session list unless already there.

    Returns:
        The tracking file, or None if the payload carried no path
    """
    file_path = changed_path(payload)
    if file_path is None:
        return None

    tracking_file = session_file(tracking_dir, payload.get('session_id'))
    tracking_file.parent.mkdir(parents=True, exist_ok=True)

    if file_path not in tracked_files(tracking_dir, payload.get('session_id')):
        with tracking_file.open('a', encoding='utf-8') as f:
            f.write(file_path + '\n')
    return tracking_file


def main(stdin: Optional[TextIO] = None):
    try:
        record_changed_file(read_payload(stdin), HydraPaths.resolve().tracking_dir)
    except Exception:
        logger.debug("Auto-guard tracking skipped", exc_info=True)
