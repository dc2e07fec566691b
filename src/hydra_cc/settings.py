"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Shared ~/.claude/settings.json handling.

The document belongs to the user; Hydra owns only the entries in
hooks.SessionStart, hooks.PostToolUse and statusLine whose command runs one
of our hook scripts (HOOK_MARKER). Everything else must come back out exactly
as it went in.

Loading is tolerant by contract: a missing file, unreadable file, invalid
JSON or non-object top level all load as an empty document, with the reason
kept on ``load_error``.
"""

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigReadError
from .fsutil import atomic_write_json
from .paths import HOOK_MARKER


logger = logging.getLogger(__name__)

SESSION_START = 'SessionStart'
POST_TOOL_USE = 'PostToolUse'
OWNED_EVENTS = (SESSION_START, POST_TOOL_USE)

AUTO_GUARD_MATCHER = 'Write|Edit|MultiEdit'


@dataclass(frozen=True)
class HookCommands:
    """Shell commands for the three registered hooks."""
    check_update: str
    auto_guard: str
    statusline: str


def is_owned_command(command: Any) -> bool:
    return isinstance(command, str) and HOOK_MARKER.search(command) is not None


def is_owned_entry(entry: Any) -> bool:
    """Check if a hook registration entry belongs to Hydra."""
    if not isinstance(entry, dict):
        return False
    hooks = entry.get('hooks', [])
    if not isinstance(hooks, list):
        return False
    return any(isinstance(h, dict) and is_owned_command(h.get('command')) for h in hooks)


def is_owned_status_line(status_line: Any) -> bool:
    return isinstance(status_line, dict) and is_owned_command(status_line.get('command'))


def _read_document(path: Path) -> Dict[str, Any]:
    try:
        text = Path(path).read_text(encoding='utf-8')
    except FileNotFoundError:
        raise ConfigReadError(f"{path} does not exist")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"could not read {path}: {e}")

    try:
        data = json.loads(text)
    except ValueError as e:
        raise ConfigReadError(f"{path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ConfigReadError(f"{path} does not contain a JSON object")
    return data


class SettingsDocument:
    """
    In-memory settings document with the owned-entry merge rules.

    All field access to the owned subtrees goes through this class, so the
    marker filter lives in one place and can be tested without a filesystem.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, load_error: Optional[str] = None):
        self.data: Dict[str, Any] = data if data is not None else {}
        self.load_error = load_error

    @classmethod
    def load(cls, path: Path) -> 'SettingsDocument':
        try:
            return cls(_read_document(path))
        except ConfigReadError as e:
            logger.debug("Starting from empty settings: %s", e)
            missing = not Path(path).exists()
            return cls({}, load_error=None if missing else str(e))

    # ------------------------------------------------------------------

    def _event_list(self, event: str) -> list:
        """Return hooks[event], coercing malformed containers to empty ones."""
        hooks = self.data.get('hooks')
        if not isinstance(hooks, dict):
            if hooks is not None:
                logger.warning("Replacing non-object 'hooks' value in settings")
            hooks = self.data['hooks'] = {}
        entries = hooks.get(event)
        if not isinstance(entries, list):
            if entries is not None:
                logger.warning("Replacing non-array hooks.%s value in settings", event)
            entries = hooks[event] = []
        return entries

    def owned_entries(self, event: str) -> list:
        hooks = self.data.get('hooks')
        if not isinstance(hooks, dict) or not isinstance(hooks.get(event), list):
            return []
        return [e for e in hooks[event] if is_owned_entry(e)]

    @property
    def status_line(self) -> Any:
        return self.data.get('statusLine')

    def merge_hooks(self, commands: HookCommands) -> bool:
        """
        Register Hydra's hooks.

        Stale Hydra entries are swept first, so calling this any number of
        times leaves exactly one owned entry per event. A user-defined status
        line is never replaced.

        Returns:
            True if statusLine was written
        """
        for event in OWNED_EVENTS:
            entries = self._event_list(event)
            entries[:] = [e for e in entries if not is_owned_entry(e)]

        self._event_list(SESSION_START).append({
            'hooks': [{'type': 'command', 'command': commands.check_update}],
        })
        self._event_list(POST_TOOL_USE).append({
            'matcher': AUTO_GUARD_MATCHER,
            'hooks': [{'type': 'command', 'command': commands.auto_guard}],
        })

        current = self.data.get('statusLine')
        if current is None or is_owned_status_line(current):
            self.data['statusLine'] = {
                'type': 'command',
                'command': commands.statusline,
                'padding': 0,
            }
            return True

        logger.debug("Leaving user-defined statusLine in place")
        return False

    def deregister(self) -> bool:
        """
        Remove every Hydra entry, dropping containers left empty.

        Returns:
            True if the document changed
        """
        modified = False
        hooks = self.data.get('hooks')

        if isinstance(hooks, dict):
            for event in OWNED_EVENTS:
                entries = hooks.get(event)
                if not isinstance(entries, list):
                    continue
                kept = [e for e in entries if not is_owned_entry(e)]
                if len(kept) < len(entries):
                    modified = True
                    if kept:
                        hooks[event] = kept
                    else:
                        del hooks[event]

            if not hooks and modified:
                del self.data['hooks']

        if is_owned_status_line(self.data.get('statusLine')):
            del self.data['statusLine']
            modified = True

        return modified

    def save(self, path: Path):
        """Rewrite the whole document in one step."""
        atomic_write_json(path, self.data)


class SettingsRepository:
    """Load, patch and save the settings document at a fixed path."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> SettingsDocument:
        return SettingsDocument.load(self.path)

    def save(self, doc: SettingsDocument):
        doc.save(self.path)

    def register(self, commands: HookCommands) -> Tuple[bool, Optional[str]]:
        """
        Merge Hydra's hooks into the document and save it.

        Returns:
            (status line configured, load error text or None)

        Raises:
            ConfigReadError: the document exists but could not be read, and
                no backup could be made; the file is left untouched
        """
        doc = self.load()
        if doc.load_error is not None and not self._backup_unreadable():
            raise ConfigReadError(
                f"{self.path} could not be read and could not be backed up, "
                f"so it was left unchanged ({doc.load_error})"
            )
        configured = doc.merge_hooks(commands)
        self.save(doc)
        return configured, doc.load_error

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + '.bak')

    def _backup_unreadable(self) -> bool:
        """Keep a copy of a document we could not parse before replacing it."""
        try:
            shutil.copy2(self.path, self.backup_path)
        except OSError as e:
            logger.warning("Could not back up unreadable settings: %s", e)
            return False
        logger.warning("Unreadable settings backed up to %s", self.backup_path)
        return True

    def deregister(self) -> bool:
        """Remove Hydra's entries. The file is only rewritten if it changed."""
        doc = self.load()
        if doc.load_error is not None or not doc.deregister():
            return False
        self.save(doc)
        return True
