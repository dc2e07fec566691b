"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Claude Code hook integration.
Writes the global hook scripts and registers them in ~/.claude/settings.json.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .fsutil import file_exists, remove_file, write_file
from .paths import (
    HOOK_AUTO_GUARD, HOOK_CHECK_UPDATE, HOOK_FILES, HOOK_STATUSLINE, HydraPaths,
)
from .settings import HookCommands, SettingsRepository


logger = logging.getLogger(__name__)

# hook file -> (hydra_cc.hooks module, description, fallback statement)
HOOK_SPECS = {
    HOOK_CHECK_UPDATE: ('check_update', 'SessionStart update check', 'pass'),
    HOOK_STATUSLINE: ('statusline', 'status line',
                      'sys.stdout.buffer.write("\\U0001F432 Hydra".encode("utf-8"))'),
    HOOK_AUTO_GUARD: ('auto_guard', 'PostToolUse changed-file tracker', 'pass'),
}


@dataclass
class FileResult:
    """Outcome of writing or removing one file."""
    display: str
    dest: Path
    success: bool
    error: Optional[str] = None


def render_hook_script(name: str, python: str) -> str:
    """
    Launcher script for one hook.

    The interpreter path is baked in so the host can run the hook from any
    working directory. The script always exits 0, including when the package
    has been removed.
    """
    module, description, fallback = HOOK_SPECS[name]
    return f'''#!{python}
# Hail Hydra - {description}
# Generated by hail-hydra-cc {__version__}; do not edit.
import sys

try:
    from hydra_cc.hooks.{module} import main
except Exception:
    try:
        {fallback}
    except Exception:
        pass
    sys.exit(0)

try:
    main()
except Exception:
    pass
sys.exit(0)
'''


class HookIntegration:
    """
    Install Claude Code hook components into the global root.

    Sets up:
    - ~/.claude/hooks/hydra-*.py - hook launcher scripts
    - ~/.claude/settings.json - SessionStart, PostToolUse and statusLine entries
    """

    def __init__(self, paths: HydraPaths, python: Optional[str] = None):
        self.paths = paths
        self.python = python or sys.executable
        self.settings = SettingsRepository(paths.settings_path)

    def command_for(self, name: str) -> str:
        return f'"{self.python}" "{self.paths.hook_path(name)}"'

    @property
    def commands(self) -> HookCommands:
        return HookCommands(
            check_update=self.command_for(HOOK_CHECK_UPDATE),
            auto_guard=self.command_for(HOOK_AUTO_GUARD),
            statusline=self.command_for(HOOK_STATUSLINE),
        )

    def install_hooks(self) -> List[FileResult]:
        """Write every hook script, overwriting and marking executable."""
        results = []
        for name in HOOK_FILES:
            dest = self.paths.hook_path(name)
            try:
                write_file(dest, render_hook_script(name, self.python), executable=True)
                results.append(FileResult(f'hooks/{name}', dest, True))
            except OSError as e:
                logger.debug("Hook write failed for %s", dest, exc_info=True)
                results.append(FileResult(f'hooks/{name}', dest, False, str(e)))
        return results

    def register(self):
        """Merge hook entries into settings.json. Returns (status line configured, load error)."""
        return self.settings.register(self.commands)

    def remove_hooks(self) -> List[FileResult]:
        """Delete the hook scripts that are present."""
        results = []
        for name in HOOK_FILES:
            dest = self.paths.hook_path(name)
            if not file_exists(dest):
                continue
            try:
                remove_file(dest)
                results.append(FileResult(f'hooks/{name}', dest, True))
            except OSError as e:
                results.append(FileResult(f'hooks/{name}', dest, False, str(e)))
        return results

    def deregister(self) -> bool:
        return self.settings.deregister()

    def hook_status(self) -> Dict[str, bool]:
        return {name: file_exists(self.paths.hook_path(name)) for name in HOOK_FILES}
