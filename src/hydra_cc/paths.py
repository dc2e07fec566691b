"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Install locations and fixed filenames.
"""

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


SCOPE_GLOBAL = 'global'
SCOPE_LOCAL = 'local'
SCOPE_BOTH = 'both'
SCOPES = (SCOPE_GLOBAL, SCOPE_LOCAL, SCOPE_BOTH)

HOOK_CHECK_UPDATE = 'hydra-check-update.py'
HOOK_STATUSLINE = 'hydra-statusline.py'
HOOK_AUTO_GUARD = 'hydra-auto-guard.py'
HOOK_FILES = (HOOK_CHECK_UPDATE, HOOK_STATUSLINE, HOOK_AUTO_GUARD)

# A settings.json command is ours iff it runs one of our hook scripts, under
# its current .py name or the .js name of earlier releases.
HOOK_MARKER = re.compile(
    r'(?:^|[\s"\'/\\])hydra-(?:check-update|statusline|auto-guard)\.(?:py|js)(?=$|[\s"\'])'
)

SKILL_DIR = Path('skills') / 'hydra'
COMMANDS_DIR = Path('commands') / 'hydra'
VERSION_FILE = SKILL_DIR / 'VERSION'
CACHE_FILE = Path('cache') / 'update-check.json'


@dataclass(frozen=True)
class BaseRoot:
    """One installation target."""
    scope: str  # global or local
    path: Path
    label: str


@dataclass(frozen=True)
class HydraPaths:
    """
    Resolved filesystem locations.

    The global root also owns the hooks directory, the settings document and
    the update cache. The local root owns none of these.
    """
    global_root: Path
    local_root: Path
    tracking_dir: Path

    @classmethod
    def resolve(cls, home: Optional[Path] = None, cwd: Optional[Path] = None) -> 'HydraPaths':
        """
        Resolve paths for the current user and working directory.

        ``$CLAUDE_CONFIG_DIR`` overrides ``~/.claude`` unless ``home`` is given.
        """
        if home is not None:
            global_root = Path(home) / '.claude'
        elif os.environ.get('CLAUDE_CONFIG_DIR'):
            global_root = Path(os.environ['CLAUDE_CONFIG_DIR']).expanduser()
        else:
            global_root = Path.home() / '.claude'

        local_root = Path(cwd if cwd is not None else os.getcwd()) / '.claude'
        tracking_dir = Path(tempfile.gettempdir()) / 'hydra-guard'
        return cls(global_root=global_root, local_root=local_root, tracking_dir=tracking_dir)

    @property
    def hooks_dir(self) -> Path:
        return self.global_root / 'hooks'

    @property
    def settings_path(self) -> Path:
        return self.global_root / 'settings.json'

    @property
    def cache_path(self) -> Path:
        return self.global_root / CACHE_FILE

    @property
    def global_base(self) -> BaseRoot:
        return BaseRoot(SCOPE_GLOBAL, self.global_root, 'Global (~/.claude/)')

    @property
    def local_base(self) -> BaseRoot:
        return BaseRoot(SCOPE_LOCAL, self.local_root, 'Local (./.claude/)')

    def bases_for(self, scope: str):
        """Base roots implied by an install scope."""
        if scope == SCOPE_GLOBAL:
            return [self.global_base]
        if scope == SCOPE_LOCAL:
            return [self.local_base]
        if scope == SCOPE_BOTH:
            return [self.global_base, self.local_base]
        raise ValueError(f"Unknown scope: {scope!r} (expected one of {', '.join(SCOPES)})")

    def hook_path(self, name: str) -> Path:
        return self.hooks_dir / name
