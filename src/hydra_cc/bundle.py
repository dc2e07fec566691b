"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Bundled framework files.

Everything the installer writes ships inside the package under files/,
so installing works offline and content is never generated at write time.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from . import __version__


FILES_DIR = Path(__file__).parent / 'files'

# (key, model, role) in display order
AGENTS: List[Tuple[str, str, str]] = [
    ('hydra-scout', 'Haiku', 'Codebase exploration'),
    ('hydra-runner', 'Haiku', 'Test execution & validation'),
    ('hydra-scribe', 'Haiku', 'Documentation writing'),
    ('hydra-coder', 'Sonnet', 'Code implementation'),
    ('hydra-analyst', 'Sonnet', 'Code review & debugging'),
    ('hydra-guard', 'Haiku', 'Auto-protection & safety'),
    ('hydra-git', 'Haiku', 'Git operations'),
]

REFERENCES = ['routing-guide', 'model-capabilities']

COMMANDS = ['update', 'status', 'help', 'config', 'guard', 'quiet', 'verbose']


@dataclass(frozen=True)
class AgentInfo:
    key: str
    model: str
    role: str
    content: str

    @property
    def display(self) -> str:
        return f"{self.key} ({self.model})"


@dataclass(frozen=True)
class Bundle:
    """The complete set of assets, as opaque text keyed by name."""
    agents: Tuple[AgentInfo, ...]
    skill: str
    references: Dict[str, str] = field(default_factory=dict)
    commands: Dict[str, str] = field(default_factory=dict)
    version: str = __version__


def _read(files_dir: Path, rel_path: str) -> str:
    return (files_dir / rel_path).read_text(encoding='utf-8')


def load_bundle(files_dir: Optional[Path] = None) -> Bundle:
    """Read the bundled files. Raises OSError if the package is incomplete."""
    files_dir = Path(files_dir) if files_dir else FILES_DIR

    agents = tuple(
        AgentInfo(key, model, role, _read(files_dir, f'agents/{key}.md'))
        for key, model, role in AGENTS
    )
    references = {name: _read(files_dir, f'references/{name}.md') for name in REFERENCES}
    commands = {name: _read(files_dir, f'commands/hydra/{name}.md') for name in COMMANDS}

    return Bundle(
        agents=agents,
        skill=_read(files_dir, 'SKILL.md'),
        references=references,
        commands=commands,
    )
