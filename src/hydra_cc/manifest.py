"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

File manifest: what should exist under one base root.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .bundle import Bundle
from .paths import BaseRoot, COMMANDS_DIR, SKILL_DIR, VERSION_FILE


KIND_AGENT = 'agent'
KIND_SKILL = 'skill'
KIND_REFERENCE = 'reference'
KIND_COMMAND = 'command'
KIND_VERSION = 'version'


@dataclass(frozen=True)
class AssetRecord:
    """One file the installer owns. Immutable once built."""
    kind: str  # agent, skill, reference, command, version
    key: str
    display: str
    content: str
    dest: Path
    model: Optional[str] = None  # agents only


def build_manifest(bundle: Bundle, base: BaseRoot) -> List[AssetRecord]:
    """
    Build the ordered manifest for ``base``.

    Pure: no filesystem access, and the same bundle and root always give an
    equal list. Order is agents, skill, references, commands, version marker.
    """
    root = Path(base.path)
    manifest = [
        AssetRecord(
            kind=KIND_AGENT,
            key=agent.key,
            display=agent.display,
            content=agent.content,
            dest=root / 'agents' / f'{agent.key}.md',
            model=agent.model,
        )
        for agent in bundle.agents
    ]

    manifest.append(AssetRecord(
        kind=KIND_SKILL,
        key='SKILL.md',
        display='SKILL.md',
        content=bundle.skill,
        dest=root / SKILL_DIR / 'SKILL.md',
    ))

    for key, content in bundle.references.items():
        manifest.append(AssetRecord(
            kind=KIND_REFERENCE,
            key=key,
            display=f'references/{key}.md',
            content=content,
            dest=root / SKILL_DIR / 'references' / f'{key}.md',
        ))

    for key, content in bundle.commands.items():
        manifest.append(AssetRecord(
            kind=KIND_COMMAND,
            key=key,
            display=f'/hydra:{key}',
            content=content,
            dest=root / COMMANDS_DIR / f'{key}.md',
        ))

    manifest.append(AssetRecord(
        kind=KIND_VERSION,
        key='VERSION',
        display='VERSION',
        content=bundle.version + '\n',
        dest=root / VERSION_FILE,
    ))

    return manifest


def hydra_dirs(base: BaseRoot) -> List[Path]:
    """Directories owned by Hydra under ``base``, deepest first."""
    root = Path(base.path)
    return [root / SKILL_DIR / 'references', root / SKILL_DIR, root / COMMANDS_DIR]
