"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Interactive prompts.
"""

from typing import List, Optional, Tuple

import click

from .bundle import AGENTS
from .errors import UserCancelled
from .manifest import AssetRecord
from .paths import BaseRoot, SCOPE_BOTH, SCOPE_GLOBAL, SCOPE_LOCAL


SCOPE_CHOICES = [
    ('1', SCOPE_GLOBAL, 'Global  (~/.claude/) - available in all projects'),
    ('2', SCOPE_LOCAL, 'Local   (./.claude/) - this project only'),
    ('3', SCOPE_BOTH, 'Both    - install to both locations'),
]


def _confirm(message: str, default: bool) -> bool:
    try:
        return click.confirm(f"  {message}", default=default)
    except click.Abort:
        raise UserCancelled(message)


def run_prompts() -> Optional[str]:
    """
    Ask where to install and confirm.

    Returns:
        'global', 'local' or 'both', or None if the user declined
    """
    click.secho("  Where would you like to install?", bold=True)
    for number, _, text in SCOPE_CHOICES:
        click.echo(f"    {number}) {text}")

    try:
        choice = click.prompt(
            "  Choice",
            type=click.Choice([number for number, _, _ in SCOPE_CHOICES]),
            default='1',
            show_choices=False,
        )
    except click.Abort:
        raise UserCancelled('scope prompt')
    scope = next(value for number, value, _ in SCOPE_CHOICES if number == choice)

    click.echo()
    click.secho(f"  This will install {len(AGENTS)} Hydra agents + SKILL.md + reference docs + commands.",
                bold=True)
    click.echo()
    click.echo("  Agents:")
    for key, model, role in AGENTS:
        dot = click.style('●', fg='green' if model == 'Haiku' else 'blue')
        name = click.style(f"{key} ({model})".ljust(22), bold=True)
        click.echo(f"    {dot} {name} - {click.style(role, fg='bright_black')}")
    click.echo()

    if not _confirm('Proceed?', default=True):
        return None
    click.echo()
    return scope


def confirm_overwrite() -> bool:
    return _confirm('Hydra files already installed. Overwrite?', default=True)


def confirm_removal(targets: List[Tuple[BaseRoot, AssetRecord]]) -> bool:
    return _confirm(f'Remove {len(targets)} Hydra file(s)?', default=False)
