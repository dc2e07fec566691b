"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Command-line interface with Click.
"""

import logging
import sys
import traceback
from typing import Optional

import click

from . import __version__
from .bootstrap import HydraInstaller
from .display import (
    show_cancelled, show_install_report, show_logo, show_permission_hint,
    show_removal_plan, show_status_table, show_uninstall_report,
)
from .errors import UserCancelled
from .paths import SCOPE_BOTH, SCOPE_GLOBAL, SCOPE_LOCAL
from .prompts import confirm_overwrite, confirm_removal, run_prompts


ACTION_STATUS = 'status'
ACTION_UNINSTALL = 'uninstall'


def run(action: Optional[str], yes: bool = False, installer: Optional[HydraInstaller] = None) -> int:
    """
    Run one action and return the exit code.

    ``action`` is a scope, 'status', 'uninstall', or None for the
    interactive prompts.
    """
    installer = installer or HydraInstaller()

    if action == ACTION_STATUS:
        show_status_table(installer.status())
        return 0

    if action == ACTION_UNINSTALL:
        def confirm(targets):
            show_removal_plan(targets)
            return confirm_removal(targets)

        report = installer.uninstall(interactive=not yes, confirm_removal=confirm)
        if report.cancelled:
            show_cancelled('Uninstall')
            return 0
        show_uninstall_report(report)
        return 1 if report.failed else 0

    scope = action or run_prompts()
    if scope is None:
        show_cancelled()
        return 0

    report = installer.install(scope, confirm_overwrite=None if yes else confirm_overwrite)
    if report.cancelled:
        show_cancelled()
        return 0
    show_install_report(report)
    return 1 if report.any_failed else 0


@click.command(
    context_settings={'help_option_names': ['-h', '--help']},
    epilog="""
\b
Examples:
  hail-hydra-cc              Interactive installation (recommended)
  hail-hydra-cc --global     Install globally - no prompts
  hail-hydra-cc --local      Install locally  - no prompts
  hail-hydra-cc --both       Install both     - no prompts
  hail-hydra-cc --status     Check installation status
  hail-hydra-cc --uninstall  Remove all Hydra files

\b
What gets installed:
  ~/.claude/agents/              7 Hydra agent .md files
  ~/.claude/skills/hydra/        SKILL.md, references and VERSION
  ~/.claude/commands/hydra/      /hydra:* slash commands
  ~/.claude/hooks/               update check, status line, auto-guard
""",
)
@click.version_option(__version__, '-v', '--version', prog_name='hail-hydra-cc')
@click.option('--global', 'global_', is_flag=True, help='Skip prompts, install to ~/.claude/ (all projects)')
@click.option('--local', 'local', is_flag=True, help='Skip prompts, install to ./.claude/ (this project)')
@click.option('--both', is_flag=True, help='Skip prompts, install to both locations')
@click.option('--uninstall', is_flag=True, help='Remove all Hydra files from global and local locations')
@click.option('--status', is_flag=True, help="Show what's currently installed and where")
@click.option('--yes', '-y', is_flag=True, help='Answer yes to overwrite and removal confirmations')
@click.option('--debug', is_flag=True, envvar='HYDRA_DEBUG', help='Show debug logging and full tracebacks')
def cli(global_, local, both, uninstall, status, yes, debug):
    """
    Hail Hydra - multi-headed speculative execution framework for Claude Code.

    Installs Hydra agents, skill, commands and hooks for Claude Code.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    flags = [
        ('--global', global_, SCOPE_GLOBAL),
        ('--local', local, SCOPE_LOCAL),
        ('--both', both, SCOPE_BOTH),
        ('--uninstall', uninstall, ACTION_UNINSTALL),
        ('--status', status, ACTION_STATUS),
    ]
    selected = [(name, action) for name, flag, action in flags if flag]
    if len(selected) > 1:
        names = ', '.join(name for name, _ in selected)
        click.secho(f"\n  ✖ Error: {names} cannot be combined\n", fg='red', err=True)
        sys.exit(1)

    show_logo()
    action = selected[0][1] if selected else None

    try:
        code = run(action, yes=yes)
    except (UserCancelled, click.Abort):
        show_cancelled()
        code = 0
    except PermissionError as e:
        click.secho(f"\n  ✖ Permission denied: {e}", fg='red', err=True)
        show_permission_hint(action)
        click.echo()
        code = 1
    except Exception as e:
        click.secho(f"\n  ✖ Error: {e}\n", fg='red', err=True)
        if debug:
            click.echo(traceback.format_exc(), err=True)
        code = 1

    sys.exit(code)


def main():
    cli()


if __name__ == '__main__':
    main()
