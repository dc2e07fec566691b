"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Terminal output for the installer.
"""

from typing import List, Optional, Tuple

import click

from . import __version__
from .bootstrap import InstallReport, LocationStatus, StatusReport, UninstallReport
from .claude_integration import FileResult
from .manifest import AssetRecord, KIND_AGENT, KIND_COMMAND, KIND_REFERENCE, KIND_SKILL
from .paths import BaseRoot, SCOPE_LOCAL


LOGO_TOP = r"""
  _   _ __   __ ____   ____      _
 | | | |\ \ / /|  _ \ |  _ \    / \
 | |_| | \ V / | | | || |_) |  / _ \ """

LOGO_BOT = r""" |  _  |  | |  | |_| ||  _ <  / ___ \
 |_| |_|  |_|  |____/ |_| \_\/_/   \_\ """

DRAGON = '\U0001F409'
DIVIDER = '  ' + '─' * 50


def show_logo():
    click.secho(LOGO_TOP, fg='cyan')
    click.secho(LOGO_BOT, fg='green')
    click.echo()
    click.secho(f"  Hail Hydra v{__version__}", bold=True)
    click.secho("  A multi-headed speculative execution framework for Claude Code.", fg='bright_black')
    click.echo()


def show_install_header(label: str):
    click.secho(f"  Installing to {label}...", bold=True)
    click.echo()


def show_file_result(result: FileResult, verb: str = 'Installed'):
    if result.success:
        click.secho(f"    ✔ {verb} {result.display}", fg='green')
    else:
        click.secho(f"    ✖ Failed: {result.display} - {result.error}", fg='red')


def show_install_report(report: InstallReport):
    for base, results in report.roots:
        show_install_header(base.label)
        for result in results:
            show_file_result(result)
        click.echo()

    click.secho("  Hooks (~/.claude/hooks/)", bold=True)
    for result in report.hook_results:
        show_file_result(result)

    if report.settings_error:
        click.secho(f"    ✖ Failed: settings.json - {report.settings_error}", fg='red')
    else:
        if report.settings_load_error:
            click.secho(f"    ! settings.json could not be read ({report.settings_load_error});"
                        " a backup was kept as settings.json.bak", fg='yellow')
        click.secho("    ✔ Registered hooks in settings.json", fg='green')
        if report.status_line_configured:
            click.secho("    ✔ Configured status line", fg='green')
        else:
            click.secho("    = Kept your existing status line", fg='bright_black')
    click.echo()

    if report.any_failed:
        click.secho("  ⚠ Some files failed to install. Check errors above.", fg='yellow')
        errors = [r.error for r in report.failures] + [report.settings_error]
        if any(_permission_denied(e) for e in errors):
            show_permission_hint(report.scope)
        click.echo()
    else:
        show_install_complete()


def show_install_complete():
    click.secho(f"  {DRAGON} Hail Hydra! Heads deployed and ready.", fg='cyan', bold=True)
    click.echo()
    click.secho("  Launch Claude Code to start using the framework.", fg='bright_black')
    click.echo()


def show_permission_hint(scope: Optional[str] = None):
    """Remediation for permission errors. Hooks and settings.json are global for every scope."""
    if scope == SCOPE_LOCAL:
        click.secho("  Permission denied. Hooks and settings.json are always written to"
                    " ~/.claude/;", fg='red')
        click.secho("    check that it is owned by you and writable.", fg='bright_black')
        return
    click.secho("  Permission denied. Try:", fg='red')
    click.secho("    hail-hydra-cc --local    (project install, no elevated rights needed)",
                fg='bright_black')


def show_cancelled(what: str = 'Installation'):
    click.secho(f"\n  {what} cancelled.\n", fg='bright_black')


def show_removal_plan(targets: List[Tuple[BaseRoot, AssetRecord]]):
    click.echo("\n  The following Hydra files will be removed:\n")
    for base, record in targets:
        click.secho(f"    [{base.label}] {record.display}", fg='bright_black')
    click.echo()


def show_uninstall_report(report: UninstallReport):
    if report.nothing_to_remove:
        click.secho("\n  No Hydra files found. Nothing to remove.\n", fg='bright_black')
        return

    click.secho(f"  ✔ Removed {report.removed} file(s)", fg='green')
    if report.hooks_removed:
        click.secho(f"  ✔ Removed {report.hooks_removed} hook script(s)", fg='green')
    if report.cache_removed:
        click.secho("  ✔ Removed update cache", fg='green')
    if report.settings_cleaned:
        click.secho("  ✔ Cleaned settings.json", fg='green')
    for result in report.failures:
        click.secho(f"  ✖ Failed to remove {result.display}: {result.error}", fg='red')

    click.echo()
    if report.failed == 0:
        click.secho(f"  {DRAGON} All heads severed. Hydra sleeps.", fg='cyan', bold=True)
    else:
        click.secho(f"  ⚠ {report.removed} removed, {report.failed} failed.", fg='yellow')
    click.echo()


def show_status_table(status: StatusReport):
    click.echo()
    click.secho("  Installation Status", bold=True)
    click.echo(DIVIDER)

    for location in (status.global_, status.local):
        _show_location(location)

    click.echo()
    click.secho("  Hooks (~/.claude/hooks/)", bold=True)
    for name, present in status.hooks.items():
        _show_line(name, present)
    click.echo()


def _show_location(location: LocationStatus):
    click.echo()
    title = location.base.label
    if location.version:
        title += f"  v{location.version}"
    click.secho(f"  {title}", bold=True)

    if not location.any_installed:
        click.secho("    (not installed)", fg='bright_black')
        return

    for entry in location.of_kind(KIND_AGENT):
        record = entry.record
        dot = click.style('●', fg='green' if record.model == 'Haiku' else 'blue')
        click.echo(f"    {dot} " + _line_text(record.display, entry.installed))

    for kind in (KIND_SKILL, KIND_REFERENCE, KIND_COMMAND):
        for entry in location.of_kind(kind):
            _show_line(entry.record.display, entry.installed)


def _line_text(name: str, installed: bool) -> str:
    if installed:
        return click.style(f"✔ {name}", fg='green')
    return click.style(f"✖ {name} (not installed)", fg='bright_black')


def _show_line(name: str, installed: bool):
    click.echo("    " + _line_text(name, installed))


def _permission_denied(error: Optional[str]) -> bool:
    return bool(error) and 'Permission denied' in error
