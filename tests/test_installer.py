"""Tests for install, uninstall and status."""
import json
import shutil

import pytest

from conftest import FAKE_PYTHON, snapshot
from hydra_cc.bundle import AGENTS, COMMANDS, REFERENCES
from hydra_cc.paths import HOOK_FILES, SCOPE_BOTH, SCOPE_GLOBAL, SCOPE_LOCAL
from hydra_cc.settings import POST_TOOL_USE, SESSION_START, SettingsDocument


MANIFEST_SIZE = len(AGENTS) + 1 + len(REFERENCES) + len(COMMANDS) + 1


def load_settings(paths):
    return json.loads(paths.settings_path.read_text())


class TestInstall:

    def test_global_install_writes_everything(self, installer, paths):
        report = installer.install(SCOPE_GLOBAL)

        assert not report.cancelled
        assert not report.any_failed
        for record in installer.manifest_for(paths.global_base):
            assert record.dest.read_text(encoding='utf-8') == record.content
        for name in HOOK_FILES:
            assert paths.hook_path(name).exists()
        assert not paths.local_root.exists()

    def test_global_install_registers_settings(self, installer, paths):
        installer.install(SCOPE_GLOBAL)

        doc = SettingsDocument(load_settings(paths))
        assert len(doc.owned_entries(SESSION_START)) == 1
        assert len(doc.owned_entries(POST_TOOL_USE)) == 1
        assert doc.status_line['command'] == (
            f'"{FAKE_PYTHON}" "{paths.hook_path("hydra-statusline.py")}"'
        )

    def test_version_marker(self, installer, paths, bundle):
        installer.install(SCOPE_GLOBAL)
        marker = paths.global_root / 'skills' / 'hydra' / 'VERSION'
        assert marker.read_text() == bundle.version + '\n'

    def test_hook_scripts_are_executable(self, installer, paths):
        installer.install(SCOPE_GLOBAL)
        for name in HOOK_FILES:
            assert paths.hook_path(name).stat().st_mode & 0o111

    def test_install_is_idempotent(self, installer, paths):
        installer.install(SCOPE_BOTH)
        first_global = snapshot(paths.global_root)
        first_local = snapshot(paths.local_root)

        installer.install(SCOPE_BOTH)

        assert snapshot(paths.global_root) == first_global
        assert snapshot(paths.local_root) == first_local

    def test_local_scope_still_sets_up_global_hooks(self, installer, paths):
        report = installer.install(SCOPE_LOCAL)

        assert [base.scope for base, _ in report.roots] == [SCOPE_LOCAL]
        assert len(report.roots[0][1]) == MANIFEST_SIZE
        assert not (paths.global_root / 'agents').exists()
        for name in HOOK_FILES:
            assert paths.hook_path(name).exists()
        assert paths.settings_path.exists()

    def test_both_scope_writes_both_roots(self, installer, paths):
        report = installer.install(SCOPE_BOTH)

        assert [base.scope for base, _ in report.roots] == [SCOPE_GLOBAL, SCOPE_LOCAL]
        assert (paths.global_root / 'agents' / 'hydra-coder.md').exists()
        assert (paths.local_root / 'agents' / 'hydra-coder.md').exists()

    def test_confirm_not_asked_on_fresh_install(self, installer):
        asked = []
        installer.install(SCOPE_GLOBAL, confirm_overwrite=lambda: asked.append(1) or True)
        assert asked == []

    def test_confirm_asked_once_when_files_exist(self, installer):
        installer.install(SCOPE_BOTH)
        asked = []
        installer.install(SCOPE_BOTH, confirm_overwrite=lambda: asked.append(1) or True)
        assert asked == [1]

    def test_declined_overwrite_changes_nothing(self, installer, paths):
        installer.install(SCOPE_GLOBAL)
        agent = paths.global_root / 'agents' / 'hydra-scout.md'
        agent.write_text('edited by hand')
        before = snapshot(paths.global_root)

        report = installer.install(SCOPE_GLOBAL, confirm_overwrite=lambda: False)

        assert report.cancelled
        assert report.roots == []
        assert snapshot(paths.global_root) == before

    def test_one_failure_does_not_stop_the_rest(self, installer, paths):
        # A directory where a file should go makes that one write fail
        blocked = paths.global_root / 'agents' / 'hydra-runner.md'
        blocked.mkdir(parents=True)

        report = installer.install(SCOPE_GLOBAL)

        assert report.any_failed
        assert [r.display for r in report.failures] == ['hydra-runner (Haiku)']
        assert report.failures[0].error
        assert (paths.global_root / 'agents' / 'hydra-git.md').exists()
        assert (paths.global_root / 'skills' / 'hydra' / 'VERSION').exists()
        assert len(report.hook_results) == len(HOOK_FILES)

    def test_user_status_line_is_reported(self, installer, paths):
        paths.global_root.mkdir(parents=True)
        paths.settings_path.write_text(json.dumps({
            'statusLine': {'type': 'command', 'command': 'my-status'},
        }))

        report = installer.install(SCOPE_GLOBAL)

        assert report.status_line_configured is False
        assert load_settings(paths)['statusLine']['command'] == 'my-status'

    def test_unreadable_settings_is_reported(self, installer, paths):
        paths.global_root.mkdir(parents=True)
        paths.settings_path.write_text('{oops')

        report = installer.install(SCOPE_GLOBAL)

        assert report.settings_load_error
        assert (paths.global_root / 'settings.json.bak').read_text() == '{oops'

    def test_settings_failure_is_reported_not_raised(self, installer, paths):
        # A directory in place of settings.json can be neither read nor backed up
        paths.settings_path.mkdir(parents=True)

        report = installer.install(SCOPE_LOCAL)

        assert report.settings_error
        assert report.any_failed
        assert report.failures == []
        assert len(report.roots[0][1]) == MANIFEST_SIZE
        assert (paths.local_root / 'agents' / 'hydra-scout.md').exists()
        assert all(r.success for r in report.hook_results)
        assert paths.settings_path.is_dir()

    def test_unbacked_unreadable_settings_are_left_alone(self, installer, paths, monkeypatch):
        paths.global_root.mkdir(parents=True)
        original = '{"model": "opus", "permissions": {"allow": []},}'
        paths.settings_path.write_text(original)

        def refuse(src, dst, **kwargs):
            raise PermissionError(13, 'Permission denied', str(dst))

        monkeypatch.setattr(shutil, 'copy2', refuse)
        report = installer.install(SCOPE_GLOBAL)

        assert 'left unchanged' in report.settings_error
        assert paths.settings_path.read_text() == original
        assert not (paths.global_root / 'settings.json.bak').exists()

    def test_unknown_scope(self, installer):
        with pytest.raises(ValueError):
            installer.install('everywhere')


class TestStatus:

    def test_nothing_installed(self, installer):
        status = installer.status()

        assert not status.global_.any_installed
        assert not status.local.any_installed
        assert status.global_.version is None
        assert not any(status.hooks.values())

    def test_reports_exact_subset(self, installer, paths):
        installer.install(SCOPE_LOCAL)
        removed = paths.local_root / 'agents' / 'hydra-analyst.md'
        removed.unlink()

        status = installer.status()
        missing = [e.record.key for e in status.local.entries if not e.installed]

        assert missing == ['hydra-analyst']
        assert status.local.version == installer.bundle.version
        assert not status.global_.any_installed
        assert all(status.hooks.values())

    def test_status_is_read_only(self, installer, paths):
        installer.install(SCOPE_GLOBAL)
        before = snapshot(paths.global_root)

        installer.status()

        assert snapshot(paths.global_root) == before
        assert not paths.local_root.exists()

    def test_entries_follow_manifest_order(self, installer, paths):
        status = installer.status()
        keys = [e.record.key for e in status.global_.entries]
        assert keys == [r.key for r in installer.manifest_for(paths.global_base)]


class TestUninstall:

    def test_nothing_to_remove(self, installer):
        report = installer.uninstall(interactive=False)
        assert report.nothing_to_remove
        assert report.removed == 0

    def test_removes_everything_hydra_owns(self, installer, paths):
        paths.global_root.mkdir(parents=True)
        paths.settings_path.write_text(json.dumps({'other': {'x': 1}}))
        installer.install(SCOPE_BOTH)
        paths.cache_path.parent.mkdir(parents=True, exist_ok=True)
        paths.cache_path.write_text('{}')

        report = installer.uninstall(interactive=False)

        assert report.failed == 0
        assert report.removed == 2 * MANIFEST_SIZE
        assert report.hooks_removed == len(HOOK_FILES)
        assert report.cache_removed
        assert report.settings_cleaned
        assert installer.removal_targets() == []
        assert not any(installer.status().hooks.values())
        assert load_settings(paths) == {'other': {'x': 1}}

    def test_prunes_empty_hydra_dirs(self, installer, paths):
        installer.install(SCOPE_GLOBAL)
        installer.uninstall(interactive=False)

        assert not (paths.global_root / 'skills' / 'hydra').exists()
        assert not (paths.global_root / 'commands' / 'hydra').exists()

    def test_leaves_user_files_alone(self, installer, paths):
        installer.install(SCOPE_GLOBAL)
        user_agent = paths.global_root / 'agents' / 'my-agent.md'
        user_agent.write_text('mine')

        installer.uninstall(interactive=False)

        assert user_agent.read_text() == 'mine'

    def test_declined_removal_changes_nothing(self, installer, paths):
        installer.install(SCOPE_GLOBAL)
        before = snapshot(paths.global_root)
        seen = []

        def decline(targets):
            seen.extend(targets)
            return False

        report = installer.uninstall(interactive=True, confirm_removal=decline)

        assert report.cancelled
        assert len(seen) == MANIFEST_SIZE
        assert snapshot(paths.global_root) == before

    def test_interactive_needs_callback(self, installer):
        installer.install(SCOPE_GLOBAL)
        with pytest.raises(ValueError):
            installer.uninstall(interactive=True)

    def test_partial_install_is_removed(self, installer, paths):
        installer.install(SCOPE_LOCAL)
        (paths.local_root / 'skills' / 'hydra' / 'SKILL.md').unlink()

        report = installer.uninstall(interactive=False)

        assert report.removed == MANIFEST_SIZE - 1
        assert not paths.local_root.joinpath('agents', 'hydra-scout.md').exists()
