"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Installer with install, uninstall and status support.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .bundle import Bundle, load_bundle
from .claude_integration import FileResult, HookIntegration
from .errors import ConfigReadError, FileWriteError
from .fsutil import file_exists, prune_empty_dirs, read_text_or_none, remove_file, write_file
from .manifest import AssetRecord, KIND_VERSION, build_manifest, hydra_dirs
from .paths import BaseRoot, HydraPaths


logger = logging.getLogger(__name__)


@dataclass
class InstallReport:
    scope: str
    cancelled: bool = False
    roots: List[Tuple[BaseRoot, List[FileResult]]] = field(default_factory=list)
    hook_results: List[FileResult] = field(default_factory=list)
    status_line_configured: bool = False
    settings_load_error: Optional[str] = None
    settings_error: Optional[str] = None  # settings.json could not be updated

    @property
    def failures(self) -> List[FileResult]:
        results = [r for _, root_results in self.roots for r in root_results]
        return [r for r in results + self.hook_results if not r.success]

    @property
    def any_failed(self) -> bool:
        return bool(self.failures) or self.settings_error is not None


@dataclass
class UninstallReport:
    nothing_to_remove: bool = False
    cancelled: bool = False
    removed: int = 0
    failures: List[FileResult] = field(default_factory=list)
    hooks_removed: int = 0
    cache_removed: bool = False
    settings_cleaned: bool = False

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass
class EntryStatus:
    record: AssetRecord
    installed: bool


@dataclass
class LocationStatus:
    base: BaseRoot
    entries: List[EntryStatus]
    version: Optional[str] = None

    @property
    def any_installed(self) -> bool:
        return any(e.installed for e in self.entries)

    def of_kind(self, kind: str) -> List[EntryStatus]:
        return [e for e in self.entries if e.record.kind == kind]


@dataclass
class StatusReport:
    global_: LocationStatus
    local: LocationStatus
    hooks: Dict[str, bool]


class HydraInstaller:
    """
    Install, inspect and remove the Hydra bundle.

    Usage:
        installer = HydraInstaller()
        installer.install('global', confirm_overwrite=lambda: True)
        installer.status()
        installer.uninstall(interactive=False)
    """

    def __init__(self, paths: Optional[HydraPaths] = None, bundle: Optional[Bundle] = None,
                 python: Optional[str] = None):
        self.paths = paths or HydraPaths.resolve()
        self.bundle = bundle or load_bundle()
        self.integration = HookIntegration(self.paths, python=python)

    def manifest_for(self, base: BaseRoot) -> List[AssetRecord]:
        return build_manifest(self.bundle, base)

    # =========================================================================
    # INSTALL
    # =========================================================================

    def install(self, scope: str, confirm_overwrite: Optional[Callable[[], bool]] = None) -> InstallReport:
        """
        Install the bundle to every base root implied by ``scope``.

        Args:
            scope: 'global', 'local' or 'both'
            confirm_overwrite: asked once if any destination already exists;
                None means overwriting was already agreed to

        Returns:
            InstallReport; ``cancelled`` is set if overwrite was declined, in
            which case nothing was written
        """
        bases = self.paths.bases_for(scope)
        report = InstallReport(scope=scope)
        manifests = [(base, self.manifest_for(base)) for base in bases]

        any_existing = any(file_exists(r.dest) for _, manifest in manifests for r in manifest)
        if any_existing and confirm_overwrite is not None and not confirm_overwrite():
            report.cancelled = True
            return report

        for base, manifest in manifests:
            report.roots.append((base, self._write_manifest(manifest)))

        # Global-only side effects, once per operation whatever the scope
        report.hook_results = self.integration.install_hooks()
        try:
            report.status_line_configured, report.settings_load_error = self.integration.register()
        except (ConfigReadError, OSError) as e:
            logger.debug("Settings registration failed", exc_info=True)
            report.settings_error = str(e)

        logger.debug("Install %s finished with %d failure(s)", scope, len(report.failures))
        return report

    def _write_manifest(self, manifest: List[AssetRecord]) -> List[FileResult]:
        """Write each record; one failure does not stop the rest."""
        results = []
        for record in manifest:
            try:
                self._write_record(record)
                results.append(FileResult(record.display, record.dest, True))
            except FileWriteError as e:
                results.append(FileResult(record.display, record.dest, False, str(e.cause)))
        return results

    def _write_record(self, record: AssetRecord):
        try:
            write_file(record.dest, record.content)
        except OSError as e:
            logger.debug("Write failed for %s", record.dest, exc_info=True)
            raise FileWriteError(record.dest, e) from e

    # =========================================================================
    # UNINSTALL
    # =========================================================================

    def removal_targets(self) -> List[Tuple[BaseRoot, AssetRecord]]:
        """Manifest entries from both roots that currently exist."""
        targets = []
        for base in (self.paths.global_base, self.paths.local_base):
            for record in self.manifest_for(base):
                if file_exists(record.dest):
                    targets.append((base, record))
        return targets

    def uninstall(self, interactive: bool = True,
                  confirm_removal: Optional[Callable[[List[Tuple[BaseRoot, AssetRecord]]], bool]] = None
                  ) -> UninstallReport:
        """
        Remove Hydra from both roots.

        Removes:
        - every manifest file present under ~/.claude and ./.claude
        - hook scripts from ~/.claude/hooks/
        - the update check cache
        - Hydra entries from ~/.claude/settings.json

        Args:
            interactive: if True, ``confirm_removal`` is called with the
                targets and must return True to proceed
        """
        targets = self.removal_targets()
        if not targets:
            return UninstallReport(nothing_to_remove=True)

        if interactive:
            if confirm_removal is None:
                raise ValueError("interactive uninstall needs a confirm_removal callback")
            if not confirm_removal(targets):
                return UninstallReport(cancelled=True)

        report = UninstallReport()
        for _, record in targets:
            try:
                remove_file(record.dest)
                report.removed += 1
            except OSError as e:
                report.failures.append(FileResult(record.display, record.dest, False, str(e)))

        for result in self.integration.remove_hooks():
            if result.success:
                report.hooks_removed += 1
            else:
                report.failures.append(result)

        cache_path = self.paths.cache_path
        if file_exists(cache_path):
            try:
                remove_file(cache_path)
                report.cache_removed = True
            except OSError as e:
                report.failures.append(FileResult('update cache', cache_path, False, str(e)))

        report.settings_cleaned = self.integration.deregister()

        for base in (self.paths.global_base, self.paths.local_base):
            prune_empty_dirs(*hydra_dirs(base))

        return report

    # =========================================================================
    # STATUS
    # =========================================================================

    def location_status(self, base: BaseRoot) -> LocationStatus:
        entries = []
        version = None
        for record in self.manifest_for(base):
            installed = file_exists(record.dest)
            entries.append(EntryStatus(record, installed))
            if record.kind == KIND_VERSION and installed:
                text = read_text_or_none(record.dest)
                version = text.strip() if text else None
        return LocationStatus(base, entries, version)

    def status(self) -> StatusReport:
        """Compare both manifests with what is on disk. Read-only."""
        return StatusReport(
            global_=self.location_status(self.paths.global_base),
            local=self.location_status(self.paths.local_base),
            hooks=self.integration.hook_status(),
        )
