"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Background update check.

The SessionStart hook calls UpdateChecker.trigger(), which returns at once:
either the cache is younger than the TTL, or a detached child process is
started to do the check. The child writes ~/.claude/cache/update-check.json
and nothing else; the status line reads that file later.

Two sessions starting together can both see a stale cache and both launch a
check. Both write an equivalent result and the last write wins.
"""

import json
import logging
import subprocess
import sys
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import httpx

from . import PACKAGE_NAME
from .errors import NetworkError
from .fsutil import atomic_write_json, read_text_or_none
from .paths import HydraPaths, VERSION_FILE


logger = logging.getLogger(__name__)

UNKNOWN = 'unknown'
UPDATE_TTL_SECONDS = 3600
FETCH_TIMEOUT_SECONDS = 10.0
PYPI_URL = f'https://pypi.org/pypi/{PACKAGE_NAME}/json'


@dataclass
class UpdateCache:
    installed: str = UNKNOWN
    latest: str = UNKNOWN
    update_available: bool = False
    checked_at: int = 0  # epoch milliseconds
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data['error'] is None:
            del data['error']
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UpdateCache':
        checked_at = data.get('checked_at', 0)
        if isinstance(checked_at, bool) or not isinstance(checked_at, (int, float)):
            raise ValueError(f"checked_at is not a number: {checked_at!r}")
        return cls(
            installed=str(data.get('installed', UNKNOWN)),
            latest=str(data.get('latest', UNKNOWN)),
            update_available=bool(data.get('update_available', False)),
            checked_at=int(checked_at),
            error=data.get('error'),
        )


def read_cache(path: Path) -> Optional[UpdateCache]:
    """Read the cache file; None if it is missing or malformed."""
    text = read_text_or_none(path)
    if text is None:
        return None
    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            return None
        return UpdateCache.from_dict(data)
    except ValueError:
        return None


def fetch_latest_version(timeout: float = FETCH_TIMEOUT_SECONDS,
                         transport: Optional[httpx.BaseTransport] = None,
                         clock: Callable[[], float] = time.monotonic) -> str:
    """
    Latest published version from PyPI.

    httpx applies ``timeout`` to each connect and read separately, so the
    body is streamed against an overall deadline as well.
    """
    deadline = clock() + timeout
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            with client.stream('GET', PYPI_URL) as response:
                response.raise_for_status()
                body = b''
                for chunk in response.iter_bytes():
                    if clock() > deadline:
                        raise NetworkError(f"version lookup took longer than {timeout:g}s")
                    body += chunk
            version = json.loads(body)['info']['version']
    except httpx.HTTPError as e:
        raise NetworkError(f"version lookup failed: {e}") from e
    except (ValueError, KeyError, TypeError) as e:
        raise NetworkError(f"unexpected response from {PYPI_URL}: {e}") from e

    if not isinstance(version, str) or not version.strip():
        raise NetworkError(f"no version in response from {PYPI_URL}")
    return version.strip()


def spawn_detached():
    """Start ``python -m hydra_cc.update_check`` without waiting for it."""
    kwargs: Dict[str, Any] = {
        'stdin': subprocess.DEVNULL,
        'stdout': subprocess.DEVNULL,
        'stderr': subprocess.DEVNULL,
        'close_fds': True,
    }
    if sys.platform == 'win32':
        kwargs['creationflags'] = (
            subprocess.DETACHED_PROCESS
            | subprocess.CREATE_NEW_PROCESS_GROUP
            | subprocess.CREATE_NO_WINDOW
        )
    else:
        kwargs['start_new_session'] = True

    subprocess.Popen([sys.executable, '-m', 'hydra_cc.update_check'], **kwargs)


class UpdateChecker:
    """
    TTL-gated update check.

    The clock, the version fetch and the process launcher are injectable so
    the gate and the failure handling can be tested without real time,
    network or child processes.
    """

    def __init__(self, paths: Optional[HydraPaths] = None,
                 clock: Callable[[], float] = time.time,
                 fetch_latest: Callable[[], str] = fetch_latest_version,
                 launcher: Callable[[], None] = spawn_detached,
                 ttl_seconds: int = UPDATE_TTL_SECONDS):
        self.paths = paths or HydraPaths.resolve()
        self.clock = clock
        self.fetch_latest = fetch_latest
        self.launcher = launcher
        self.ttl_seconds = ttl_seconds

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    def is_fresh(self, cache: Optional[UpdateCache]) -> bool:
        return cache is not None and self.now_ms() - cache.checked_at < self.ttl_seconds * 1000

    def trigger(self) -> bool:
        """
        Launch a background check unless the cache is still fresh.

        Returns:
            True if a check was launched
        """
        if self.is_fresh(read_cache(self.paths.cache_path)):
            return False
        self.launcher()
        return True

    def installed_version(self) -> str:
        """Project VERSION marker first, then the global one."""
        for root in (self.paths.local_root, self.paths.global_root):
            text = read_text_or_none(root / VERSION_FILE)
            if text and text.strip():
                return text.strip()
        return UNKNOWN

    def run_check(self) -> UpdateCache:
        """
        Do the check and write the cache. Runs in the detached process.

        Failures still produce a well-formed cache entry so the TTL gate holds
        until the next hour.
        """
        installed = self.installed_version()
        try:
            latest = self.fetch_latest()
            cache = UpdateCache(
                installed=installed,
                latest=latest,
                update_available=installed != UNKNOWN and latest != installed,
                checked_at=self.now_ms(),
            )
        except Exception as e:
            logger.debug("Update check failed", exc_info=True)
            cache = UpdateCache(
                installed=installed,
                checked_at=self.now_ms(),
                error=str(e) or e.__class__.__name__,
            )

        atomic_write_json(self.paths.cache_path, cache.to_dict())
        return cache


def main():
    """Entry point of the detached process. There is nobody to report to."""
    try:
        UpdateChecker().run_check()
    except Exception:
        sys.exit(1)


if __name__ == '__main__':
    main()
