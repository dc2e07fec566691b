"""Tests for the background update check."""
import io
import json

import httpx
import pytest

from hydra_cc.errors import NetworkError
from hydra_cc.hooks import check_update
from hydra_cc.update_check import (
    PYPI_URL, UNKNOWN, UpdateCache, UpdateChecker, fetch_latest_version, read_cache,
)


NOW = 1_700_000_000.0
MINUTE_MS = 60 * 1000


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


def write_cache(paths, **fields):
    paths.cache_path.parent.mkdir(parents=True, exist_ok=True)
    paths.cache_path.write_text(json.dumps(UpdateCache(**fields).to_dict()))


def write_version(root, version):
    marker = root / 'skills' / 'hydra' / 'VERSION'
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.write_text(version + '\n')


def make_checker(paths, clock=None, latest='1.2.0', launched=None):
    def fetch():
        return latest

    def launch():
        if launched is not None:
            launched.append(1)

    return UpdateChecker(paths, clock=clock or FakeClock(), fetch_latest=fetch, launcher=launch)


class TestTrigger:

    def test_fresh_cache_skips_launch(self, paths):
        write_cache(paths, installed='1.0.0', latest='1.0.0',
                    checked_at=int(NOW * 1000) - 30 * MINUTE_MS)
        before = paths.cache_path.read_bytes()
        launched = []

        assert make_checker(paths, launched=launched).trigger() is False
        assert launched == []
        assert paths.cache_path.read_bytes() == before

    def test_stale_cache_launches(self, paths):
        write_cache(paths, installed='1.0.0', latest='1.0.0',
                    checked_at=int(NOW * 1000) - 61 * MINUTE_MS)
        launched = []

        assert make_checker(paths, launched=launched).trigger() is True
        assert launched == [1]

    def test_stale_cache_is_rewritten_by_the_check(self, paths):
        write_version(paths.global_root, '1.0.0')
        write_cache(paths, installed='1.0.0', latest='1.0.0',
                    checked_at=int(NOW * 1000) - 61 * MINUTE_MS)
        checker = make_checker(paths, latest='1.1.0')
        checker.launcher = checker.run_check

        checker.trigger()

        cache = read_cache(paths.cache_path)
        assert cache.checked_at == int(NOW * 1000)
        assert cache.latest == '1.1.0'
        assert cache.update_available is True

    @pytest.mark.parametrize('content', [None, '{garbage', '[]', '{"checked_at": "soon"}'])
    def test_missing_or_corrupt_cache_launches(self, paths, content):
        if content is not None:
            paths.cache_path.parent.mkdir(parents=True)
            paths.cache_path.write_text(content)
        launched = []

        assert make_checker(paths, launched=launched).trigger() is True
        assert launched == [1]


class TestRunCheck:

    def test_up_to_date(self, paths):
        write_version(paths.global_root, '1.2.0')
        cache = make_checker(paths, latest='1.2.0').run_check()

        assert cache.installed == '1.2.0'
        assert cache.update_available is False
        assert cache.error is None
        assert 'error' not in json.loads(paths.cache_path.read_text())

    def test_failure_writes_well_formed_cache(self, paths):
        write_version(paths.global_root, '1.0.0')

        def fetch():
            raise NetworkError('registry unreachable')

        checker = UpdateChecker(paths, clock=FakeClock(), fetch_latest=fetch, launcher=lambda: None)
        cache = checker.run_check()

        saved = json.loads(paths.cache_path.read_text())
        assert saved == {
            'installed': '1.0.0',
            'latest': UNKNOWN,
            'update_available': False,
            'checked_at': int(NOW * 1000),
            'error': 'registry unreachable',
        }
        assert cache.error == 'registry unreachable'

    def test_failed_check_still_holds_the_gate(self, paths):
        def fetch():
            raise NetworkError('offline')

        clock = FakeClock()
        launched = []
        checker = UpdateChecker(paths, clock=clock, fetch_latest=fetch,
                                launcher=lambda: launched.append(1))
        checker.run_check()
        clock.now += 10 * 60

        assert checker.trigger() is False
        assert launched == []

    def test_unknown_installed_version_never_flags_update(self, paths):
        cache = make_checker(paths, latest='9.9.9').run_check()
        assert cache.installed == UNKNOWN
        assert cache.update_available is False

    def test_local_version_wins(self, paths):
        write_version(paths.global_root, '1.0.0')
        write_version(paths.local_root, '1.1.0')
        assert make_checker(paths).installed_version() == '1.1.0'

    def test_global_version_used_without_local(self, paths):
        write_version(paths.global_root, '1.0.0')
        assert make_checker(paths).installed_version() == '1.0.0'


class TestFetchLatestVersion:

    def test_reads_version_from_index(self):
        def handler(request):
            assert str(request.url) == PYPI_URL
            return httpx.Response(200, json={'info': {'version': '2.0.1'}})

        assert fetch_latest_version(transport=httpx.MockTransport(handler)) == '2.0.1'

    def test_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        with pytest.raises(NetworkError):
            fetch_latest_version(transport=transport)

    def test_malformed_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text='not json'))
        with pytest.raises(NetworkError):
            fetch_latest_version(transport=transport)

    def test_slow_body_hits_overall_deadline(self):
        ticks = iter([0.0, 11.0, 12.0, 13.0])
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={'info': {'version': '2.0.1'}})
        )

        with pytest.raises(NetworkError, match='longer than 10s'):
            fetch_latest_version(timeout=10.0, transport=transport, clock=lambda: next(ticks))

    def test_within_deadline(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={'info': {'version': '2.0.1'}})
        )
        assert fetch_latest_version(timeout=10.0, transport=transport, clock=lambda: 0.0) == '2.0.1'

    def test_missing_version(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={'info': {}}))
        with pytest.raises(NetworkError):
            fetch_latest_version(transport=transport)


class TestCheckUpdateHook:

    def test_triggers_checker(self, paths):
        launched = []
        checker = make_checker(paths, launched=launched)

        check_update.main(stdin=io.StringIO('{"session_id": "abc"}'), checker=checker)

        assert launched == [1]

    def test_never_raises(self, paths):
        def explode():
            raise RuntimeError('boom')

        checker = UpdateChecker(paths, clock=FakeClock(), launcher=explode)
        check_update.main(stdin=io.StringIO(''), checker=checker)
