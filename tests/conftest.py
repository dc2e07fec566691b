"""Shared fixtures."""
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from hydra_cc.bootstrap import HydraInstaller
from hydra_cc.bundle import load_bundle
from hydra_cc.paths import HydraPaths


FAKE_PYTHON = '/usr/bin/python3'


@pytest.fixture
def paths(tmp_path):
    """Global and local roots inside a temp directory."""
    home = tmp_path / 'home'
    project = tmp_path / 'project'
    home.mkdir()
    project.mkdir()
    return HydraPaths(
        global_root=home / '.claude',
        local_root=project / '.claude',
        tracking_dir=tmp_path / 'hydra-guard',
    )


@pytest.fixture
def bundle():
    return load_bundle()


@pytest.fixture
def installer(paths, bundle):
    return HydraInstaller(paths, bundle, python=FAKE_PYTHON)


def snapshot(root: Path) -> dict:
    """Map of relative path -> bytes for every file under root."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob('*')) if p.is_file()
    }
