# tests/conftest.py
"""
Global pytest fixtures for readiness tests.
"""

import pytest

from readiness.config import ReadinessConfig
from readiness.config.defaults import get_default_config
from readiness.detect.platform import MANAGERS, ManagerKind

from tests.helpers import FakeRunner


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def apt():
    return MANAGERS[ManagerKind.APT]


@pytest.fixture
def default_config() -> ReadinessConfig:
    return ReadinessConfig(**get_default_config())


@pytest.fixture
def project_root(tmp_path):
    """A minimal project checkout with the root markers present."""
    (tmp_path / "Cargo.toml").write_text("[workspace]\n")
    (tmp_path / "package.json").write_text("{}\n")
    return tmp_path
