"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devsetup.adapters.mock import MockCommandRunner, MockPackageManager
from devsetup.adapters.registry import PackageManagerRegistry
from devsetup.core.context import RunContext
from devsetup.core.models.profile import HostInfo, Profile
from devsetup.core.models.settings import Settings, ZshSettings
from devsetup.core.observability.reporter import Reporter

TEST_USER = "devsetup-test-user"

UBUNTU_RELEASE = """\
NAME="Ubuntu"
VERSION_ID="22.04"
ID=ubuntu
ID_LIKE=debian
PRETTY_NAME="Ubuntu 22.04.3 LTS"
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path: Path):
    """Keep the developer's shell environment out of the tests."""
    for name in ("ZSH", "ZSH_CUSTOM", "DEVSETUP_CONFIG", "DEVSETUP_LOG_FILE",
                 "DEVSETUP_LOG_FILE_LEVEL", "DEVSETUP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("SHELL", "/bin/bash")


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    path = tmp_path / "os-release"
    path.write_text(UBUNTU_RELEASE)
    return path


@pytest.fixture
def settings(home: Path, os_release: Path) -> Settings:
    return Settings(
        os_release=str(os_release),
        zsh=ZshSettings(
            framework_dir=str(home / ".oh-my-zsh"),
            zshrc=str(home / ".zshrc"),
        ),
    )


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def packages(runner: MockCommandRunner) -> MockPackageManager:
    return MockPackageManager(runner)


@pytest.fixture
def registry(packages: MockPackageManager) -> PackageManagerRegistry:
    return PackageManagerRegistry(mock_manager=packages)


@pytest.fixture
def reporter() -> Reporter:
    return Reporter()


@pytest.fixture
def make_ctx(settings, runner, packages, reporter, home):
    """Build a RunContext around the mocks; profile defaults to debian-family."""

    def _make(profile: Profile = Profile.DEBIAN, host_id: str = "ubuntu") -> RunContext:
        return RunContext(
            profile=profile,
            settings=settings,
            runner=runner,
            packages=packages,
            reporter=reporter,
            host=HostInfo(id=host_id),
            user=TEST_USER,
            home=home,
        )

    return _make
