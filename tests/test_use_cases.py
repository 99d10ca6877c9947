"""
Tests for the zsh and apps workflows end to end, against mock adapters.
"""

from pathlib import Path

import pytest

from devsetup.core.engine.reconciler import parse_selection
from devsetup.core.models.settings import DEFAULT_EXTRA_SETTINGS, DEFAULT_PLUGINS
from devsetup.core.services.tools.catalog import PLUGIN_SOURCES, ZSH_PACKAGES
from devsetup.core.models.profile import Profile
from devsetup.core.services.zshrc import apply_plugin_config
from devsetup.core.use_cases.apps_install import run_apps_install
from devsetup.core.use_cases.detect import run_detect
from devsetup.core.use_cases.zsh_setup import run_zsh_setup

ZSHRC = 'export ZSH="$HOME/.oh-my-zsh"\nplugins=(git)\nsource $ZSH/oh-my-zsh.sh\n'


@pytest.fixture
def shells(tmp_path: Path) -> Path:
    path = tmp_path / "shells"
    path.write_text("/bin/bash\n/usr/bin/zsh\n")
    return path


@pytest.fixture
def zshrc(settings) -> Path:
    path = settings.zsh.zshrc_path()
    path.write_text(ZSHRC)
    return path


def _zsh(settings, reporter, runner, registry, shells, **kwargs):
    return run_zsh_setup(
        settings,
        reporter=reporter,
        runner=runner,
        registry=registry,
        shells_file=shells,
        **kwargs,
    )


def _finished_host(settings, runner, packages):
    """A host where the zsh workflow already ran to completion."""
    runner.add_executable("zsh")
    packages.installed.update(ZSH_PACKAGES[Profile.DEBIAN])
    settings.zsh.framework_path().mkdir(parents=True)
    for name in PLUGIN_SOURCES:
        (settings.zsh.plugin_root() / name).mkdir(parents=True)
    path = settings.zsh.zshrc_path()
    path.write_text(ZSHRC)
    apply_plugin_config(path, list(DEFAULT_PLUGINS), list(DEFAULT_EXTRA_SETTINGS))


# ── zsh workflow ────────────────────────────────────────────────


class TestZshSetup:
    def test_fresh_host(self, settings, reporter, runner, packages, registry, shells, zshrc):
        runner.add_executable("zsh")
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 0
        assert packages.updates == 1
        assert runner.ran("--unattended")
        assert sum(runner.ran(url) for url, _ in PLUGIN_SOURCES.values()) == 4
        assert result.edit is not None and result.edit.changed
        assert result.shell is not None and result.shell.strategy == "chsh"
        assert result.report.failed == 0

    def test_rerun_changes_nothing(self, settings, reporter, runner, packages, registry, shells,
                                   monkeypatch):
        _finished_host(settings, runner, packages)
        monkeypatch.setenv("SHELL", "/usr/bin/zsh")
        before = settings.zsh.zshrc_path().read_bytes()
        backups = list(settings.zsh.zshrc_path().parent.glob(".zshrc.backup.*"))

        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 0
        assert runner.call_count == 0
        assert packages.updates == 0
        assert packages.install_calls == []
        assert settings.zsh.zshrc_path().read_bytes() == before
        assert list(settings.zsh.zshrc_path().parent.glob(".zshrc.backup.*")) == backups
        assert result.report.installed == 0
        assert result.problems == []

    def test_index_update_failure_stops_run(self, settings, reporter, runner, packages, registry,
                                            shells, zshrc):
        packages.fail_update = True
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 1
        assert "Package index update" in result.error
        assert packages.install_calls == []
        assert not runner.ran("git clone")
        assert zshrc.read_text() == ZSHRC

    def test_framework_failure_is_fatal(self, settings, reporter, runner, registry, shells, zshrc):
        runner.set_failure("ohmyzsh", "HTTP 503")
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 1
        assert result.report.failed_tools() == ["Oh My ZSH"]
        assert not runner.ran("git clone")
        assert zshrc.read_text() == ZSHRC

    def test_plugin_failure_is_partial(self, settings, reporter, runner, registry, shells, zshrc):
        runner.add_executable("zsh")
        runner.set_failure("zsh-autocomplete", "connection reset")
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 0
        assert result.report.failed_tools() == ["zsh-autocomplete"]
        assert "zsh-autocomplete" in zshrc.read_text()

    def test_missing_zshrc_is_fatal(self, settings, reporter, runner, registry, shells, capsys):
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 1
        assert "not found" in result.error
        assert "[ERROR]" in capsys.readouterr().out

    def test_non_utf8_zshrc_is_edited(self, settings, reporter, runner, registry, shells):
        runner.add_executable("zsh")
        path = settings.zsh.zshrc_path()
        path.write_bytes(b"plugins=(git)\n# caf\xe9\n")

        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 0
        assert b"# caf\xe9\n" in path.read_bytes()
        assert result.edit is not None and result.edit.changed

    def test_shell_change_failure_is_not_fatal(self, settings, reporter, runner, registry, shells,
                                               zshrc):
        runner.add_executable("zsh")
        runner.set_failure("chsh")
        runner.set_failure("usermod")
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 0
        assert not result.shell.ok
        assert result.shell.remediation

    def test_no_shell_change(self, settings, reporter, runner, registry, shells, zshrc):
        runner.add_executable("zsh")
        result = _zsh(settings, reporter, runner, registry, shells, change_shell=False)
        assert result.shell is None
        assert not runner.ran("chsh")

    def test_unknown_host_aborts_before_anything(self, settings, reporter, runner, packages,
                                                 registry, shells, os_release):
        os_release.write_text("ID=fedora\n")
        result = _zsh(settings, reporter, runner, registry, shells)

        assert result.exit_code == 1
        assert "Unsupported distribution" in result.error
        assert runner.call_count == 0
        assert packages.queries == []

    def test_dry_run_touches_nothing(self, settings, reporter, runner, packages, registry, shells,
                                     zshrc, capsys):
        result = _zsh(settings, reporter, runner, registry, shells, dry_run=True)

        assert result.exit_code == 0
        assert runner.call_count == 0
        assert packages.updates == 0
        assert zshrc.read_text() == ZSHRC
        out = capsys.readouterr().out
        assert "Would install packages" in out
        assert "Would clone zsh-autocomplete" in out


# ── apps workflow ───────────────────────────────────────────────


def _choose(text):
    def choose(menu):
        return parse_selection(text, menu)

    return choose


class TestAppsInstall:
    def test_selected_tools_installed(self, settings, reporter, runner, packages, registry):
        result = run_apps_install(
            settings, reporter=reporter, choose=_choose("6 5"), runner=runner, registry=registry,
        )

        assert result.exit_code == 0
        assert result.selected == ["python", "vim"]
        assert packages.updates == 1
        assert packages.install_calls == [["python3", "python3-pip", "python3-venv"], ["vim"]]
        assert result.report.installed == 2

    def test_one_failure_does_not_stop_the_rest(self, settings, reporter, runner, packages,
                                                registry):
        packages.failing.add("python3-pip")
        result = run_apps_install(
            settings, reporter=reporter, choose=_choose("5 6"), runner=runner, registry=registry,
        )

        assert result.exit_code == 0
        assert result.report.failed_tools() == ["Python3 with pip3"]
        assert ["vim"] in packages.install_calls

    def test_everything_present_skips_index_update(self, settings, reporter, runner, packages,
                                                   registry, capsys):
        runner.add_executable("vim")
        result = run_apps_install(
            settings, reporter=reporter, choose=_choose("6"), runner=runner, registry=registry,
        )

        assert result.report.present == 1
        assert packages.updates == 0
        assert "[WARNING] Vim is already installed" in capsys.readouterr().out

    def test_index_update_failure_is_fatal(self, settings, reporter, runner, packages, registry):
        packages.fail_update = True
        result = run_apps_install(
            settings, reporter=reporter, choose=_choose("6"), runner=runner, registry=registry,
        )

        assert result.exit_code == 1
        assert packages.install_calls == []

    def test_quit(self, settings, reporter, runner, packages, registry):
        result = run_apps_install(
            settings, reporter=reporter, choose=lambda menu: None, runner=runner,
            registry=registry,
        )

        assert result.cancelled
        assert result.exit_code == 0
        assert packages.updates == 0

    def test_unknown_host_never_shows_menu(self, settings, reporter, runner, registry, os_release):
        os_release.write_text("ID=gentoo\n")
        shown = []
        result = run_apps_install(
            settings, reporter=reporter, choose=lambda menu: shown.append(menu),
            runner=runner, registry=registry,
        )

        assert result.exit_code == 1
        assert shown == []

    def test_docker_note(self, settings, reporter, runner, registry, capsys):
        run_apps_install(
            settings, reporter=reporter, choose=_choose("1"), runner=runner, registry=registry,
        )
        assert "docker group" in capsys.readouterr().out

    def test_dry_run(self, settings, reporter, runner, packages, registry, capsys):
        result = run_apps_install(
            settings, reporter=reporter, choose=_choose("7"), runner=runner, registry=registry,
            dry_run=True,
        )

        assert result.exit_code == 0
        assert packages.install_calls == []
        assert runner.call_count == 0
        assert "Would install Docker CE" in capsys.readouterr().out


class TestDetect:
    def test_supported(self, settings):
        result = run_detect(settings)
        assert result.supported
        assert result.package_manager == "apt"
        assert result.to_dict()["profile"] == "debian-family"

    def test_unsupported(self, settings, os_release):
        os_release.write_text("ID=fedora\n")
        result = run_detect(settings)
        assert not result.supported
        assert result.package_manager is None
