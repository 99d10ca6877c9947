"""
Tests for the tool catalog and each tool's install procedure.
"""

from pathlib import Path

import pytest

from devsetup.core.models.profile import Profile
from devsetup.core.services.tools.catalog import (
    PLUGIN_SOURCES,
    app_catalog,
    plugin_tools,
    zsh_packages,
)
from devsetup.core.services.tools.packages import DockerTool, nginx_tool, python_tool
from devsetup.core.services.tools.remote import GvmTool, NvmTool, RemoteScriptTool
from devsetup.core.services.tools.zsh import OhMyZsh, ZshPlugin


def _index_of(runner, fragment):
    for i, cmd in enumerate(runner.call_log):
        if fragment in " ".join(cmd):
            return i
    raise AssertionError(f"{fragment!r} never ran")


# ── Catalog ─────────────────────────────────────────────────────


class TestCatalog:
    def test_menu_order(self):
        assert [t.label for t in app_catalog()] == [
            "Docker CE",
            "Nginx",
            "NVM (with LTS Node.js)",
            "GVM (with latest Go version)",
            "Python3 with pip3",
            "Vim",
        ]

    def test_zsh_packages_per_profile(self):
        assert "zsh-autosuggestions" in zsh_packages(Profile.DEBIAN)
        assert zsh_packages(Profile.ARCH) == ["zsh", "git", "curl"]
        assert zsh_packages(Profile.UNKNOWN) == []

    def test_plugin_tools_skip_builtin(self, settings):
        keys = [t.key for t in plugin_tools(settings)]
        assert keys == list(PLUGIN_SOURCES)
        assert "git" not in keys

    def test_only_autocomplete_is_shallow(self, settings):
        shallow = [t.key for t in plugin_tools(settings) if t.shallow]
        assert shallow == ["zsh-autocomplete"]


# ── Package tools ───────────────────────────────────────────────


class TestPackageTool:
    def test_installs_only_missing(self, make_ctx, packages):
        packages.installed.add("python3")
        receipt = python_tool().install(make_ctx())

        assert receipt.status == "installed"
        assert packages.install_calls == [["python3-pip", "python3-venv"]]

    def test_arch_packages(self, make_ctx, packages):
        python_tool().install(make_ctx(Profile.ARCH, "arch"))
        assert packages.install_calls == [["python", "python-pip"]]

    def test_install_failure_is_a_receipt(self, make_ctx, packages):
        packages.failing.add("python3-pip")
        receipt = python_tool().install(make_ctx())
        assert receipt.failed
        assert "python3-pip" in receipt.error

    def test_nginx_enabled_not_started(self, make_ctx, runner):
        nginx_tool().install(make_ctx())
        assert runner.ran("systemctl enable nginx")
        assert not runner.ran("systemctl start nginx")


class TestDockerTool:
    def test_debian_repository_setup(self, make_ctx, runner, packages):
        ctx = make_ctx()
        receipt = DockerTool().install(ctx)

        assert receipt.ok
        assert packages.install_calls[0] == ["ca-certificates", "curl", "gnupg", "lsb-release"]
        assert packages.install_calls[1] == [
            "docker-ce", "docker-ce-cli", "containerd.io", "docker-compose-plugin",
        ]
        assert packages.updates == 1
        assert runner.ran("download.docker.com/linux/ubuntu/gpg")
        assert runner.ran(f"usermod -aG docker {ctx.user}")

    def test_debian_host_uses_debian_repository(self, make_ctx, runner):
        DockerTool().install(make_ctx(Profile.DEBIAN, "debian"))
        assert runner.ran("download.docker.com/linux/debian")

    def test_key_download_uses_network_timeout(self, make_ctx, runner):
        ctx = make_ctx()
        DockerTool().install(ctx)
        assert runner.timeouts_seen[_index_of(runner, "gpg --dearmor")] == ctx.network_timeout

    def test_privileged_steps_use_sudo(self, make_ctx, runner):
        DockerTool().install(make_ctx())
        assert runner.call_log[_index_of(runner, "systemctl enable docker")][0] == "sudo"

    def test_old_package_removal_is_optional(self, make_ctx, runner):
        runner.set_failure("apt-get remove", "no such packages")
        assert DockerTool().install(make_ctx()).ok

    def test_key_failure_fails_tool(self, make_ctx, runner, packages):
        runner.set_failure("gpg --dearmor", "network unreachable")
        receipt = DockerTool().install(make_ctx())

        assert receipt.failed
        assert "network unreachable" in receipt.error
        assert not any("docker-ce" in call for call in packages.install_calls)

    def test_arch_has_no_repository_steps(self, make_ctx, runner, packages):
        DockerTool().install(make_ctx(Profile.ARCH, "arch"))
        assert packages.install_calls == [["docker", "docker-compose"]]
        assert not runner.ran("download.docker.com")
        assert packages.updates == 0

    def test_presence(self, make_ctx, runner, packages):
        assert not DockerTool().is_present(make_ctx())
        runner.add_executable("docker")
        assert DockerTool().is_present(make_ctx())
        packages.installed.add("docker")
        assert DockerTool().is_present(make_ctx(Profile.ARCH, "arch"))


# ── Remote-script tools ─────────────────────────────────────────


class TestNvmTool:
    def test_base_requires_installer_hooks(self):
        class Partial(RemoteScriptTool):
            def installer_url(self, ctx):
                return "https://example.invalid/install.sh"

        with pytest.raises(TypeError):
            Partial("partial", "Partial")

    def test_installer_then_lts(self, make_ctx, runner, home: Path):
        (home / ".nvm").mkdir()
        (home / ".nvm" / "nvm.sh").write_text("# nvm")
        receipt = NvmTool().install(make_ctx())

        assert receipt.ok
        assert runner.ran("nvm-sh/nvm/v0.39.0/install.sh")
        assert runner.ran("nvm install --lts")
        assert runner.ran("nvm alias default")

    def test_missing_entry_script_fails(self, make_ctx, runner):
        receipt = NvmTool().install(make_ctx())
        assert receipt.failed
        assert "nvm.sh" in receipt.error
        assert not runner.ran("nvm install")

    def test_download_failure(self, make_ctx, runner):
        runner.set_failure("curl -fsSL", "Could not resolve host")
        receipt = NvmTool().install(make_ctx())
        assert receipt.failed
        assert "Could not resolve host" in receipt.error

    def test_present_when_directory_exists(self, make_ctx, home: Path):
        assert not NvmTool().is_present(make_ctx())
        (home / ".nvm").mkdir()
        assert NvmTool().is_present(make_ctx())


class TestGvmTool:
    def test_dependencies_then_go(self, make_ctx, runner, packages, home: Path):
        scripts = home / ".gvm" / "scripts"
        scripts.mkdir(parents=True)
        (scripts / "gvm").write_text("# gvm")
        packages.installed.update({"git", "curl"})

        receipt = GvmTool().install(make_ctx())

        assert receipt.ok
        assert packages.install_calls[0] == [
            "mercurial", "make", "binutils", "bison", "gcc", "build-essential",
        ]
        assert runner.ran("gvm install go1.21.5 -B")
        assert runner.ran("gvm use go1.21.5 --default")

    def test_dependency_failure_stops_install(self, make_ctx, runner, packages):
        packages.failing.add("bison")
        receipt = GvmTool().install(make_ctx())
        assert receipt.failed
        assert not runner.ran("gvm-installer")


# ── zsh tools ───────────────────────────────────────────────────


class TestOhMyZsh:
    def test_unattended_install(self, make_ctx, runner):
        receipt = OhMyZsh().install(make_ctx())
        assert receipt.ok
        assert runner.ran("ohmyzsh/master/tools/install.sh")
        assert runner.call_log[-1][0] == "sh"
        assert runner.call_log[-1][-1] == "--unattended"

    def test_presence(self, make_ctx, settings):
        assert not OhMyZsh().is_present(make_ctx())
        settings.zsh.framework_path().mkdir(parents=True)
        assert OhMyZsh().is_present(make_ctx())

    def test_zsh_env_overrides_framework_dir(self, make_ctx, tmp_path, monkeypatch):
        custom = tmp_path / "omz"
        custom.mkdir()
        monkeypatch.setenv("ZSH", str(custom))
        assert OhMyZsh().is_present(make_ctx())


class TestZshPlugin:
    def test_shallow_clone(self, make_ctx, runner, settings):
        ctx = make_ctx()
        plugin = ZshPlugin("zsh-autocomplete", "https://example.com/ac.git", shallow=True)
        plugin.install(ctx)

        target = settings.zsh.framework_path() / "custom" / "plugins" / "zsh-autocomplete"
        assert runner.call_log[-1] == [
            "git", "clone", "--depth", "1", "https://example.com/ac.git", str(target),
        ]
        assert runner.timeouts_seen[-1] == ctx.network_timeout

    def test_full_clone(self, make_ctx, runner):
        ZshPlugin("zsh-autosuggestions", "https://example.com/as").install(make_ctx())
        assert "--depth" not in runner.call_log[-1]

    def test_zsh_custom_override(self, make_ctx, tmp_path, monkeypatch):
        monkeypatch.setenv("ZSH_CUSTOM", str(tmp_path / "custom"))
        plugin = ZshPlugin("p", "https://example.com/p")
        assert plugin.target(make_ctx()) == tmp_path / "custom" / "plugins" / "p"

    def test_clone_timeout_fails_plugin(self, make_ctx, runner):
        runner.set_timeout("git clone")
        receipt = ZshPlugin("p", "https://example.com/p").install(make_ctx())
        assert receipt.failed
        assert "timed out" in receipt.error
