"""
Tests for host probing — os-release parsing and profile classification.
"""

from pathlib import Path

import pytest

from devsetup.core.engine.prober import (
    classify,
    detect_profile,
    parse_os_release,
    parse_os_release_text,
)
from devsetup.core.models.profile import HostInfo, Profile


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "os-release"
    path.write_text(text)
    return path


class TestParseText:
    def test_quotes_removed(self):
        values = parse_os_release_text('ID="ubuntu"\nNAME=\'Ubuntu\'\nVERSION_ID=22.04\n')
        assert values == {"ID": "ubuntu", "NAME": "Ubuntu", "VERSION_ID": "22.04"}

    def test_comments_and_blank_lines_ignored(self):
        values = parse_os_release_text("# comment\n\nID=arch\nnot a pair\n")
        assert values == {"ID": "arch"}

    def test_value_with_spaces(self):
        values = parse_os_release_text('PRETTY_NAME="Arch Linux"\n')
        assert values["PRETTY_NAME"] == "Arch Linux"


class TestParseFile:
    def test_missing_file(self, tmp_path: Path):
        assert parse_os_release(tmp_path / "nope") is None

    def test_id_lowercased_and_id_like_split(self, tmp_path: Path):
        host = parse_os_release(_write(tmp_path, 'ID=Pop\nID_LIKE="ubuntu debian"\n'))
        assert host is not None
        assert host.id == "pop"
        assert host.id_like == ["ubuntu", "debian"]


class TestClassify:
    @pytest.mark.parametrize(
        "host_id, id_like, expected",
        [
            ("arch", [], Profile.ARCH),
            ("manjaro", ["arch"], Profile.ARCH),
            ("endeavouros", [], Profile.ARCH),
            ("garuda", ["arch"], Profile.ARCH),
            ("ubuntu", ["debian"], Profile.DEBIAN),
            ("debian", [], Profile.DEBIAN),
            ("linuxmint", ["ubuntu"], Profile.DEBIAN),
            ("pop", ["ubuntu", "debian"], Profile.DEBIAN),
            ("fedora", [], Profile.UNKNOWN),
            ("opensuse-tumbleweed", ["opensuse", "suse"], Profile.UNKNOWN),
            ("", [], Profile.UNKNOWN),
        ],
    )
    def test_rules(self, host_id, id_like, expected):
        assert classify(HostInfo(id=host_id, id_like=id_like)) is expected

    def test_explicit_id_beats_id_like(self):
        # A Debian ID with a misleading ID_LIKE stays Debian
        assert classify(HostInfo(id="debian", id_like=["arch"])) is Profile.DEBIAN

    def test_none_is_unknown(self):
        assert classify(None) is Profile.UNKNOWN


class TestDetectProfile:
    def test_ubuntu(self, os_release: Path):
        profile, host = detect_profile(os_release)
        assert profile is Profile.DEBIAN
        assert host is not None
        assert host.display_name == "Ubuntu 22.04.3 LTS"

    def test_unreadable_is_unknown_not_error(self, tmp_path: Path):
        profile, host = detect_profile(tmp_path / "missing")
        assert profile is Profile.UNKNOWN
        assert host is None
        assert not profile.supported
