"""
Environment prober — classify the host into a Profile.

Reads a ``KEY=value`` os-release file. An explicit ``ID`` match wins
over an ``ID_LIKE`` family match; anything else is ``unknown``. A
missing or unreadable file is also ``unknown``, never an error: the
caller decides that ``unknown`` aborts the run.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from devsetup.core.models.profile import HostInfo, Profile

logger = logging.getLogger(__name__)

# Explicit distribution IDs
_ID_RULES: dict[str, Profile] = {
    "arch": Profile.ARCH,
    "manjaro": Profile.ARCH,
    "endeavouros": Profile.ARCH,
    "ubuntu": Profile.DEBIAN,
    "debian": Profile.DEBIAN,
}

# ID_LIKE family tokens, checked in this order
_LIKE_RULES: list[tuple[str, Profile]] = [
    ("arch", Profile.ARCH),
    ("debian", Profile.DEBIAN),
    ("ubuntu", Profile.DEBIAN),
]


def parse_os_release_text(text: str) -> dict[str, str]:
    """Parse os-release content into a dict. Quotes are removed."""
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
            value = parts[0] if parts else ""
        except ValueError:
            value = value.strip().strip("\"'")
        values[key.strip()] = value
    return values


def parse_os_release(path: Path) -> HostInfo | None:
    """Read host identification from ``path``, or None if unreadable."""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None

    values = parse_os_release_text(text)
    return HostInfo(
        id=values.get("ID", "").lower(),
        id_like=values.get("ID_LIKE", "").lower().split(),
        version_id=values.get("VERSION_ID", ""),
        pretty_name=values.get("PRETTY_NAME", ""),
    )


def classify(host: HostInfo | None) -> Profile:
    """Map host facts to a Profile. Pure."""
    if host is None:
        return Profile.UNKNOWN

    if host.id in _ID_RULES:
        return _ID_RULES[host.id]

    for token, profile in _LIKE_RULES:
        if token in host.id_like:
            return profile

    return Profile.UNKNOWN


def detect_profile(path: Path) -> tuple[Profile, HostInfo | None]:
    """Probe the host once: ``(profile, host_info)``."""
    host = parse_os_release(path)
    profile = classify(host)
    logger.info(
        "Probed %s: id=%s id_like=%s → %s",
        path,
        host.id if host else None,
        host.id_like if host else None,
        profile.value,
    )
    return profile, host
