"""
zshrc editor — idempotent patching of the plugin declaration.

After an edit the file holds exactly one active ``plugins=(...)`` line
(the canonical one) and one auxiliary settings block between marker
comments. Every other line is kept verbatim.

Write path:
    lock (fcntl, non-blocking) → read → render → unchanged? done
    → backup (<name>.backup.YYYYmmdd_HHMMSS) → temp file → os.replace

The original is never touched until the new content is fully on disk.
"""

from __future__ import annotations

import fcntl
import logging
import os
import re
import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from devsetup.core.errors import ConfigEditError, MissingConfigError

logger = logging.getLogger(__name__)

BLOCK_START = "# >>> devsetup zsh settings >>>"
BLOCK_END = "# <<< devsetup zsh settings <<<"

# Active declaration: not commented, may be indented.
_PLUGINS_RE = re.compile(r"^\s*plugins=\(")
_SOURCE_RE = re.compile(r"^\s*(source|\.)\s+.*oh-my-zsh\.sh")

# Bytes that are not UTF-8 (a Latin-1 comment) are written back unchanged.
_ERRORS = "surrogateescape"


@dataclass
class EditResult:
    """What ``apply_plugin_config`` did to the file."""

    path: Path
    changed: bool = False
    backup: Path | None = None
    replaced: int = 0
    appended: bool = False

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "changed": self.changed,
            "backup": str(self.backup) if self.backup else None,
            "replaced": self.replaced,
            "appended": self.appended,
        }


def plugin_line(plugins: list[str]) -> str:
    """The canonical declaration, e.g. ``plugins=(git zsh-autosuggestions)``."""
    return f"plugins=({' '.join(plugins)})"


def settings_block(extra_settings: list[str]) -> list[str]:
    return [BLOCK_START, *extra_settings, BLOCK_END]


def _declaration_end(lines: list[str], start: int) -> int:
    """Index of the last line of the declaration opened at ``start``.

    An unterminated multi-line body counts as a single line so a broken
    file never loses its tail.
    """
    if ")" in lines[start].split("(", 1)[1]:
        return start
    for i in range(start + 1, len(lines)):
        if ")" in lines[i]:
            return i
    return start


def _eol(lines: list[str]) -> str:
    """Line ending for inserted lines: the one the file already uses."""
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
    return "\n"


def _block_end(lines: list[str], start: int) -> int | None:
    for i in range(start + 1, len(lines)):
        if lines[i].strip() == BLOCK_END:
            return i
    return None


def render(text: str, plugins: list[str], extra_settings: list[str]) -> tuple[str, int, bool]:
    """Build the patched content.

    Lines are handled with their endings, so untouched lines keep CRLF
    and a start marker whose end marker was deleted keeps everything
    after it.

    Returns:
        (new_text, declarations_replaced_or_removed, line_appended)
    """
    lines = text.splitlines(keepends=True)
    eol = _eol(lines)
    if lines and not lines[-1].endswith(("\n", "\r")):
        lines[-1] += eol
    canonical = plugin_line(plugins) + eol
    block = [line + eol for line in settings_block(extra_settings)]

    out: list[str] = []
    found_decl = False
    found_block = False
    replaced = 0
    source_at: int | None = None

    i = 0
    while i < len(lines):
        line = lines[i]

        if line.strip() == BLOCK_START:
            # Unterminated: only the marker line is replaced.
            end = _block_end(lines, i)
            if not found_block:
                out.extend(block)
                found_block = True
            i = (end if end is not None else i) + 1
            continue

        if _PLUGINS_RE.match(line):
            end = _declaration_end(lines, i)
            if not found_decl:
                out.append(canonical)
                found_decl = True
            replaced += 1
            i = end + 1
            continue

        if source_at is None and _SOURCE_RE.match(line):
            source_at = len(out)
        out.append(line)
        i += 1

    appended = False
    if not found_decl:
        # Plugins must be declared before the framework is sourced.
        if source_at is not None:
            out.insert(source_at, canonical)
        else:
            out.append(canonical)
        appended = True

    if not found_block:
        if out and out[-1].strip():
            out.append(eol)
        out.extend(block)

    return "".join(out), replaced, appended


def needs_update(path: Path, plugins: list[str], extra_settings: list[str]) -> bool:
    """Read-only check: would ``apply_plugin_config`` change ``path``?

    Raises:
        MissingConfigError: If ``path`` does not exist.
        ConfigEditError: If ``path`` cannot be read.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise MissingConfigError(f"{path} not found")
    try:
        with open(path, encoding="utf-8", errors=_ERRORS, newline="") as fh:
            text = fh.read()
    except OSError as e:
        raise ConfigEditError(f"Failed to read {path}: {e}") from e
    return render(text, plugins, extra_settings)[0] != text


def is_applied(path: Path, plugins: list[str], extra_settings: list[str]) -> bool:
    try:
        return not needs_update(path, plugins, extra_settings)
    except MissingConfigError:
        return False


def backup_path(path: Path) -> Path:
    """A free ``<name>.backup.<timestamp>[_N]`` sibling of ``path``."""
    ts = time.strftime("%Y%m%d_%H%M%S")
    candidate = path.with_name(f"{path.name}.backup.{ts}")
    n = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.backup.{ts}_{n}")
        n += 1
    return candidate


def apply_plugin_config(
    path: Path,
    plugins: list[str],
    extra_settings: list[str],
) -> EditResult:
    """Make ``path`` declare exactly ``plugins`` plus the settings block.

    Running it twice is the same as running it once: the second call
    finds nothing to change and makes no backup.

    Raises:
        MissingConfigError: ``path`` does not exist.
        ConfigEditError: Locked by another process, or any I/O failure.
            The original file is left as it was.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise MissingConfigError(
            f"{path} not found — the framework install did not create it"
        )
    # Edit the real file, not a dotfile-manager symlink.
    target = path.resolve()
    result = EditResult(path=target)

    try:
        with open(target, "r+", encoding="utf-8", errors=_ERRORS, newline="") as fh:
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError as e:
                raise ConfigEditError(f"{target} is locked by another process") from e

            text = fh.read()
            new_text, replaced, appended = render(text, plugins, extra_settings)
            if new_text == text:
                logger.info("%s already configured", target)
                return result

            backup = backup_path(target)
            shutil.copy2(target, backup)
            logger.info("Backed up %s → %s", target, backup)

            _write_atomic(target, new_text)

            result.changed = True
            result.backup = backup
            result.replaced = replaced
            result.appended = appended
    except OSError as e:
        raise ConfigEditError(f"Failed to update {target}: {e}") from e

    logger.info(
        "Updated %s (replaced=%d, appended=%s)", target, result.replaced, result.appended,
    )
    return result


def _write_atomic(path: Path, content: str) -> None:
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors=_ERRORS, newline="") as out:
            out.write(content)
            out.flush()
            os.fsync(out.fileno())
        shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
