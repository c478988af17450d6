"""Managed-block merging for user-owned text files.

A managed block is a labeled region of an otherwise hand-edited file
(~/.ssh/config, ~/.bashrc, tmux.conf)::

    # BEGIN devmux-managed-aliases
    alias gs="git status"
    # END devmux-managed-aliases

Every write strips all occurrences of the block's exact marker pair, keeps
every other line byte-for-byte in its original order, and re-appends the
single block at end of file. Lines that look like markers of a different
namespace/suffix are ordinary content.

Known lossy edge: a begin marker without a matching end marker drops
everything from that marker to end of file.
"""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Iterator
from pathlib import Path

from devmux.errors import MergeIOError
from devmux.logging import get_logger

log = get_logger("blocks")

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"  # round-trips undecodable bytes unchanged


def marker_lines(namespace: str, suffix: str | None = None) -> tuple[str, str]:
    """Return the (begin, end) marker lines, without newlines."""
    label = f"{namespace}-managed"
    if suffix:
        label = f"{label}-{suffix}"
    return f"# BEGIN {label}", f"# END {label}"


def _lines(text: str) -> Iterator[str]:
    """Split on newline only, keeping terminators."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            yield text[start:]
            return
        yield text[start : end + 1]
        start = end + 1


def _bare(line: str) -> str:
    line = line[:-1] if line.endswith("\n") else line
    return line[:-1] if line.endswith("\r") else line


def strip_block(text: str, begin: str, end: str) -> str:
    """Drop every begin/end marker line and everything between them."""
    kept: list[str] = []
    in_block = False
    for line in _lines(text):
        bare = _bare(line)
        if bare == begin:
            in_block = True
            continue
        if bare == end:
            in_block = False
            continue
        if not in_block:
            kept.append(line)
    return "".join(kept)


def render_block(text: str, begin: str, end: str, content: str) -> str:
    """Return ``text`` with the single block holding ``content`` at its end."""
    buffer = strip_block(text, begin, end)
    if buffer and not buffer.endswith("\n"):
        buffer += "\n"
    body = content if content.endswith("\n") else content + "\n"
    return f"{buffer}{begin}\n{body}{end}\n"


def extract_block(text: str, begin: str, end: str) -> str | None:
    """Return the content of the first complete block, or None."""
    collected: list[str] | None = None
    for line in _lines(text):
        bare = _bare(line)
        if collected is None:
            if bare == begin:
                collected = []
            continue
        if bare == end:
            return "".join(collected)
        collected.append(line)
    return None


def _target(path: str | Path) -> Path:
    # Write through symlinks (dotfile managers link ~/.bashrc elsewhere)
    return Path(os.path.realpath(os.path.expanduser(str(path))))


def _read(path: Path) -> str:
    try:
        with open(path, encoding=_ENCODING, errors=_ERRORS, newline="") as f:
            return f.read()
    except FileNotFoundError:
        return ""
    except OSError as e:
        raise MergeIOError(str(path), e) from e


def _default_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write(path: str | Path, text: str, *, private: bool = False) -> None:
    """Replace ``path`` with ``text`` via a temp file and rename.

    Args:
        path: Target file. Its parent directory is created if missing.
        text: Full new content.
        private: Restrict the result to owner read/write (0600). Otherwise
            an existing file keeps its mode.

    Raises:
        MergeIOError: The directory, temp file, or rename failed.
    """
    target = _target(path)
    tmp_name: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if private:
            mode = 0o600
        elif target.exists():
            mode = stat.S_IMODE(target.stat().st_mode)
        else:
            mode = _default_mode()

        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        with os.fdopen(fd, "w", encoding=_ENCODING, errors=_ERRORS, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as e:
        raise MergeIOError(str(target), e) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                log.debug("Could not remove temp file %s", tmp_name)


def write_block(
    path: str | Path,
    namespace: str,
    suffix: str | None,
    content: str,
    *,
    private: bool = False,
) -> None:
    """Insert or replace the (namespace, suffix) block in ``path``.

    A missing file is treated as empty and created. The block always ends
    up at end of file.
    """
    target = _target(path)
    begin, end = marker_lines(namespace, suffix)
    new_text = render_block(_read(target), begin, end, content)
    atomic_write(target, new_text, private=private)
    log.debug("Wrote %s block to %s", begin[len("# BEGIN ") :], target)


def remove_block(path: str | Path, namespace: str, suffix: str | None = None) -> None:
    """Remove the (namespace, suffix) block, markers included.

    A missing file is left missing.
    """
    target = _target(path)
    if not target.exists():
        return
    begin, end = marker_lines(namespace, suffix)
    text = _read(target)
    new_text = strip_block(text, begin, end)
    if new_text == text:
        return
    atomic_write(target, new_text)
    log.debug("Removed %s block from %s", begin[len("# BEGIN ") :], target)


def read_block(path: str | Path, namespace: str, suffix: str | None = None) -> str | None:
    """Return the current content of the block, or None if absent."""
    begin, end = marker_lines(namespace, suffix)
    return extract_block(_read(_target(path)), begin, end)
