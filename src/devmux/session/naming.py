"""Canonical session names.

Resume mode addresses ``<tool>:<project>``; new mode mints
``<tool>:<project>:<epoch seconds>``. Two new-mode dispatches for the same
tool and project within the same second produce the same name; that race
is accepted rather than papered over with a counter, since it would change
the names users see and type.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from enum import Enum

Clock = Callable[[], float]

NEW_NAME_RE = re.compile(r"^(?P<tool>[^:]+):(?P<project>.+):(?P<stamp>\d+)$")


class SessionMode(str, Enum):
    """How the session name is chosen."""

    RESUME = "resume"
    NEW = "new"
    EXPLICIT = "explicit"


def session_name(
    tool: str,
    project: str,
    mode: SessionMode = SessionMode.RESUME,
    clock: Clock = time.time,
) -> str:
    """Compute the canonical session name.

    The clock is read only in new mode.
    """
    if not tool or not project:
        raise ValueError("tool and project are required for a session name")
    if mode is SessionMode.NEW:
        return f"{tool}:{project}:{int(clock())}"
    if mode is SessionMode.RESUME:
        return f"{tool}:{project}"
    raise ValueError("explicit sessions carry their own name")


def parse_session_arg(value: str | None) -> tuple[SessionMode, str | None]:
    """Interpret ``--session``: empty/resume, ``new``, or an explicit name."""
    if value is None or value in ("", SessionMode.RESUME.value):
        return SessionMode.RESUME, None
    if value == SessionMode.NEW.value:
        return SessionMode.NEW, None
    return SessionMode.EXPLICIT, value


def multiplexer_name(name: str) -> str:
    """Map a canonical name to a tmux-safe session name.

    tmux rewrites ``:`` and ``.`` in session names, which would make lookup
    by the canonical name miss. The mapping is injective: ``%``, ``/`` and
    ``.`` are percent-escaped, then ``:`` becomes ``/``.

    >>> multiplexer_name("claude:demo")
    'claude/demo'
    >>> multiplexer_name("shell:my.app:1700000000")
    'shell/my%2Eapp/1700000000'
    """
    escaped = name.replace("%", "%25").replace("/", "%2F").replace(".", "%2E")
    return escaped.replace(":", "/")
