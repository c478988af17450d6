"""Host-side session orchestration: attach if the session exists, else create.

Runs on the development host as ``devmux-remote``. Receives the project,
tool, and either a pre-minted session name or a mode, and hands the
terminal to tmux.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import NoReturn

from devmux.errors import RemoteExecutionError
from devmux.logging import get_logger
from devmux.session.multiplexer import Multiplexer
from devmux.session.naming import Clock, SessionMode, session_name

log = get_logger("orchestrator")

DEFAULT_PROJECTS_ROOT = "~/projects"


def expand_root(root: str | None) -> Path:
    return Path(os.path.expanduser(root or DEFAULT_PROJECTS_ROOT))


def list_projects(root: str | Path | None = None) -> list[str]:
    """Sorted, non-hidden subdirectories of the projects root.

    A missing root yields an empty list.
    """
    base = expand_root(str(root) if root is not None else None)
    if not base.is_dir():
        log.debug("Projects root %s does not exist", base)
        return []
    return sorted(
        entry.name
        for entry in base.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


class Orchestrator:
    """Resolve or create the addressed session against a Multiplexer."""

    def __init__(
        self,
        multiplexer: Multiplexer,
        projects_root: str | None = None,
        clock: Clock = time.time,
    ) -> None:
        self.multiplexer = multiplexer
        self.root = expand_root(projects_root)
        self.clock = clock

    def project_dir(self, project: str) -> Path:
        if not project or "/" in project or project in (".", ".."):
            raise RemoteExecutionError(f"Invalid project name: {project!r}")
        return self.root / project

    def resolve_name(
        self,
        project: str,
        tool: str,
        mode: SessionMode = SessionMode.RESUME,
        name: str | None = None,
    ) -> str:
        """Trust a pre-minted name; otherwise compute it with this host's clock."""
        if name:
            return name
        if mode is SessionMode.EXPLICIT:
            raise RemoteExecutionError("explicit session mode requires a session name")
        return session_name(tool, project, mode, clock=self.clock)

    def ensure(
        self,
        project: str,
        tool: str,
        command: str = "",
        mode: SessionMode = SessionMode.RESUME,
        name: str | None = None,
    ) -> NoReturn:
        """Attach to the session, creating it first when it does not exist.

        An existing session is always reattached as is; the tool is never
        relaunched, even if its process inside has exited.

        Raises:
            RemoteExecutionError: tmux is missing, or the project directory
                does not exist (checked before any session is created).
        """
        self.multiplexer.require()
        cwd = self.project_dir(project)
        target = self.resolve_name(project, tool, mode, name)

        if self.multiplexer.session_exists(target):
            log.debug("Session %s exists, attaching", target)
            self.multiplexer.attach(target)

        if not cwd.is_dir():
            raise RemoteExecutionError(f"Project directory not found: {cwd}")

        log.debug("Session %s missing, creating in %s", target, cwd)
        self.multiplexer.create_session(target, str(cwd), command)
