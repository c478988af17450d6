"""Error taxonomy for devmux.

Every error the CLI surfaces derives from DevmuxError and carries the process
exit code it maps to:

- 1: usage or configuration problems (local, fixable by the operator)
- 2: the remote host is unreachable or the remote side failed
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_REMOTE = 2


class DevmuxError(Exception):
    """Base class for errors reported to the user with a short diagnostic."""

    exit_code = EXIT_USAGE


class ConfigMissingError(DevmuxError):
    """The inventory config file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config not found: {path}")
        self.path = path


class ConfigInvalidError(DevmuxError):
    """The config exists but a required field is absent or malformed."""


class NoItemsError(DevmuxError):
    """A single-choice selection was requested over an empty list.

    Distinct from the user choosing nothing, which is legal only for
    multi-choice selection.
    """


class SelectionAbortedError(DevmuxError):
    """The user closed the selection prompt (EOF on stdin)."""


class MergeIOError(DevmuxError):
    """A managed file could not be read, written, or renamed."""

    def __init__(self, path: str, reason: object) -> None:
        super().__init__(f"Cannot update {path}: {reason}")
        self.path = path


class RemoteUnreachableError(DevmuxError):
    """The remote-execution channel could not be established."""

    exit_code = EXIT_REMOTE


class RemoteExecutionError(DevmuxError):
    """The remote command ran but failed (missing project, missing tmux, ...)."""

    exit_code = EXIT_REMOTE
