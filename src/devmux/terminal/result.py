"""Command execution result dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ShellResult:
    """Result of a captured command execution.

    Attributes:
        command: The command that was executed, shell-quoted for display.
        exit_code: Process exit code (0 = success), or None on timeout.
        output: Captured stdout (may be truncated).
        error: Captured stderr.
        truncated: True if output was truncated due to output_limit.
        status: Execution status - "ok", "error" or "timeout".
        duration_ms: Execution duration in milliseconds.
    """

    command: str
    exit_code: int | None
    output: str
    error: str = ""
    truncated: bool = False
    status: str = "ok"  # "ok", "error", "timeout"
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        """True if command completed with exit code 0."""
        return self.exit_code == 0

    def __repr__(self) -> str:
        if self.success:
            lines = self.output.count("\n") + 1 if self.output else 0
            return f"<ShellResult ok, {lines} lines>"
        return f"<ShellResult {self.status}, exit={self.exit_code}>"
