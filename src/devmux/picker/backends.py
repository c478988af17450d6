"""Concrete picker backends, in fallback order.

1. gum: full-screen styled chooser (``choose`` for short lists, ``filter``
   for long ones)
2. fzf: plain fuzzy filter
3. termux-dialog: touch-friendly sheet/checkbox dialogs (Termux:API)
4. numbered menu: stdin/stderr only, always available
"""

from __future__ import annotations

import json
import re
import shutil
from typing import IO

from rich.console import Console
from rich.prompt import Confirm

from devmux.errors import SelectionAbortedError
from devmux.logging import get_logger
from devmux.terminal import CommandRunner, ShellResult, SubprocessRunner
from devmux.ui import console as default_console

log = get_logger("picker")

# fzf and gum both exit 130 when the user hits Esc / Ctrl-C
_ABORT_EXIT = 130

GUM_CHOOSE_LIMIT = 10

_NUMBER_RE = re.compile(r"[0-9]+")


def _check_abort(result: ShellResult, backend: str) -> None:
    if result.exit_code == _ABORT_EXIT:
        raise SelectionAbortedError(f"Selection cancelled ({backend})")


def _known(lines: list[str], items: list[str]) -> list[str] | None:
    """Keep the order of ``items``; None if anything unexpected came back."""
    wanted = set(lines)
    if not wanted <= set(items):
        return None
    return [item for item in dict.fromkeys(items) if item in wanted]


class _ExternalBackend:
    """Shared plumbing for backends that shell out to a chooser program."""

    name = ""
    program = ""

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self._runner = runner or SubprocessRunner()

    def probe(self) -> bool:
        return shutil.which(self.program) is not None

    def _select(self, argv: list[str], items: list[str] | None = None) -> list[str] | None:
        stdin = "\n".join(items) + "\n" if items is not None else None
        result = self._runner.run_selection(argv, input=stdin)
        _check_abort(result, self.name)
        if not result.success:
            log.debug("%s exited %s", self.name, result.exit_code)
            return None
        return [line for line in result.output.splitlines() if line]


class GumBackend(_ExternalBackend):
    name = "gum"
    program = "gum"

    def choose_one(self, prompt: str, items: list[str]) -> str | None:
        if len(items) <= GUM_CHOOSE_LIMIT:
            lines = self._select(["gum", "choose", "--header", prompt, *items])
        else:
            lines = self._select(["gum", "filter", "--header", prompt], items)
        if not lines:
            return None
        picked = _known(lines[:1], items)
        return picked[0] if picked else None

    def choose_many(self, prompt: str, items: list[str]) -> list[str] | None:
        # Failure other than a cancel is an empty selection, not a retry
        lines = self._select(["gum", "choose", "--no-limit", "--header", prompt, *items]) or []
        return _known(lines, items)


class FzfBackend(_ExternalBackend):
    name = "fzf"
    program = "fzf"

    def _argv(self, prompt: str, multi: bool) -> list[str]:
        argv = ["fzf", f"--prompt={prompt} ", "--height=~20", "--reverse"]
        if multi:
            argv.append("--multi")
        return argv

    def choose_one(self, prompt: str, items: list[str]) -> str | None:
        lines = self._select(self._argv(prompt, multi=False), items)
        if not lines:
            return None
        picked = _known(lines[:1], items)
        return picked[0] if picked else None

    def choose_many(self, prompt: str, items: list[str]) -> list[str] | None:
        # Failure other than a cancel is an empty selection, not a retry
        lines = self._select(self._argv(prompt, multi=True), items) or []
        return _known(lines, items)


class TermuxDialogBackend(_ExternalBackend):
    """Termux:API dialogs.

    Items travel as one comma-separated ``-v`` value, so lists containing
    commas are left to the next backend.
    """

    name = "termux-dialog"
    program = "termux-dialog"

    def _dialog(self, widget: str, prompt: str, items: list[str]) -> dict | None:
        if any("," in item for item in items):
            return None
        lines = self._select(["termux-dialog", widget, "-t", prompt, "-v", ",".join(items)])
        if not lines:
            return None
        try:
            data = json.loads("\n".join(lines))
        except json.JSONDecodeError:
            log.debug("termux-dialog returned non-JSON output")
            return None
        return data if isinstance(data, dict) else None

    def choose_one(self, prompt: str, items: list[str]) -> str | None:
        data = self._dialog("sheet", prompt, items)
        if not data:
            return None
        text = data.get("text")
        return text if text in items else None

    def choose_many(self, prompt: str, items: list[str]) -> list[str] | None:
        data = self._dialog("checkbox", prompt, items)
        if data is None:
            return None
        values = data.get("values") or []
        texts = [v.get("text", "") if isinstance(v, dict) else str(v) for v in values]
        return _known([t.strip() for t in texts if t.strip()], items)


class NumberedMenuBackend:
    """Numbered menu on stderr, answers read from stdin.

    The backend of last resort: needs nothing but a TTY and never fails on
    malformed input. End of input is an abort.
    """

    name = "menu"

    def __init__(self, console: Console | None = None, stream: IO[str] | None = None) -> None:
        self.console = console or default_console
        self.stream = stream

    def probe(self) -> bool:
        return True

    def _read(self, prompt: str = "#? ") -> str:
        try:
            line = self.console.input(prompt, markup=False, stream=self.stream)
        except EOFError:
            raise SelectionAbortedError("Selection cancelled (end of input)") from None
        if self.stream is not None and not line:
            raise SelectionAbortedError("Selection cancelled (end of input)")
        return line.strip()

    def _menu(self, header: str, items: list[str]) -> None:
        self.console.print(header, markup=False)
        for number, item in enumerate(items, start=1):
            self.console.print(f"  {number}) {item}", markup=False)

    def choose_one(self, prompt: str, items: list[str]) -> str:
        self._menu(prompt, items)
        while True:
            choice = self._read()
            if _NUMBER_RE.fullmatch(choice) and 1 <= int(choice) <= len(items):
                return items[int(choice) - 1]
            self.console.print(f"Invalid choice. Enter 1-{len(items)}.", markup=False)

    def choose_many(self, prompt: str, items: list[str]) -> list[str]:
        while True:
            self._menu(f"{prompt} (space-separated numbers, empty=none)", items)
            answer = self._read()
            if not answer:
                return []
            numbers = self._parse_numbers(answer, len(items))
            if numbers is None:
                continue
            chosen = set(numbers)
            picked = [item for n, item in enumerate(items, start=1) if n in chosen]
            self.console.print()
            self.console.print("Selected:")
            for item in picked:
                self.console.print(f"  - {item}", markup=False)
            if self.confirm("  Confirm?"):
                return picked

    def _parse_numbers(self, answer: str, count: int) -> list[int] | None:
        numbers: list[int] = []
        for token in answer.split():
            if not _NUMBER_RE.fullmatch(token) or not 1 <= int(token) <= count:
                self.console.print(f"Invalid: {token}. Enter numbers 1-{count}.", markup=False)
                return None
            numbers.append(int(token))
        return numbers

    def confirm(self, prompt: str, default: bool = False) -> bool:
        try:
            return Confirm.ask(prompt, console=self.console, default=default, stream=self.stream)
        except EOFError:
            raise SelectionAbortedError("Selection cancelled (end of input)") from None
