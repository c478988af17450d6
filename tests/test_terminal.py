"""Tests for the subprocess runner."""

from __future__ import annotations

import sys

from devmux.terminal import ShellResult, SubprocessRunner


class TestShellResult:
    """Tests for ShellResult dataclass."""

    def test_success_property(self) -> None:
        assert ShellResult(command="true", exit_code=0, output="").success is True

    def test_timeout_is_failure(self) -> None:
        result = ShellResult(command="sleep", exit_code=None, output="", status="timeout")
        assert result.success is False
        assert repr(result) == "<ShellResult timeout, exit=None>"

    def test_repr_ok(self) -> None:
        assert repr(ShellResult(command="x", exit_code=0, output="a\nb")) == "<ShellResult ok, 2 lines>"


class TestSubprocessRunner:
    """Tests against a real child interpreter."""

    def test_captures_output(self) -> None:
        result = SubprocessRunner().run([sys.executable, "-c", "print('hi')"])
        assert result.success
        assert result.output == "hi\n"

    def test_stderr_and_exit_code(self) -> None:
        code = "import sys; sys.stderr.write('bad'); sys.exit(3)"
        result = SubprocessRunner().run([sys.executable, "-c", code])
        assert result.exit_code == 3
        assert result.error == "bad"
        assert result.status == "error"

    def test_input(self) -> None:
        code = "import sys; print(sys.stdin.read().upper())"
        result = SubprocessRunner().run([sys.executable, "-c", code], input="abc")
        assert result.output == "ABC\n"

    def test_stdin_closed_without_input(self) -> None:
        code = "import sys; print(repr(sys.stdin.read()))"
        assert SubprocessRunner().run([sys.executable, "-c", code]).output == "''\n"

    def test_timeout(self) -> None:
        result = SubprocessRunner().run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
        assert result.status == "timeout"
        assert result.exit_code is None

    def test_missing_program(self) -> None:
        result = SubprocessRunner().run(["devmux-no-such-program"])
        assert result.exit_code == 127

    def test_output_limit(self) -> None:
        result = SubprocessRunner().run([sys.executable, "-c", "print('x' * 100)"], output_limit=10)
        assert result.truncated
        assert result.output == "x" * 10

    def test_extra_env(self) -> None:
        code = "import os; print(os.environ['DEVMUX_TEST'])"
        result = SubprocessRunner(env={"DEVMUX_TEST": "yes"}).run([sys.executable, "-c", code])
        assert result.output == "yes\n"
