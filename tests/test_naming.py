"""Tests for session naming."""

from __future__ import annotations

import pytest

from devmux.session.naming import (
    NEW_NAME_RE,
    SessionMode,
    multiplexer_name,
    parse_session_arg,
    session_name,
)


class TestSessionName:
    """Test canonical session names."""

    def test_resume(self) -> None:
        assert session_name("claude", "demo") == "claude:demo"

    def test_resume_ignores_clock(self) -> None:
        def clock() -> float:
            raise AssertionError("clock read in resume mode")

        assert session_name("claude", "demo", SessionMode.RESUME, clock=clock) == "claude:demo"

    def test_resume_is_stable(self) -> None:
        assert session_name("shell", "api") == session_name("shell", "api")

    def test_new_uses_integer_seconds(self) -> None:
        name = session_name("shell", "demo", SessionMode.NEW, clock=lambda: 1700000000.75)
        assert name == "shell:demo:1700000000"
        assert NEW_NAME_RE.match(name)

    def test_new_differs_across_seconds(self) -> None:
        ticks = iter([1700000000.0, 1700000001.0])
        first = session_name("shell", "demo", SessionMode.NEW, clock=lambda: next(ticks))
        second = session_name("shell", "demo", SessionMode.NEW, clock=lambda: next(ticks))
        assert first != second

    def test_distinct_pairs_do_not_collide(self) -> None:
        assert session_name("a", "b") != session_name("b", "a")

    def test_explicit_has_no_computed_name(self) -> None:
        with pytest.raises(ValueError):
            session_name("shell", "demo", SessionMode.EXPLICIT)

    def test_requires_tool_and_project(self) -> None:
        with pytest.raises(ValueError):
            session_name("", "demo")


class TestParseSessionArg:
    """Test --session interpretation."""

    @pytest.mark.parametrize("value", [None, "", "resume"])
    def test_resume(self, value: str | None) -> None:
        assert parse_session_arg(value) == (SessionMode.RESUME, None)

    def test_new(self) -> None:
        assert parse_session_arg("new") == (SessionMode.NEW, None)

    def test_explicit(self) -> None:
        assert parse_session_arg("claude:demo:42") == (SessionMode.EXPLICIT, "claude:demo:42")


class TestMultiplexerName:
    """Test the tmux-safe mapping."""

    def test_colons_become_slashes(self) -> None:
        assert multiplexer_name("claude:demo") == "claude/demo"

    def test_no_colon_or_dot_survives(self) -> None:
        mapped = multiplexer_name("shell:my.app:1700000000")
        assert ":" not in mapped
        assert "." not in mapped

    def test_injective_on_tricky_names(self) -> None:
        names = ["a:b", "a/b", "a%3Ab", "a.b", "a%2Eb", "a%b", "a:b.c/d"]
        mapped = {multiplexer_name(n) for n in names}
        assert len(mapped) == len(names)
