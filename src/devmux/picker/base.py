"""Picker backend protocol."""

from __future__ import annotations

from typing import Protocol


class PickerBackend(Protocol):
    """One way of asking the user to choose.

    ``choose_*`` return None when the backend produced no usable answer
    (crashed, unsupported items, garbage output); the picker then moves on
    to the next backend. A deliberate user abort raises
    SelectionAbortedError instead.
    """

    name: str

    def probe(self) -> bool:
        """True if the backend can run here."""
        ...

    def choose_one(self, prompt: str, items: list[str]) -> str | None:
        ...

    def choose_many(self, prompt: str, items: list[str]) -> list[str] | None:
        ...
