"""Capability picker: single and multi choice with graceful fallback.

Example usage:
    from devmux.picker import pick_one, pick_many

    host = pick_one("Select host:", ["home", "work"])
    features = pick_many("Features:", ["aliases", "zoxide"])

Backends are probed on every call, in order, and the first available one
runs. Prompts and menus go to stderr; only callers decide what reaches
stdout.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from devmux.errors import NoItemsError, SelectionAbortedError
from devmux.logging import get_logger
from devmux.picker.backends import (
    FzfBackend,
    GumBackend,
    NumberedMenuBackend,
    TermuxDialogBackend,
)
from devmux.picker.base import PickerBackend

log = get_logger("picker")


def default_backends() -> list[PickerBackend]:
    """Fresh backend chain in fallback order."""
    return [GumBackend(), FzfBackend(), TermuxDialogBackend(), NumberedMenuBackend()]


def _available(backends: Sequence[PickerBackend] | None) -> Iterable[PickerBackend]:
    for backend in backends if backends is not None else default_backends():
        if backend.probe():
            yield backend
        else:
            log.debug("picker backend %s unavailable", backend.name)


def pick_one(
    prompt: str,
    items: Iterable[str],
    backends: Sequence[PickerBackend] | None = None,
) -> str:
    """Choose exactly one item.

    A single candidate is returned without prompting.

    Raises:
        NoItemsError: ``items`` is empty.
        SelectionAbortedError: The user cancelled.
    """
    candidates = list(items)
    if not candidates:
        raise NoItemsError(f"No items to choose from ({prompt.rstrip(': ')})")
    if len(candidates) == 1:
        return candidates[0]

    for backend in _available(backends):
        choice = backend.choose_one(prompt, candidates)
        if choice is not None:
            log.debug("picked %r via %s", choice, backend.name)
            return choice
        log.debug("picker backend %s gave no answer, trying next", backend.name)
    raise SelectionAbortedError("No picker backend produced a selection")


def pick_many(
    prompt: str,
    items: Iterable[str],
    backends: Sequence[PickerBackend] | None = None,
) -> list[str]:
    """Choose any number of items, in the order they were offered.

    An empty result is legal and means the user chose nothing.
    """
    candidates = list(dict.fromkeys(items))
    if not candidates:
        return []

    for backend in _available(backends):
        chosen = backend.choose_many(prompt, candidates)
        if chosen is not None:
            log.debug("picked %d item(s) via %s", len(chosen), backend.name)
            return chosen
        log.debug("picker backend %s gave no answer, trying next", backend.name)
    raise SelectionAbortedError("No picker backend produced a selection")


def confirm(prompt: str, default: bool = False, menu: NumberedMenuBackend | None = None) -> bool:
    """Ask a yes/no question on stderr."""
    return (menu or NumberedMenuBackend()).confirm(prompt, default=default)


__all__ = [
    "FzfBackend",
    "GumBackend",
    "NumberedMenuBackend",
    "PickerBackend",
    "TermuxDialogBackend",
    "confirm",
    "default_backends",
    "pick_many",
    "pick_one",
]
