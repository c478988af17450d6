"""Host provisioning through managed blocks.

``devmux-remote setup`` adds small init snippets to ``~/.bashrc`` and a
baseline ``~/.config/tmux/tmux.conf``. Each feature owns exactly one
``devmux-managed-<feature>`` block, so rerunning setup replaces it in place
and ``--uninstall`` removes it without touching anything the user wrote.

Installing the tools themselves (starship, zoxide, ...) is left to the
platform's package manager; every snippet is guarded so a missing tool is
harmless.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from devmux import blocks, ui
from devmux.errors import ConfigInvalidError
from devmux.logging import get_logger
from devmux.picker import confirm

log = get_logger("provision")

NAMESPACE = "devmux"

BASHRC = "bashrc"
TMUX_CONF = "tmux"


@dataclass(frozen=True)
class Feature:
    name: str
    question: str
    target: str
    content: str


_PATH = """\
# Ensure ~/.local/bin is on PATH (so tools installed there are found)
export PATH="$HOME/.local/bin:$PATH"
"""

_ALIASES = """\
# devmux shell aliases
alias ..="cd .."
alias ...="cd ../.."
alias gs="git status"
alias gd="git diff"
alias gds="git diff --staged"
alias gl="git log --oneline --graph --all"
alias gco="git checkout"
alias gsw="git switch"
command -v eza  >/dev/null 2>&1 && alias ll="eza -l --group-directories-first"
command -v bat  >/dev/null 2>&1 && alias c="bat --style=plain"
command -v nvim >/dev/null 2>&1 && alias v="nvim"
ports() { lsof -i -P -n 2>/dev/null | grep LISTEN; }
"""

_ZOXIDE = """\
# zoxide smart directory jumping
command -v zoxide >/dev/null 2>&1 && eval "$(zoxide init bash)"
"""

_STARSHIP = """\
# Starship prompt
command -v starship >/dev/null 2>&1 && eval "$(starship init bash)"
"""

_TMUX = """\
set -g default-terminal "tmux-256color"
set -g prefix C-a
unbind C-b
bind C-a send-prefix
set -g base-index 1
set -g pane-base-index 1
set -g detach-on-destroy off
set -g escape-time 0
set -g history-limit 100000
set -g renumber-windows on
set -g mouse on
setw -g mode-keys vi
bind \\\\ split-window -h -c "#{pane_current_path}"
bind - split-window -v -c "#{pane_current_path}"
bind c new-window -c "#{pane_current_path}"
bind r source-file ~/.config/tmux/tmux.conf \\; display "Reloaded!"
"""

FEATURES: dict[str, Feature] = {
    f.name: f
    for f in (
        Feature("path", "Put ~/.local/bin on PATH?", BASHRC, _PATH),
        Feature("tmux", "Configure tmux (prefix, splits, vi keys)?", TMUX_CONF, _TMUX),
        Feature("starship", "Configure Starship prompt?", BASHRC, _STARSHIP),
        Feature("aliases", "Install bash aliases?", BASHRC, _ALIASES),
        Feature("zoxide", "Configure zoxide?", BASHRC, _ZOXIDE),
    )
}

ALL_FEATURES = tuple(FEATURES)


def split_list(value: str | None) -> list[str]:
    """Parse a comma-separated ``--only``/``--skip`` value."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def select_features(only: Iterable[str] = (), skip: Iterable[str] = ()) -> list[str]:
    """Features to install, in canonical order.

    Raises:
        ConfigInvalidError: A name is not a known feature.
    """
    only, skip = list(only), list(skip)
    unknown = [name for name in [*only, *skip] if name not in FEATURES]
    if unknown:
        raise ConfigInvalidError(
            f"Unknown feature(s): {', '.join(unknown)} (known: {', '.join(ALL_FEATURES)})"
        )
    wanted = set(only) if only else set(ALL_FEATURES)
    return [name for name in ALL_FEATURES if name in wanted and name not in skip]


class Provisioner:
    """Applies or removes feature blocks under one home directory."""

    def __init__(
        self,
        home: Path | None = None,
        dry_run: bool = False,
        interactive: bool = False,
        ask: Callable[[str], bool] = confirm,
    ) -> None:
        self.home = home or Path.home()
        self.dry_run = dry_run
        self.interactive = interactive
        self.ask = ask

    def path_for(self, feature: Feature) -> Path:
        if feature.target == TMUX_CONF:
            return self.home / ".config" / "tmux" / "tmux.conf"
        return self.home / ".bashrc"

    def install(self, names: Iterable[str]) -> list[str]:
        """Write the block of each feature; returns the features applied."""
        applied: list[str] = []
        for name in names:
            feature = FEATURES[name]
            if self.interactive and not self.ask(feature.question):
                log.info("Skipped %s", name)
                continue
            path = self.path_for(feature)
            if self.dry_run:
                action = "replace" if blocks.read_block(path, NAMESPACE, name) is not None else "write"
                ui.info(f"Would {action} {NAMESPACE}-managed-{name} in {path}")
            else:
                blocks.write_block(path, NAMESPACE, name, feature.content)
                ui.ok(f"{name}: updated {path}")
            applied.append(name)
        return applied

    def uninstall(self, names: Iterable[str]) -> list[str]:
        """Remove the block of each feature; unknown names only warn."""
        removed: list[str] = []
        for name in names:
            feature = FEATURES.get(name)
            if feature is None:
                ui.warn(f"Unknown feature: {name}")
                continue
            path = self.path_for(feature)
            if self.dry_run:
                ui.info(f"Would remove {NAMESPACE}-managed-{name} from {path}")
            else:
                blocks.remove_block(path, NAMESPACE, name)
                ui.ok(f"Removed {NAMESPACE}-managed-{name} from {path}")
            removed.append(name)
        return removed


def run_setup(
    only: Iterable[str] = (),
    skip: Iterable[str] = (),
    uninstall: Iterable[str] = (),
    dry_run: bool = False,
    interactive: bool = False,
    home: Path | None = None,
    ask: Callable[[str], bool] = confirm,
) -> int:
    """Entry point of ``devmux-remote setup``.

    With only ``--uninstall`` given, nothing is installed.
    """
    only, uninstall = list(only), list(uninstall)
    provisioner = Provisioner(home=home, dry_run=dry_run, interactive=interactive, ask=ask)

    ui.header("devmux host provisioning")
    if uninstall:
        provisioner.uninstall(uninstall)
        if not only:
            return 0

    provisioner.install(select_features(only, skip))
    ui.info("Run 'source ~/.bashrc' or open a new shell to apply changes.")
    return 0
