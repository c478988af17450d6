"""Client-side session dispatch.

Walks a request through SELECTING -> RESOLVED -> DISPATCHED -> ATTACHED:
fills in host, project and tool (prompting only for what the flags left
out), mints the canonical session name, and runs ``devmux-remote`` on the
host attached to this terminal.

The session name is always computed here and passed along pre-minted, so
the host never has to agree with the client's clock.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from devmux.config.inventory import list_projects
from devmux.config.schema import Host, Inventory, Settings, Tool
from devmux.errors import RemoteExecutionError
from devmux.logging import get_logger
from devmux.picker import pick_one
from devmux.remote import Channel, ensure_reachable, open_channel, remote_argv
from devmux.session.naming import Clock, SessionMode, parse_session_arg, session_name

log = get_logger("dispatch")

PickOne = Callable[[str, Sequence[str]], str]
ChannelFactory = Callable[[Host], Channel]


class DispatchState(str, Enum):
    SELECTING = "selecting"
    RESOLVED = "resolved"
    DISPATCHED = "dispatched"
    ATTACHED = "attached"


@dataclass
class Request:
    """What the operator asked for on the command line. None means "ask"."""

    host: str | None = None
    project: str | None = None
    tool: str | None = None
    session: str | None = None
    fast: bool = False


@dataclass(frozen=True)
class Selection:
    host: Host
    project: str
    tool: Tool
    mode: SessionMode = SessionMode.RESUME
    explicit_name: str | None = None


@dataclass(frozen=True)
class Plan:
    """A resolved dispatch: the session name and the host command line."""

    selection: Selection
    session: str
    command: str


class Dispatcher:
    """Drives one dispatch from a Request to an attached session."""

    def __init__(
        self,
        inventory: Inventory,
        settings: Settings | None = None,
        channel_factory: ChannelFactory | None = None,
        pick: PickOne = pick_one,
        clock: Clock = time.time,
    ) -> None:
        self.inventory = inventory
        self.settings = settings or Settings()
        self.channel_factory = channel_factory or self._open
        self.pick = pick
        self.clock = clock
        self.state = DispatchState.SELECTING
        self._channels: dict[str, Channel] = {}

    def _open(self, host: Host) -> Channel:
        return open_channel(host, ssh=self.settings.ssh, remote=self.settings.remote)

    def channel(self, host: Host) -> Channel:
        if host.key not in self._channels:
            self._channels[host.key] = self.channel_factory(host)
        return self._channels[host.key]

    def select(self, request: Request) -> Selection:
        """Fill in every field the request left open.

        The reachability preflight runs right after the host is known, before
        anything else goes over the channel, unless ``request.fast`` is set.

        Raises:
            ConfigInvalidError: A flagged host or tool key is unknown.
            RemoteUnreachableError: The preflight failed.
        """
        self.state = DispatchState.SELECTING

        if request.host:
            host = self.inventory.host(request.host)
        else:
            host = self.inventory.host(self.pick("Select host:", self.inventory.host_keys))

        channel = self.channel(host)
        if not request.fast:
            ensure_reachable(channel)

        # A flagged project is not checked here; the host fails fast on it
        project = request.project
        if not project:
            projects = list_projects(channel, self.settings.remote.projects_root)
            project = self.pick(f"Select project on {host.key}:", projects)

        if request.tool:
            tool = self.inventory.tool(request.tool)
        else:
            tool = self.inventory.tool(self.pick("Select tool:", self.inventory.tool_keys))

        mode, explicit = parse_session_arg(request.session)
        selection = Selection(host=host, project=project, tool=tool, mode=mode, explicit_name=explicit)
        log.debug("Selected %s", selection)
        return selection

    def resolve(self, selection: Selection) -> Plan:
        """Mint the session name and build the host command line."""
        if selection.mode is SessionMode.EXPLICIT and selection.explicit_name:
            name = selection.explicit_name
        else:
            name = session_name(
                selection.tool.key, selection.project, selection.mode, clock=self.clock
            )

        # Same root as the project listing, so the picked project exists there
        args = [
            "--session", name,
            "--tool", selection.tool.key,
            "--cmd", selection.tool.command,
            "--root", self.settings.remote.projects_root,
        ]
        if selection.mode is SessionMode.NEW:
            args.append("--new")
        args += ["--", selection.project]
        command = remote_argv(self.settings.remote, *args)

        self.state = DispatchState.RESOLVED
        log.debug("Resolved session %s: %s", name, command)
        return Plan(selection=selection, session=name, command=command)

    def dispatch(self, plan: Plan) -> int:
        """Hand the terminal to the host until the session detaches or ends.

        Raises:
            RemoteUnreachableError: ssh could not connect (exit 255).
            RemoteExecutionError: The host command exited non-zero.
        """
        channel = self.channel(plan.selection.host)
        self.state = DispatchState.DISPATCHED
        log.info("Dispatching %s to %s", plan.session, channel.label)
        code = channel.run_interactive(plan.command)
        if code != 0:
            raise RemoteExecutionError(
                f"Session {plan.session} on {plan.selection.host.key} failed (exit {code})"
            )
        self.state = DispatchState.ATTACHED
        return code

    def run(self, request: Request) -> int:
        return self.dispatch(self.resolve(self.select(request)))
