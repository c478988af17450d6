"""Session addressing, client dispatch and host orchestration."""

from devmux.session.dispatcher import (
    DispatchState,
    Dispatcher,
    Plan,
    Request,
    Selection,
)
from devmux.session.multiplexer import Multiplexer
from devmux.session.naming import (
    SessionMode,
    multiplexer_name,
    parse_session_arg,
    session_name,
)
from devmux.session.orchestrator import Orchestrator, list_projects

__all__ = [
    "DispatchState",
    "Dispatcher",
    "Multiplexer",
    "Orchestrator",
    "Plan",
    "Request",
    "SessionMode",
    "Selection",
    "list_projects",
    "multiplexer_name",
    "parse_session_arg",
    "session_name",
]
