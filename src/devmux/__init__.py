"""devmux - remote dev-host, project and tool selection into persistent tmux sessions."""

__version__ = "0.1.0"
