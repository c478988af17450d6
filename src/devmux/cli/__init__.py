"""Entry points: ``devmux`` (client) and ``devmux-remote`` (host)."""
