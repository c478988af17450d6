"""CLI entry point for ``python -m devmux``."""

import sys


def main() -> int:
    """Main entry point for the devmux client CLI."""
    from devmux.cli.client import run_cli

    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
