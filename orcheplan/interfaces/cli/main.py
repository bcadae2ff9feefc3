"""Entry point for the orcheplan CLI.

Usage:
    python -m orcheplan.interfaces.cli.main

Or via installed entry point:
    orcheplan <command>
"""

import sys

from orcheplan.domain.shared.errors import TransientStoreError
from orcheplan.interfaces.cli import app
from orcheplan.interfaces.cli.common import EXIT_TRANSIENT, print_error


def main() -> None:
    """Run the orcheplan CLI application."""
    try:
        app()
    except TransientStoreError as e:
        print_error(f"Workspace temporarily unavailable, try again: {e}")
        sys.exit(EXIT_TRANSIENT)


if __name__ == "__main__":
    main()
