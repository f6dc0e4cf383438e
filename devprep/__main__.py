"""
Entry point for the devprep CLI application.
"""

import sys
from devprep.cli.main import app


def main():
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        print("\n\nCancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
