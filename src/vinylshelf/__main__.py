"""Main entry point for ``python -m vinylshelf``."""

import sys

from vinylshelf.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
