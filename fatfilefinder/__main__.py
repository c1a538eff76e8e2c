"""Main entry point for FatFileFinder.

This allows the package to be run as:
    python -m fatfilefinder
"""

from .cli.main import cli

if __name__ == "__main__":
    cli()
