"""Morphcore command line runner."""

from morphcore.cli import app

if __name__ == "__main__":
    app()
