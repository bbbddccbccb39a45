"""Depot command-line interface."""

from depot import __version__

__all__ = ["__version__"]
