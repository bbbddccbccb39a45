"""Depot - curated package repository manager."""

__version__ = "0.1.0"
