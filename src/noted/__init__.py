"""Noted - manage note vaults from the terminal."""

__version__ = "0.1.0"
