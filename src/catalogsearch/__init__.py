"""Catalog Search — Fuzzy search façade over album, song, and artist collections."""

__version__ = "1.0.0"
