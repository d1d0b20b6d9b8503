"""Discussio: Stremio addon linking titles to discussion searches."""

__version__ = "1.0.0"
