"""A tile-based snake arcade game with a level editor and an SQLite high-score table."""

__version__ = "0.1.0"