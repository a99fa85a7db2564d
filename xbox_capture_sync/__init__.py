"""Sync Xbox screenshots and game clips from xbl.io to a local directory."""

__version__ = "0.1.0"
