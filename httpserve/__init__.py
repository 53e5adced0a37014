"""Serve a directory from memory over HTTP(S)."""

__version__ = "0.1.0"
