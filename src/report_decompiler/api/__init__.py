"""HTTP interface for the report decompiler."""

from .app import create_app

__all__ = ["create_app"]
