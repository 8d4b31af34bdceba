"""Abstract interfaces for the report decompiler."""

from .decompiler import IReportDecompiler
from .storage import IReportStorage

__all__ = [
    "IReportDecompiler",
    "IReportStorage",
]
