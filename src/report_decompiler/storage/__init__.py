"""Persistent storage for decompiled reports."""

from .database import DatabaseManager, get_database_url
from .models import Base, DecompiledReportModel
from .report_storage import DecompiledReportStorage

__all__ = [
    "Base",
    "DatabaseManager",
    "DecompiledReportModel",
    "DecompiledReportStorage",
    "get_database_url",
]
