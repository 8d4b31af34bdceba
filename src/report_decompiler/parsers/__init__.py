"""Report file loading and report serialization."""

from .exceptions import DocumentCorruptedError, ParseError, UnsupportedFormatError
from .loader import DocumentLoader, LoadedText
from .serialization import ReportSerializer, deserialize_report, serialize_report

__all__ = [
    "DocumentLoader",
    "LoadedText",
    "ReportSerializer",
    "serialize_report",
    "deserialize_report",
    "ParseError",
    "DocumentCorruptedError",
    "UnsupportedFormatError",
]
