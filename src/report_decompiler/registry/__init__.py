"""Report type registry for the report decompiler."""

from .builtins import build_builtin_types
from .models import ReportTypeDefinition, SectionDefinition
from .report_type_registry import ReportTypeRegistry

__all__ = [
    "ReportTypeDefinition",
    "ReportTypeRegistry",
    "SectionDefinition",
    "build_builtin_types",
]
