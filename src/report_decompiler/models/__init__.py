"""Data models and enums for the report decompiler."""

from .enums import (
    ComplianceType,
    DecompilerEvent,
    InputFormat,
    SectionType,
    TermCategory,
)
from .report import (
    ComplianceMarker,
    DecompiledReport,
    DecompiledSection,
    ReportMetadata,
    SectionMetadata,
    StructureMap,
    TerminologyEntry,
)

__all__ = [
    # Enums
    "ComplianceType",
    "DecompilerEvent",
    "InputFormat",
    "SectionType",
    "TermCategory",
    # Report models
    "ComplianceMarker",
    "DecompiledReport",
    "DecompiledSection",
    "ReportMetadata",
    "SectionMetadata",
    "StructureMap",
    "TerminologyEntry",
]
