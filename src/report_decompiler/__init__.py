"""
Report Decompiler

Turns unstructured arboricultural report text into a structured,
machine-readable description of its sections, metadata, terminology
and compliance references.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
    ComplianceType,
    DecompilerEvent,
    InputFormat,
    SectionType,
    TermCategory,
)
from .models.report import (
    ComplianceMarker,
    DecompiledReport,
    DecompiledSection,
    ReportMetadata,
    SectionMetadata,
    StructureMap,
    TerminologyEntry,
)
from .exceptions import (
    DecompilerError,
    InvalidInputError,
    RegistryError,
    ReportNotFoundError,
)
from .decompiler import DEFAULT_KNOWLEDGE_BASE, KnowledgeBase, ReportDecompiler
from .config import (
    ConfigurationError,
    ConfigurationManager,
    DecompilerConfig,
    ValidationResult,
)
from .parsers import DocumentLoader, LoadedText, ReportSerializer
from .registry import ReportTypeDefinition, ReportTypeRegistry, SectionDefinition
from .storage import DatabaseManager, DecompiledReportStorage

__all__ = [
    "ComplianceType",
    "DecompilerEvent",
    "InputFormat",
    "SectionType",
    "TermCategory",
    "ComplianceMarker",
    "DecompiledReport",
    "DecompiledSection",
    "ReportMetadata",
    "SectionMetadata",
    "StructureMap",
    "TerminologyEntry",
    "DecompilerError",
    "InvalidInputError",
    "RegistryError",
    "ReportNotFoundError",
    "DEFAULT_KNOWLEDGE_BASE",
    "KnowledgeBase",
    "ReportDecompiler",
    "ConfigurationError",
    "ConfigurationManager",
    "DecompilerConfig",
    "ValidationResult",
    "DocumentLoader",
    "LoadedText",
    "ReportSerializer",
    "ReportTypeDefinition",
    "ReportTypeRegistry",
    "SectionDefinition",
    "DatabaseManager",
    "DecompiledReportStorage",
]
