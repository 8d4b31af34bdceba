"""Report text decompilation."""

from .patterns import (
    DEFAULT_KNOWLEDGE_BASE,
    CategoryRule,
    CompliancePattern,
    KnowledgeBase,
    MetadataField,
)
from .report_decompiler import ReportDecompiler

__all__ = [
    "DEFAULT_KNOWLEDGE_BASE",
    "CategoryRule",
    "CompliancePattern",
    "KnowledgeBase",
    "MetadataField",
    "ReportDecompiler",
]
