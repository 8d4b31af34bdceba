"""Enumerations for the report decompiler."""

from enum import Enum


class InputFormat(Enum):
    """Source formats accepted by the decompiler."""
    TEXT = "text"
    MARKDOWN = "markdown"
    PDF_TEXT = "pdf_text"
    PASTED = "pasted"


class SectionType(Enum):
    """Kinds of sections produced by line classification."""
    HEADING = "heading"
    SUBHEADING = "subheading"
    LIST = "list"
    PARAGRAPH = "paragraph"


class TermCategory(Enum):
    """Categories assigned to recognised arboricultural terminology."""
    TECHNICAL = "technical"
    LEGAL = "legal"
    COMPLIANCE = "compliance"
    SPECIES = "species"
    MEASUREMENT = "measurement"
    GENERAL = "general"


class ComplianceType(Enum):
    """Kinds of compliance references found in report text."""
    STANDARD = "standard"
    REGULATION = "regulation"
    REQUIREMENT = "requirement"
    GUIDELINE = "guideline"
    BEST_PRACTICE = "best_practice"


class DecompilerEvent(Enum):
    """Events emitted while a report is decompiled."""
    INGESTED = "decompiler:ingested"
    SECTIONS_DETECTED = "decompiler:sectionsDetected"
    METADATA_EXTRACTED = "decompiler:metadataExtracted"
    TERMINOLOGY_EXTRACTED = "decompiler:terminologyExtracted"
    COMPLIANCE_MARKERS_EXTRACTED = "decompiler:complianceMarkersExtracted"
    STRUCTURE_BUILT = "decompiler:structureBuilt"
    COMPLETED = "decompiler:completed"
    ERROR = "decompiler:error"
