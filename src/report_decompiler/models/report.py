"""Decompiled report data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .enums import ComplianceType, InputFormat, SectionType, TermCategory


@dataclass(frozen=True)
class SectionMetadata:
    """Statistics derived from the single line a section was built from."""
    word_count: int
    line_count: int
    has_numbers: bool
    has_bullets: bool
    has_tables: bool
    confidence: float


@dataclass(frozen=True)
class DecompiledSection:
    """
    A recognised line of report text.
    
    Sections are produced one per classified line, in document order,
    and are never modified afterwards.
    """
    id: str
    type: SectionType
    level: int
    title: str
    content: str
    metadata: SectionMetadata


@dataclass
class ReportMetadata:
    """
    Document-level metadata.
    
    Labelled fields come from the first lines of the report; the word
    count and keywords are computed over the whole normalised text.
    """
    word_count: int = 0
    keywords: List[str] = field(default_factory=list)
    title: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    client: Optional[str] = None
    site_address: Optional[str] = None
    report_type: Optional[str] = None

    def __post_init__(self):
        if self.keywords is None:
            self.keywords = []


@dataclass(frozen=True)
class TerminologyEntry:
    """A known term found in the report, with the text around its first use."""
    term: str
    context: str
    frequency: int
    category: TermCategory
    confidence: float


@dataclass(frozen=True)
class ComplianceMarker:
    """A reference to a named standard or regulation."""
    type: ComplianceType
    text: str
    standard: str
    confidence: float


@dataclass(frozen=True)
class StructureMap:
    """Aggregate statistics describing how a report is sectioned."""
    section_count: int = 0
    depth: int = 0
    average_section_length: float = 0.0
    has_appendices: bool = False
    has_methodology: bool = False
    has_legal_sections: bool = False


@dataclass
class DecompiledReport:
    """
    Result of decompiling a report.
    
    Bundles the detected sections with the metadata, terminology,
    compliance markers and structure summary extracted from the same
    text, together with an overall confidence score.
    """
    id: str
    sections: List[DecompiledSection] = field(default_factory=list)
    metadata: ReportMetadata = field(default_factory=ReportMetadata)
    terminology: List[TerminologyEntry] = field(default_factory=list)
    compliance_markers: List[ComplianceMarker] = field(default_factory=list)
    structure_map: StructureMap = field(default_factory=StructureMap)
    confidence_score: float = 0.0
    processing_time_ms: float = 0.0
    input_format: InputFormat = InputFormat.TEXT
    source_hash: str = ""
    detected_report_type: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.sections is None:
            self.sections = []
        if self.terminology is None:
            self.terminology = []
        if self.compliance_markers is None:
            self.compliance_markers = []
