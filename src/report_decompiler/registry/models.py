"""Report type definition models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class SectionDefinition:
    """A section a report of some type is expected to contain."""
    id: str
    name: str
    description: str = ""
    required: bool = True


@dataclass
class ReportTypeDefinition:
    """
    Definition of a kind of report.
    
    Lists the sections reports of this type contain and the standards
    they are written against; the registry uses both to recognise the
    type of a decompiled report.
    """
    id: str
    name: str
    description: str = ""
    category: str = "general"
    required_sections: List[SectionDefinition] = field(default_factory=list)
    optional_sections: List[SectionDefinition] = field(default_factory=list)
    compliance_standards: List[str] = field(default_factory=list)
    version: str = "1.0.0"
    deprecated: bool = False
    deprecated_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.required_sections is None:
            self.required_sections = []
        if self.optional_sections is None:
            self.optional_sections = []
        if self.compliance_standards is None:
            self.compliance_standards = []

    @property
    def all_sections(self) -> List[SectionDefinition]:
        return self.required_sections + self.optional_sections
