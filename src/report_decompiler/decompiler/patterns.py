"""Knowledge base for report decompilation.

This module holds the fixed vocabulary, classification rules and regex
patterns the decompiler runs over report text. Everything here is data:
the decompiler iterates over it, so terms and patterns can be extended
without touching the detection code.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Pattern, Tuple

from ..models.enums import ComplianceType, TermCategory


@dataclass(frozen=True)
class CategoryRule:
    """Assigns a category to any term containing one of the fragments."""
    category: TermCategory
    fragments: Tuple[str, ...]

    def applies_to(self, term: str) -> bool:
        return any(fragment in term for fragment in self.fragments)


@dataclass(frozen=True)
class CompliancePattern:
    """Pattern definition for a compliance reference."""
    pattern: str
    standard: str
    type: ComplianceType
    flags: int = re.IGNORECASE

    def compile(self) -> Pattern[str]:
        return re.compile(self.pattern, self.flags)


@dataclass(frozen=True)
class MetadataField:
    """Colon-delimited label that fills a metadata field."""
    field_name: str
    labels: Tuple[str, ...]  # lower-case, including the trailing colon

    def matches(self, line_lower: str) -> bool:
        return any(label in line_lower for label in self.labels)


# Heading and list line patterns. The all-caps heading pattern depends on
# a configurable threshold and is built by build_all_caps_pattern().
MARKDOWN_HEADING = re.compile(r"^(#{1,6})\s")
ROMAN_HEADING = re.compile(r"^[IVX]+\.\s")
NUMERIC_HEADING = re.compile(r"^\d+\.\d+\s")
BULLET_ITEM = re.compile(r"^[-*•]\s")
NUMBERED_ITEM = re.compile(r"^\d+[.)]\s")
BULLET_PREFIX = re.compile(r"^[-*•]")
NUMBERED_PREFIX = re.compile(r"^\d+[.)]")
DIGIT = re.compile(r"\d")
NON_WORD = re.compile(r"[^\w]", re.ASCII)


def build_all_caps_pattern(min_tail: int) -> Pattern[str]:
    """Pattern for ALL CAPS heading lines: a capital followed by min_tail or more caps/spaces."""
    return re.compile(rf"^[A-Z][A-Z\s]{{{min_tail},}}$")


TECHNICAL_TERMS: Tuple[str, ...] = (
    "arboricultural", "bs5837", "rpa", "dbh", "canopy", "root", "protection",
    "mitigation", "assessment", "methodology", "compliance", "category",
    "species", "condition", "hazard", "risk", "inspection", "survey",
)

# Checked in order; the first rule whose fragment occurs in the term wins.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(TermCategory.TECHNICAL, ("arboricultural", "methodology")),
    CategoryRule(TermCategory.LEGAL, ("legal", "regulation")),
    CategoryRule(TermCategory.COMPLIANCE, ("compliance", "standard")),
    CategoryRule(TermCategory.SPECIES, ("species", "tree")),
    CategoryRule(TermCategory.MEASUREMENT, ("dbh", "measurement")),
)

COMPLIANCE_PATTERNS: Tuple[CompliancePattern, ...] = (
    CompliancePattern(r"BS\s*5837[:]?\s*2012", "BS5837:2012", ComplianceType.STANDARD),
    CompliancePattern(
        r"Arboricultural\s+Association", "Arboricultural Association", ComplianceType.GUIDELINE
    ),
    CompliancePattern(r"RPA\s*\(Registered\s+Practitioner\)", "RPA", ComplianceType.REQUIREMENT),
    CompliancePattern(r"ISO\s*14001", "ISO14001", ComplianceType.STANDARD),
    CompliancePattern(r"Tree\s+Preservation\s+Order", "TPO", ComplianceType.REGULATION),
)

STOP_WORDS: frozenset = frozenset(
    {"the", "and", "for", "with", "that", "this", "are", "was", "were"}
)

METADATA_FIELDS: Tuple[MetadataField, ...] = (
    MetadataField("author", ("author:",)),
    MetadataField("date", ("date:",)),
    MetadataField("client", ("client:",)),
    MetadataField("site_address", ("site:", "location:")),
    MetadataField("report_type", ("report type:",)),
)

APPENDIX_MARKERS: Tuple[str, ...] = ("appendix",)
METHODOLOGY_MARKERS: Tuple[str, ...] = ("methodology",)
LEGAL_MARKERS: Tuple[str, ...] = ("legal", "compliance", "regulation")


@dataclass(frozen=True)
class KnowledgeBase:
    """
    Vocabulary and patterns used by the decompiler.

    Instances are immutable; ``extend`` returns a new knowledge base with
    additional terms, compliance patterns or stop words appended.
    """
    terms: Tuple[str, ...] = TECHNICAL_TERMS
    category_rules: Tuple[CategoryRule, ...] = CATEGORY_RULES
    compliance_patterns: Tuple[CompliancePattern, ...] = COMPLIANCE_PATTERNS
    stop_words: frozenset = STOP_WORDS
    metadata_fields: Tuple[MetadataField, ...] = METADATA_FIELDS
    appendix_markers: Tuple[str, ...] = APPENDIX_MARKERS
    methodology_markers: Tuple[str, ...] = METHODOLOGY_MARKERS
    legal_markers: Tuple[str, ...] = LEGAL_MARKERS
    _term_patterns: Tuple[Tuple[str, Pattern[str]], ...] = field(
        default=(), init=False, repr=False, compare=False
    )
    _compiled_compliance: Tuple[Tuple[CompliancePattern, Pattern[str]], ...] = field(
        default=(), init=False, repr=False, compare=False
    )

    def __post_init__(self):
        object.__setattr__(
            self,
            "_term_patterns",
            tuple(
                (term, re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE | re.ASCII))
                for term in self.terms
            ),
        )
        object.__setattr__(
            self,
            "_compiled_compliance",
            tuple((p, p.compile()) for p in self.compliance_patterns),
        )

    @property
    def term_patterns(self) -> Tuple[Tuple[str, Pattern[str]], ...]:
        """Whole-word, case-insensitive pattern for each vocabulary term."""
        return self._term_patterns

    @property
    def compiled_compliance_patterns(self) -> Tuple[Tuple[CompliancePattern, Pattern[str]], ...]:
        return self._compiled_compliance

    def categorize_term(self, term: str) -> TermCategory:
        """Classify a term by substring against the category rules."""
        for rule in self.category_rules:
            if rule.applies_to(term):
                return rule.category
        return TermCategory.GENERAL

    def extend(
        self,
        terms: Optional[Iterable[str]] = None,
        compliance_patterns: Optional[Iterable[CompliancePattern]] = None,
        stop_words: Optional[Iterable[str]] = None,
    ) -> "KnowledgeBase":
        """Return a copy with extra terms, patterns and stop words appended."""
        new_terms: List[str] = list(self.terms)
        for term in terms or ():
            term = term.strip().lower()
            if term and term not in new_terms:
                new_terms.append(term)

        return replace(
            self,
            terms=tuple(new_terms),
            compliance_patterns=self.compliance_patterns + tuple(compliance_patterns or ()),
            stop_words=self.stop_words | frozenset(w.lower() for w in stop_words or ()),
        )


DEFAULT_KNOWLEDGE_BASE = KnowledgeBase()
