"""Report decompiler.

Breaks raw arboricultural report text into sections, document metadata,
terminology, compliance markers and a structure summary. Every stage is a
pure function of the normalised text and the knowledge base.
"""

import hashlib
import logging
import re
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..config.models import DecompilerConfig
from ..exceptions import InvalidInputError
from ..interfaces.decompiler import IReportDecompiler
from ..interfaces.storage import IReportStorage
from ..models.enums import DecompilerEvent, InputFormat, SectionType
from ..models.report import (
    ComplianceMarker,
    DecompiledReport,
    DecompiledSection,
    ReportMetadata,
    SectionMetadata,
    StructureMap,
    TerminologyEntry,
)
from ..parsers.loader import DocumentLoader
from ..registry.report_type_registry import ReportTypeRegistry
from .patterns import (
    BULLET_ITEM,
    BULLET_PREFIX,
    DEFAULT_KNOWLEDGE_BASE,
    DIGIT,
    MARKDOWN_HEADING,
    NON_WORD,
    NUMBERED_ITEM,
    NUMBERED_PREFIX,
    NUMERIC_HEADING,
    ROMAN_HEADING,
    KnowledgeBase,
    build_all_caps_pattern,
)


logger = logging.getLogger(__name__)

EventListener = Callable[[DecompilerEvent, Dict[str, Any]], None]

_TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


class ReportDecompiler(IReportDecompiler):
    """
    Heuristic decompiler for report text.

    Runs a fixed sequence of passes over the text: normalisation, line
    classification, metadata extraction, terminology and compliance
    detection, then folds the results into a structure map and an overall
    confidence score.

    The decompiler holds no per-call state, so a single instance can be
    shared between callers.
    """

    def __init__(
        self,
        config: Optional[DecompilerConfig] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        registry: Optional[ReportTypeRegistry] = None,
        storage: Optional[IReportStorage] = None,
    ):
        """
        Initialize the decompiler.

        Args:
            config: Thresholds and fixed scores (defaults if not provided).
            knowledge_base: Vocabulary and patterns (built-in if not provided).
            registry: Optional report type registry used to label reports.
            storage: Optional storage that receives every completed report.
        """
        self.config = config or DecompilerConfig()
        self.knowledge_base = knowledge_base or DEFAULT_KNOWLEDGE_BASE
        self._registry = registry
        self._storage = storage
        self._all_caps_heading = build_all_caps_pattern(self.config.all_caps_min_tail)
        self._listeners: Dict[DecompilerEvent, List[EventListener]] = {
            event: [] for event in DecompilerEvent
        }

    # =========================================================================
    # Public API
    # =========================================================================

    def ingest(
        self,
        text: str,
        input_format: Union[InputFormat, str] = InputFormat.TEXT,
    ) -> DecompiledReport:
        """
        Decompile report text into its structured components.

        Args:
            text: Raw report text. Any string is accepted, including "".
            input_format: Where the text came from. Recorded on the report
                but does not change how it is processed.

        Returns:
            The DecompiledReport.

        Raises:
            InvalidInputError: If text is not a string or the input format
                is unknown.
        """
        start_time = time.perf_counter()

        if not isinstance(text, str):
            raise InvalidInputError(
                message=f"Report text must be a string, got {type(text).__name__}",
                location="text",
            )
        fmt = self._coerce_input_format(input_format)
        report_id = str(uuid.uuid4())

        try:
            self._emit(DecompilerEvent.INGESTED, {
                "report_id": report_id,
                "input_format": fmt.value,
                "text_length": len(text),
            })

            normalized = self.normalize_text(text)

            sections = self.detect_sections(normalized)
            self._emit(DecompilerEvent.SECTIONS_DETECTED, {
                "report_id": report_id,
                "section_count": len(sections),
            })

            metadata = self.extract_metadata(normalized)
            self._emit(DecompilerEvent.METADATA_EXTRACTED, {
                "report_id": report_id,
                "metadata": metadata,
            })

            terminology = self.extract_terminology(normalized)
            self._emit(DecompilerEvent.TERMINOLOGY_EXTRACTED, {
                "report_id": report_id,
                "terminology_count": len(terminology),
            })

            markers = self.detect_compliance_markers(normalized)
            self._emit(DecompilerEvent.COMPLIANCE_MARKERS_EXTRACTED, {
                "report_id": report_id,
                "compliance_count": len(markers),
            })

            structure_map = self.build_structure_map(sections)
            self._emit(DecompilerEvent.STRUCTURE_BUILT, {
                "report_id": report_id,
                "structure_map": structure_map,
            })

            report = DecompiledReport(
                id=report_id,
                sections=sections,
                metadata=metadata,
                terminology=terminology,
                compliance_markers=markers,
                structure_map=structure_map,
                confidence_score=self.calculate_confidence(sections, terminology, markers),
                input_format=fmt,
                source_hash=self.hash_text(text),
                created_at=datetime.now(timezone.utc),
            )
            report.detected_report_type = self._detect_report_type(report, normalized)
            report.processing_time_ms = (time.perf_counter() - start_time) * 1000.0

            self._emit(DecompilerEvent.COMPLETED, {
                "report_id": report_id,
                "section_count": len(sections),
                "processing_time_ms": report.processing_time_ms,
                "confidence_score": report.confidence_score,
            })
        except Exception as exc:
            self._emit(DecompilerEvent.ERROR, {
                "report_id": report_id,
                "error": str(exc),
                "input_format": fmt.value,
                "text_length": len(text),
            })
            raise

        if self._storage is not None:
            self._storage.store_report(report)

        logger.info(
            f"Decompiled report {report_id}: {len(sections)} sections, "
            f"confidence {report.confidence_score:.2f}"
        )
        return report

    def ingest_file(self, file_path: Union[str, Path]) -> DecompiledReport:
        """
        Load a report file and decompile its text.

        The input format is taken from the file type (PDF files are
        ingested as ``pdf_text``, Markdown as ``markdown``).
        """
        loaded = DocumentLoader().load(file_path)
        return self.ingest(loaded.text, loaded.input_format)

    def on(self, event: Union[DecompilerEvent, str], listener: EventListener) -> None:
        """Register a listener for a decompiler event."""
        self._listeners[DecompilerEvent(event)].append(listener)

    def off(self, event: Union[DecompilerEvent, str], listener: EventListener) -> None:
        """Remove a previously registered listener; unknown listeners are ignored."""
        listeners = self._listeners[DecompilerEvent(event)]
        if listener in listeners:
            listeners.remove(listener)

    # =========================================================================
    # Pipeline stages
    # =========================================================================

    @staticmethod
    def normalize_text(text: str) -> str:
        """
        Normalise line endings and whitespace.

        A leading byte order mark is dropped. Tabs become four spaces,
        trailing whitespace is stripped from each line, the document is
        trimmed and runs of blank lines collapse to a single blank line.
        """
        text = text.lstrip("\ufeff")
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = text.replace("\t", "    ")
        text = _TRAILING_WHITESPACE.sub("", text)
        text = text.strip()
        return _EXCESS_BLANK_LINES.sub("\n\n", text)

    def detect_sections(self, text: str) -> List[DecompiledSection]:
        """
        Classify each line as heading, list item or paragraph.

        Blank lines, and short lines that are neither headings nor list
        items, produce no section. Section ids follow document order.
        """
        sections: List[DecompiledSection] = []

        for raw_line in text.split("\n"):
            line = raw_line.strip()
            section_id = f"section-{len(sections)}"

            if self.is_heading(line):
                level = self.get_heading_level(line)
                title = self.extract_heading_title(line)
                sections.append(DecompiledSection(
                    id=section_id,
                    type=SectionType.HEADING if level == 1 else SectionType.SUBHEADING,
                    level=level,
                    title=title,
                    content=line,
                    metadata=SectionMetadata(
                        word_count=len(title.split()),
                        line_count=1,
                        has_numbers=bool(DIGIT.search(line)),
                        has_bullets=False,
                        has_tables=False,
                        confidence=self.config.heading_confidence,
                    ),
                ))
            elif self.is_list_line(line):
                sections.append(DecompiledSection(
                    id=section_id,
                    type=SectionType.LIST,
                    level=0,
                    title="List item",
                    content=line,
                    metadata=SectionMetadata(
                        word_count=len(line.split()),
                        line_count=1,
                        has_numbers=bool(NUMBERED_PREFIX.match(line)),
                        has_bullets=bool(BULLET_PREFIX.match(line)),
                        has_tables=False,
                        confidence=self.config.list_confidence,
                    ),
                ))
            elif len(line) > self.config.paragraph_min_length:
                sections.append(DecompiledSection(
                    id=section_id,
                    type=SectionType.PARAGRAPH,
                    level=0,
                    title="Paragraph",
                    content=line,
                    metadata=SectionMetadata(
                        word_count=len(line.split()),
                        line_count=1,
                        has_numbers=bool(DIGIT.search(line)),
                        has_bullets=False,
                        has_tables=False,
                        confidence=self.config.paragraph_confidence,
                    ),
                ))

        return sections

    def extract_metadata(self, text: str) -> ReportMetadata:
        """
        Extract labelled fields, word count and keywords.

        The first line becomes the title when its length is within the
        configured bounds. Labelled fields (``Author:``, ``Client:``...) are
        read from the first lines only; a later label overwrites an earlier
        one.
        """
        cfg = self.config
        metadata = ReportMetadata(word_count=len(text.split()))

        for i, raw_line in enumerate(text.split("\n")[:cfg.metadata_scan_lines]):
            line = raw_line.strip()

            if i == 0 and cfg.title_min_length < len(line) < cfg.title_max_length:
                metadata.title = line

            line_lower = line.lower()
            for metadata_field in self.knowledge_base.metadata_fields:
                if metadata_field.matches(line_lower):
                    setattr(metadata, metadata_field.field_name, line.split(":", 1)[1].strip())

        metadata.keywords = self.extract_keywords(text)
        return metadata

    def extract_keywords(self, text: str) -> List[str]:
        """Most frequent words, ties kept in order of first appearance."""
        frequency: Dict[str, int] = {}
        stop_words = self.knowledge_base.stop_words

        for word in text.lower().split():
            clean = NON_WORD.sub("", word)
            if len(clean) > self.config.keyword_min_length and clean not in stop_words:
                frequency[clean] = frequency.get(clean, 0) + 1

        ranked = sorted(frequency.items(), key=lambda item: -item[1])
        return [word for word, _ in ranked[:self.config.keyword_limit]]

    def extract_terminology(self, text: str) -> List[TerminologyEntry]:
        """Count whole-word occurrences of each vocabulary term."""
        window = self.config.context_window
        terminology: List[TerminologyEntry] = []

        for term, pattern in self.knowledge_base.term_patterns:
            matches = list(pattern.finditer(text))
            if not matches:
                continue

            first = matches[0]
            context = text[max(0, first.start() - window):min(len(text), first.end() + window)]
            terminology.append(TerminologyEntry(
                term=term,
                context=context,
                frequency=len(matches),
                category=self.knowledge_base.categorize_term(term),
                confidence=self.config.term_confidence,
            ))

        return terminology

    def detect_compliance_markers(self, text: str) -> List[ComplianceMarker]:
        """Record the first match of each compliance pattern."""
        markers: List[ComplianceMarker] = []

        for definition, pattern in self.knowledge_base.compiled_compliance_patterns:
            match = pattern.search(text)
            if match:
                markers.append(ComplianceMarker(
                    type=definition.type,
                    text=match.group(0),
                    standard=definition.standard,
                    confidence=self.config.marker_confidence,
                ))

        return markers

    def build_structure_map(self, sections: List[DecompiledSection]) -> StructureMap:
        """Fold the sections into aggregate structure statistics."""
        kb = self.knowledge_base
        depth = 0
        has_appendices = has_methodology = has_legal = False

        for section in sections:
            depth = max(depth, section.level)
            title = section.title.lower()
            has_appendices = has_appendices or any(m in title for m in kb.appendix_markers)
            has_methodology = has_methodology or any(m in title for m in kb.methodology_markers)
            has_legal = has_legal or any(m in title for m in kb.legal_markers)

        total_words = sum(s.metadata.word_count for s in sections)
        return StructureMap(
            section_count=len(sections),
            depth=depth,
            average_section_length=total_words / len(sections) if sections else 0,
            has_appendices=has_appendices,
            has_methodology=has_methodology,
            has_legal_sections=has_legal,
        )

    def calculate_confidence(
        self,
        sections: List[DecompiledSection],
        terminology: List[TerminologyEntry],
        markers: List[ComplianceMarker],
    ) -> float:
        """Base score plus a fixed increment for each non-empty detector result."""
        cfg = self.config
        confidence = cfg.base_confidence
        if sections:
            confidence += cfg.sections_weight
        if terminology:
            confidence += cfg.terminology_weight
        if markers:
            confidence += cfg.compliance_weight
        return min(confidence, 1.0)

    # =========================================================================
    # Line classification
    # =========================================================================

    def is_heading(self, line: str) -> bool:
        return bool(
            MARKDOWN_HEADING.match(line)
            or self._all_caps_heading.match(line)
            or ROMAN_HEADING.match(line)
            or NUMERIC_HEADING.match(line)
        )

    @staticmethod
    def get_heading_level(line: str) -> int:
        markdown = MARKDOWN_HEADING.match(line)
        if markdown:
            return len(markdown.group(1))
        if ROMAN_HEADING.match(line):
            return 2
        if NUMERIC_HEADING.match(line):
            return 3
        return 1

    @staticmethod
    def extract_heading_title(line: str) -> str:
        title = MARKDOWN_HEADING.sub("", line, count=1)
        title = ROMAN_HEADING.sub("", title, count=1)
        title = NUMERIC_HEADING.sub("", title, count=1)
        return title.strip()

    @staticmethod
    def is_list_line(line: str) -> bool:
        line = line.strip()
        return bool(BULLET_ITEM.match(line) or NUMBERED_ITEM.match(line))

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def hash_text(text: str) -> str:
        """SHA-256 of the raw text, used to find duplicate submissions."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    @staticmethod
    def _coerce_input_format(input_format: Union[InputFormat, str, None]) -> InputFormat:
        if input_format is None:
            return InputFormat.TEXT
        try:
            return InputFormat(input_format)
        except ValueError:
            valid = [f.value for f in InputFormat]
            raise InvalidInputError(
                message=f"Unknown input format '{input_format}'",
                location="input_format",
                details={"supported_formats": valid},
            )

    def _detect_report_type(self, report: DecompiledReport, text: str) -> Optional[str]:
        if self._registry is None:
            return None
        try:
            return self._registry.detect_report_type(report, text)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Report type detection failed for {report.id}: {e}")
            return None

    def _emit(self, event: DecompilerEvent, data: Dict[str, Any]) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(event, data)
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Listener for {event.value} failed: {e}")
