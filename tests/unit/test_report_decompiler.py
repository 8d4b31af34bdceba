"""Unit tests for the Report Decompiler."""

import hashlib
from typing import List, Optional

import pytest

from report_decompiler.config import ConfigurationManager, DecompilerConfig
from report_decompiler.decompiler import ReportDecompiler
from report_decompiler.exceptions import InvalidInputError
from report_decompiler.interfaces.storage import IReportStorage
from report_decompiler.models.enums import (
    ComplianceType,
    DecompilerEvent,
    InputFormat,
    SectionType,
    TermCategory,
)
from report_decompiler.models.report import DecompiledReport


SAMPLE_REPORT = (
    "BS5837:2012 Tree Survey\n"
    "\n"
    "Author: John Smith\n"
    "Date: 2024-01-15\n"
    "Client: City Council\n"
    "\n"
    "1.1 Introduction\n"
    "This is test content for decompilation purposes here."
)


@pytest.fixture
def decompiler():
    """Create a decompiler with default settings."""
    return ReportDecompiler()


class RecordingStorage(IReportStorage):
    """In-memory storage that remembers what it was given."""

    def __init__(self):
        self.reports: List[DecompiledReport] = []

    def store_report(self, report: DecompiledReport) -> None:
        self.reports.append(report)

    def find_report_by_id(self, report_id: str) -> Optional[DecompiledReport]:
        return next((r for r in self.reports if r.id == report_id), None)

    def find_reports_by_hash(self, source_hash: str) -> List[DecompiledReport]:
        return [r for r in self.reports if r.source_hash == source_hash]

    def delete_report(self, report_id: str) -> bool:
        return False


class TestSampleReport:
    """Tests against a short labelled tree survey."""

    def test_metadata_fields(self, decompiler):
        """Test labelled lines fill the metadata fields."""
        report = decompiler.ingest(SAMPLE_REPORT)

        assert report.metadata.author == "John Smith"
        assert report.metadata.date == "2024-01-15"
        assert report.metadata.client == "City Council"
        assert report.metadata.title == "BS5837:2012 Tree Survey"
        assert report.metadata.site_address is None
        assert report.metadata.report_type is None

    def test_sections(self, decompiler):
        """Test line classification of the sample."""
        report = decompiler.ingest(SAMPLE_REPORT)

        assert [s.type for s in report.sections] == [
            SectionType.PARAGRAPH,
            SectionType.SUBHEADING,
            SectionType.PARAGRAPH,
        ]
        assert [s.id for s in report.sections] == ["section-0", "section-1", "section-2"]

        heading = report.sections[1]
        assert heading.level == 3
        assert heading.title == "Introduction"
        assert heading.content == "1.1 Introduction"
        assert heading.metadata.confidence == 0.9
        assert heading.metadata.word_count == 1

    def test_compliance_and_terminology(self, decompiler):
        """Test the BS5837 reference is found as a marker and a term."""
        report = decompiler.ingest(SAMPLE_REPORT)

        assert len(report.compliance_markers) == 1
        marker = report.compliance_markers[0]
        assert marker.standard == "BS5837:2012"
        assert marker.type == ComplianceType.STANDARD
        assert marker.text == "BS5837:2012"
        assert marker.confidence == 0.8

        terms = {t.term: t for t in report.terminology}
        assert set(terms) == {"bs5837", "survey"}
        assert terms["bs5837"].frequency == 1
        assert terms["bs5837"].category == TermCategory.GENERAL
        assert terms["bs5837"].context == SAMPLE_REPORT[:56]

    def test_structure_and_confidence(self, decompiler):
        """Test the structure map and overall score."""
        report = decompiler.ingest(SAMPLE_REPORT)

        structure = report.structure_map
        assert structure.section_count == 3
        assert structure.depth == 3
        assert structure.average_section_length == pytest.approx(4.0)
        assert structure.has_methodology is False
        assert report.confidence_score == pytest.approx(1.0)

    def test_supplemental_fields(self, decompiler):
        """Test hash, format and timestamps recorded on the report."""
        report = decompiler.ingest(SAMPLE_REPORT, "pasted")

        assert report.input_format == InputFormat.PASTED
        assert report.source_hash == hashlib.sha256(SAMPLE_REPORT.encode("utf-8")).hexdigest()
        assert report.created_at is not None
        assert report.created_at.tzinfo is not None
        assert report.processing_time_ms >= 0
        assert report.detected_report_type is None

    def test_ingest_is_deterministic(self, decompiler):
        """Test two runs differ only in id, timing and timestamp."""
        first = decompiler.ingest(SAMPLE_REPORT)
        second = decompiler.ingest(SAMPLE_REPORT)

        assert first.id != second.id
        assert first.sections == second.sections
        assert first.metadata == second.metadata
        assert first.terminology == second.terminology
        assert first.compliance_markers == second.compliance_markers
        assert first.structure_map == second.structure_map
        assert first.confidence_score == second.confidence_score
        assert first.source_hash == second.source_hash


class TestEdgeCases:
    """Tests for empty input and classification boundaries."""

    def test_empty_input(self, decompiler):
        """Test an empty string produces an empty report."""
        report = decompiler.ingest("")

        assert report.sections == []
        assert report.terminology == []
        assert report.compliance_markers == []
        assert report.confidence_score == pytest.approx(0.5)
        assert report.structure_map.section_count == 0
        assert report.structure_map.average_section_length == 0
        assert report.metadata.word_count == 0
        assert report.metadata.keywords == []
        assert report.metadata.title is None

    def test_whitespace_only_input(self, decompiler):
        """Test whitespace-only input behaves like empty input."""
        report = decompiler.ingest("  \t \n\n  \r\n")

        assert report.sections == []
        assert report.confidence_score == pytest.approx(0.5)

    def test_paragraph_length_boundary(self, decompiler):
        """Test 21 characters make a paragraph and 20 do not."""
        assert len(decompiler.ingest("x" * 20).sections) == 0

        sections = decompiler.ingest("x" * 21).sections
        assert len(sections) == 1
        assert sections[0].type == SectionType.PARAGRAPH
        assert sections[0].title == "Paragraph"
        assert sections[0].metadata.confidence == 0.6

    def test_markdown_heading(self, decompiler):
        """Test a level-two markdown heading."""
        report = decompiler.ingest("## Methodology")

        section = report.sections[0]
        assert section.type == SectionType.SUBHEADING
        assert section.level == 2
        assert section.title == "Methodology"
        assert report.structure_map.has_methodology is True

    def test_non_string_input_rejected(self, decompiler):
        """Test non-string text raises InvalidInputError."""
        with pytest.raises(InvalidInputError):
            decompiler.ingest(None)

    def test_unknown_input_format_rejected(self, decompiler):
        """Test an unknown input format raises InvalidInputError."""
        with pytest.raises(InvalidInputError) as exc_info:
            decompiler.ingest("text", "docx")

        assert exc_info.value.location == "input_format"

    def test_input_format_does_not_change_processing(self, decompiler):
        """Test every input format yields the same decomposition."""
        results = [decompiler.ingest(SAMPLE_REPORT, fmt) for fmt in InputFormat]

        for report in results[1:]:
            assert report.sections == results[0].sections
            assert report.metadata == results[0].metadata


class TestNormalization:
    """Tests for text normalisation."""

    def test_line_endings_and_whitespace(self):
        """Test CRLF, tabs, trailing spaces and blank runs."""
        raw = "Line one\t\r\nLine two   \r\n\r\n\r\n\r\nLine three\n"

        assert ReportDecompiler.normalize_text(raw) == "Line one\nLine two\n\nLine three"

    def test_tabs_become_spaces(self):
        """Test inner tabs are expanded to four spaces."""
        assert ReportDecompiler.normalize_text("a\tb") == "a    b"

    def test_single_blank_line_kept(self):
        """Test one blank line between paragraphs survives."""
        assert ReportDecompiler.normalize_text("a\n\nb") == "a\n\nb"

    def test_byte_order_mark_dropped(self):
        """Test a leading byte order mark is removed."""
        raw = "\ufeff# Tree Survey Report\n"

        assert ReportDecompiler.normalize_text(raw) == "# Tree Survey Report"

    def test_byte_order_mark_before_heading(self, decompiler):
        """Test a heading after a byte order mark is still a heading."""
        report = decompiler.ingest("\ufeff# Tree Survey Report\n\nSurvey of the trees on site.")

        assert report.sections[0].type == SectionType.HEADING
        assert report.sections[0].level == 1
        assert report.sections[0].title == "Tree Survey Report"


class TestSectionDetection:
    """Tests for line classification."""

    def test_all_caps_heading(self, decompiler):
        """Test a long all-caps line is a level-one heading."""
        section = decompiler.detect_sections("EXECUTIVE SUMMARY")[0]

        assert section.type == SectionType.HEADING
        assert section.level == 1
        assert section.title == "EXECUTIVE SUMMARY"

    def test_short_all_caps_line_dropped(self, decompiler):
        """Test a short all-caps line is neither heading nor paragraph."""
        assert decompiler.detect_sections("SHORT HEAD") == []

    def test_roman_numeral_heading(self, decompiler):
        """Test Roman numeral headings are level two."""
        section = decompiler.detect_sections("II. Scope of Works")[0]

        assert section.type == SectionType.SUBHEADING
        assert section.level == 2
        assert section.title == "Scope of Works"

    def test_markdown_heading_levels(self, decompiler):
        """Test the heading level follows the number of hashes."""
        sections = decompiler.detect_sections("# Report\n### Detail\n###### Deep")

        assert [s.level for s in sections] == [1, 3, 6]
        assert sections[0].type == SectionType.HEADING
        assert [s.title for s in sections] == ["Report", "Detail", "Deep"]

    def test_bullet_list_item(self, decompiler):
        """Test bullet lines become list sections."""
        section = decompiler.detect_sections("- Retain tree T1")[0]

        assert section.type == SectionType.LIST
        assert section.level == 0
        assert section.title == "List item"
        assert section.content == "- Retain tree T1"
        assert section.metadata.has_bullets is True
        assert section.metadata.has_numbers is False
        assert section.metadata.confidence == 0.8

    def test_numbered_list_items(self, decompiler):
        """Test numbered lines with a dot or parenthesis are list items."""
        sections = decompiler.detect_sections("1. Fell tree T2\n2) Prune")

        assert [s.type for s in sections] == [SectionType.LIST, SectionType.LIST]
        assert all(s.metadata.has_numbers for s in sections)
        assert not any(s.metadata.has_bullets for s in sections)

    def test_paragraph_metadata(self, decompiler):
        """Test paragraph word count and digit detection."""
        section = decompiler.detect_sections("The oak tree T4 has a large crown")[0]

        assert section.metadata.word_count == 8
        assert section.metadata.has_numbers is True
        assert section.metadata.line_count == 1
        assert section.metadata.has_tables is False

    def test_indented_lines_are_trimmed(self, decompiler):
        """Test indentation does not prevent classification."""
        section = decompiler.detect_sections("    - Retain tree T1")[0]

        assert section.type == SectionType.LIST
        assert section.content == "- Retain tree T1"

    def test_section_ids_follow_output_order(self, decompiler):
        """Test dropped lines do not leave gaps in section ids."""
        sections = decompiler.detect_sections("# One\nshort\n# Two")

        assert [s.id for s in sections] == ["section-0", "section-1"]


class TestMetadataExtraction:
    """Tests for metadata extraction."""

    def test_value_after_first_colon(self, decompiler):
        """Test values may contain colons."""
        metadata = decompiler.extract_metadata("Report\nDate: 2024-01-15 10:30")

        assert metadata.date == "2024-01-15 10:30"

    def test_later_label_wins(self, decompiler):
        """Test a repeated label keeps the last value."""
        metadata = decompiler.extract_metadata("Report\nAuthor: A. Jones\nAuthor: B. Patel")

        assert metadata.author == "B. Patel"

    def test_labels_are_case_insensitive(self, decompiler):
        """Test label matching ignores case."""
        metadata = decompiler.extract_metadata("Report\nCLIENT: Parks Department")

        assert metadata.client == "Parks Department"

    def test_site_and_report_type(self, decompiler):
        """Test site address and report type labels."""
        metadata = decompiler.extract_metadata(
            "Report\nSite: 12 High Street\nReport Type: Tree Survey"
        )

        assert metadata.site_address == "12 High Street"
        assert metadata.report_type == "Tree Survey"

    def test_location_label_sets_site_address(self, decompiler):
        """Test Location is an alternative site label."""
        metadata = decompiler.extract_metadata("Report\nLocation: Riverside Park")

        assert metadata.site_address == "Riverside Park"

    def test_only_first_lines_scanned(self, decompiler):
        """Test labels after the first twenty lines are ignored."""
        filler = "\n".join(f"filler line {i}" for i in range(21))
        metadata = decompiler.extract_metadata(filler + "\nAuthor: Late Entry")

        assert metadata.author is None

    def test_title_length_bounds(self, decompiler):
        """Test the title bounds are exclusive."""
        assert decompiler.extract_metadata("x" * 10).title is None
        assert decompiler.extract_metadata("x" * 11).title == "x" * 11
        assert decompiler.extract_metadata("x" * 199).title == "x" * 199
        assert decompiler.extract_metadata("x" * 200).title is None

    def test_word_count(self, decompiler):
        """Test word count covers the whole text."""
        metadata = decompiler.extract_metadata("one two\nthree  four\n\nfive")

        assert metadata.word_count == 5


class TestKeywords:
    """Tests for keyword extraction."""

    def test_frequency_ordering(self, decompiler):
        """Test keywords are ordered by frequency."""
        keywords = decompiler.extract_keywords("willow beech beech maple maple maple")

        assert keywords == ["maple", "beech", "willow"]

    def test_stop_words_and_short_words_excluded(self, decompiler):
        """Test stop words and words of three letters or fewer are skipped."""
        keywords = decompiler.extract_keywords("this that with were tree elm oak ash")

        assert keywords == ["tree"]

    def test_punctuation_stripped(self, decompiler):
        """Test punctuation is removed before counting."""
        keywords = decompiler.extract_keywords("Canopy, canopy. CANOPY! crown")

        assert keywords == ["canopy", "crown"]

    def test_ties_keep_first_appearance(self, decompiler):
        """Test equally frequent words keep document order."""
        keywords = decompiler.extract_keywords("willow beech maple")

        assert keywords == ["willow", "beech", "maple"]

    def test_limited_to_ten(self, decompiler):
        """Test at most ten keywords are returned."""
        text = " ".join(f"word{chr(ord('a') + i)}" for i in range(15))

        assert len(decompiler.extract_keywords(text)) == 10

    def test_sample_keywords(self, decompiler):
        """Test keyword extraction over the sample report."""
        keywords = decompiler.ingest(SAMPLE_REPORT).metadata.keywords

        assert len(keywords) == 10
        assert keywords[:3] == ["bs58372012", "tree", "survey"]


class TestTerminology:
    """Tests for terminology extraction."""

    def test_whole_word_matching(self, decompiler):
        """Test terms inside longer words are not counted."""
        terms = {t.term: t for t in decompiler.extract_terminology(
            "Root protection area: roots were rooted deeply"
        )}

        assert terms["root"].frequency == 1
        assert terms["protection"].frequency == 1

    def test_accented_letters_are_word_boundaries(self, decompiler):
        """Test a term next to an accented letter is still found."""
        terms = {t.term: t for t in decompiler.extract_terminology("\u00e9root survey")}

        assert terms["root"].frequency == 1

    def test_case_insensitive_frequency(self, decompiler):
        """Test all case variants are counted."""
        terms = decompiler.extract_terminology("Survey survey SURVEY")

        assert len(terms) == 1
        assert terms[0].term == "survey"
        assert terms[0].frequency == 3
        assert terms[0].confidence == 0.8

    def test_context_window(self, decompiler):
        """Test context spans fifty characters either side of the first match."""
        text = "a" * 99 + " canopy " + "b" * 99
        entry = decompiler.extract_terminology(text)[0]

        start = text.index("canopy")
        assert entry.context == text[start - 50:start + len("canopy") + 50]

    def test_categories(self, decompiler):
        """Test terms are categorised."""
        terms = {t.term: t.category for t in decompiler.extract_terminology(
            "arboricultural dbh species compliance methodology hazard"
        )}

        assert terms["arboricultural"] == TermCategory.TECHNICAL
        assert terms["methodology"] == TermCategory.TECHNICAL
        assert terms["dbh"] == TermCategory.MEASUREMENT
        assert terms["species"] == TermCategory.SPECIES
        assert terms["compliance"] == TermCategory.COMPLIANCE
        assert terms["hazard"] == TermCategory.GENERAL

    def test_vocabulary_order(self, decompiler):
        """Test entries follow vocabulary order, not text order."""
        terms = decompiler.extract_terminology("survey canopy arboricultural")

        assert [t.term for t in terms] == ["arboricultural", "canopy", "survey"]


class TestComplianceMarkers:
    """Tests for compliance marker detection."""

    def test_spacing_and_case_variants(self, decompiler):
        """Test the BS5837 pattern tolerates spacing and case."""
        markers = decompiler.detect_compliance_markers("designed to bs 5837 2012 guidance")

        assert len(markers) == 1
        assert markers[0].text == "bs 5837 2012"
        assert markers[0].standard == "BS5837:2012"

    def test_one_marker_per_pattern(self, decompiler):
        """Test repeated references produce a single marker."""
        markers = decompiler.detect_compliance_markers("BS5837:2012 and again BS 5837:2012")

        assert len(markers) == 1
        assert markers[0].text == "BS5837:2012"

    def test_all_patterns(self, decompiler):
        """Test every built-in pattern in pattern order."""
        text = (
            "Tree Preservation Order applies. ISO 14001 certified. "
            "RPA (Registered Practitioner) on site. Arboricultural Association "
            "guidance and BS5837:2012."
        )
        markers = decompiler.detect_compliance_markers(text)

        assert [m.standard for m in markers] == [
            "BS5837:2012",
            "Arboricultural Association",
            "RPA",
            "ISO14001",
            "TPO",
        ]
        assert markers[4].type == ComplianceType.REGULATION
        assert markers[1].type == ComplianceType.GUIDELINE
        assert markers[2].type == ComplianceType.REQUIREMENT


class TestStructureMap:
    """Tests for structure map construction."""

    def test_flags_from_titles(self, decompiler):
        """Test appendix, methodology and legal flags."""
        report = decompiler.ingest(
            "# Methodology\n## Appendix A\n## Legal Framework"
        )

        assert report.structure_map.has_methodology is True
        assert report.structure_map.has_appendices is True
        assert report.structure_map.has_legal_sections is True

    def test_compliance_title_counts_as_legal(self, decompiler):
        """Test a compliance heading sets the legal flag."""
        report = decompiler.ingest("## Regulatory compliance")

        assert report.structure_map.has_legal_sections is True

    def test_paragraph_titles_do_not_set_flags(self, decompiler):
        """Test flags are read from titles, not paragraph content."""
        report = decompiler.ingest("The methodology is described in the appendix below.")

        assert report.structure_map.has_methodology is False
        assert report.structure_map.has_appendices is False

    def test_depth_and_average_length(self, decompiler):
        """Test depth is the maximum level and average uses word counts."""
        report = decompiler.ingest("# Survey Report\n### Tree Data\n- one two three four")

        assert report.structure_map.depth == 3
        assert report.structure_map.average_section_length == pytest.approx((2 + 2 + 5) / 3)


class TestConfidence:
    """Tests for the overall confidence score."""

    def test_sections_only(self, decompiler):
        """Test a lone paragraph scores base plus sections weight."""
        report = decompiler.ingest("x" * 25)

        assert report.confidence_score == pytest.approx(0.7)

    def test_terminology_only(self, decompiler):
        """Test a short term line scores base plus terminology weight."""
        report = decompiler.ingest("canopy")

        assert report.sections == []
        assert report.confidence_score == pytest.approx(0.65)

    def test_compliance_only(self, decompiler):
        """Test a short standard reference scores base plus compliance weight."""
        report = decompiler.ingest("ISO 14001")

        assert report.sections == []
        assert report.terminology == []
        assert report.confidence_score == pytest.approx(0.65)

    def test_capped_at_one(self):
        """Test the score never exceeds one."""
        decompiler = ReportDecompiler(config=DecompilerConfig(base_confidence=0.9))

        assert decompiler.ingest(SAMPLE_REPORT).confidence_score == 1.0


class TestConfiguration:
    """Tests for non-default settings and knowledge bases."""

    def test_paragraph_threshold(self):
        """Test the paragraph threshold is configurable."""
        decompiler = ReportDecompiler(config=DecompilerConfig(paragraph_min_length=5))

        assert decompiler.detect_sections("short line")[0].type == SectionType.PARAGRAPH

    def test_all_caps_threshold(self):
        """Test the all-caps heading threshold is configurable."""
        decompiler = ReportDecompiler(config=DecompilerConfig(all_caps_min_tail=5))

        assert decompiler.detect_sections("SHORT HEAD")[0].type == SectionType.HEADING

    def test_extended_knowledge_base(self):
        """Test loaded terms and patterns are detected."""
        manager = ConfigurationManager()
        manager.load_knowledge_base({
            "terms": ["veteran"],
            "compliance_patterns": [
                {
                    "pattern": r"Conservation\s+Area",
                    "standard": "Conservation Area",
                    "type": "regulation",
                }
            ],
        })
        decompiler = ReportDecompiler(knowledge_base=manager.knowledge_base)

        report = decompiler.ingest("A veteran oak stands within the Conservation Area.")

        assert "veteran" in [t.term for t in report.terminology]
        assert [m.standard for m in report.compliance_markers] == ["Conservation Area"]


class TestEvents:
    """Tests for decompiler event hooks."""

    def test_event_order(self, decompiler):
        """Test every stage emits its event in pipeline order."""
        received = []
        for event in DecompilerEvent:
            decompiler.on(event, lambda e, data: received.append(e))

        report = decompiler.ingest(SAMPLE_REPORT)

        assert received == [
            DecompilerEvent.INGESTED,
            DecompilerEvent.SECTIONS_DETECTED,
            DecompilerEvent.METADATA_EXTRACTED,
            DecompilerEvent.TERMINOLOGY_EXTRACTED,
            DecompilerEvent.COMPLIANCE_MARKERS_EXTRACTED,
            DecompilerEvent.STRUCTURE_BUILT,
            DecompilerEvent.COMPLETED,
        ]
        assert report.sections

    def test_event_payload(self, decompiler):
        """Test the completed event carries the report id."""
        payloads = []
        decompiler.on("decompiler:completed", lambda e, data: payloads.append(data))

        report = decompiler.ingest(SAMPLE_REPORT)

        assert payloads[0]["report_id"] == report.id
        assert payloads[0]["section_count"] == 3

    def test_failing_listener_does_not_abort(self, decompiler):
        """Test listener exceptions are contained."""
        def broken(event, data):
            raise RuntimeError("listener failure")

        decompiler.on(DecompilerEvent.SECTIONS_DETECTED, broken)

        report = decompiler.ingest(SAMPLE_REPORT)
        assert len(report.sections) == 3

    def test_off_removes_listener(self, decompiler):
        """Test a removed listener is no longer called."""
        received = []
        listener = lambda e, data: received.append(e)  # noqa: E731
        decompiler.on(DecompilerEvent.COMPLETED, listener)
        decompiler.off(DecompilerEvent.COMPLETED, listener)

        decompiler.ingest(SAMPLE_REPORT)
        assert received == []

    def test_error_event_and_reraise(self, decompiler, monkeypatch):
        """Test a failing stage emits the error event and re-raises."""
        errors = []
        decompiler.on(DecompilerEvent.ERROR, lambda e, data: errors.append(data))

        def fail(text):
            raise RuntimeError("stage failed")

        monkeypatch.setattr(decompiler, "detect_sections", fail)

        with pytest.raises(RuntimeError):
            decompiler.ingest(SAMPLE_REPORT)
        assert errors[0]["error"] == "stage failed"


class TestStorageAndFiles:
    """Tests for storage hand-off and file ingestion."""

    def test_report_handed_to_storage(self):
        """Test completed reports are stored when storage is configured."""
        storage = RecordingStorage()
        decompiler = ReportDecompiler(storage=storage)

        report = decompiler.ingest(SAMPLE_REPORT)

        assert storage.reports == [report]

    def test_failed_ingest_not_stored(self):
        """Test rejected input never reaches storage."""
        storage = RecordingStorage()
        decompiler = ReportDecompiler(storage=storage)

        with pytest.raises(InvalidInputError):
            decompiler.ingest(SAMPLE_REPORT, "unknown")
        assert storage.reports == []

    def test_ingest_markdown_file(self, decompiler, tmp_path):
        """Test a markdown file is ingested with the markdown format."""
        path = tmp_path / "survey.md"
        path.write_text("# Tree Survey\n## Methodology\n- Visual tree assessment", encoding="utf-8")

        report = decompiler.ingest_file(path)

        assert report.input_format == InputFormat.MARKDOWN
        assert report.structure_map.has_methodology is True
        assert len(report.sections) == 3

    def test_ingest_file_with_byte_order_mark(self, decompiler, tmp_path):
        """Test a UTF-8 file saved with a byte order mark keeps its first heading."""
        path = tmp_path / "survey.md"
        path.write_text(
            "\ufeff# Tree Survey Report\n\nSurvey of the trees on site.", encoding="utf-8"
        )

        report = decompiler.ingest_file(path)

        assert report.sections[0].type == SectionType.HEADING
        assert report.sections[0].level == 1
        assert report.sections[0].title == "Tree Survey Report"
