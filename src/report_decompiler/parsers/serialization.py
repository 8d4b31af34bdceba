"""Serialization and deserialization utilities for decompiled reports."""

import json
from datetime import datetime
from typing import Any

from ..models.enums import ComplianceType, InputFormat, SectionType, TermCategory
from ..models.report import (
    ComplianceMarker,
    DecompiledReport,
    DecompiledSection,
    ReportMetadata,
    SectionMetadata,
    StructureMap,
    TerminologyEntry,
)

# snake_case attribute -> camelCase key for the optional metadata fields
_OPTIONAL_METADATA_KEYS = {
    "title": "title",
    "author": "author",
    "date": "date",
    "client": "client",
    "site_address": "siteAddress",
    "report_type": "reportType",
}


class ReportSerializer:
    """
    Converts DecompiledReport structures to and from their JSON wire shape.

    Keys are camelCase (``wordCount``, ``complianceMarkers``,
    ``structureMap``...). Optional fields that are unset are omitted.
    """

    @staticmethod
    def serialize(report: DecompiledReport) -> str:
        """
        Serialize a DecompiledReport to JSON string.

        Args:
            report: The report to serialize.

        Returns:
            JSON string representation of the report.
        """
        return json.dumps(
            ReportSerializer.to_dict(report),
            ensure_ascii=False,
            indent=2
        )

    @staticmethod
    def deserialize(json_str: str) -> DecompiledReport:
        """
        Deserialize a JSON string to a DecompiledReport.

        Raises:
            ValueError: If the JSON is invalid or malformed.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {str(e)}")

        return ReportSerializer.from_dict(data)

    @staticmethod
    def to_dict(report: DecompiledReport) -> dict[str, Any]:
        """Convert DecompiledReport to a JSON-compatible dictionary."""
        data: dict[str, Any] = {
            "id": report.id,
            "sections": [ReportSerializer._section_to_dict(s) for s in report.sections],
            "metadata": ReportSerializer._metadata_to_dict(report.metadata),
            "terminology": [ReportSerializer._term_to_dict(t) for t in report.terminology],
            "complianceMarkers": [
                ReportSerializer._marker_to_dict(m) for m in report.compliance_markers
            ],
            "structureMap": ReportSerializer._structure_to_dict(report.structure_map),
            "confidenceScore": report.confidence_score,
            "processingTimeMs": report.processing_time_ms,
            "inputFormat": report.input_format.value,
            "sourceHash": report.source_hash,
        }
        if report.detected_report_type is not None:
            data["detectedReportType"] = report.detected_report_type
        if report.created_at is not None:
            data["createdAt"] = report.created_at.isoformat()
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> DecompiledReport:
        """Convert dictionary to DecompiledReport."""
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for DecompiledReport")

        required_fields = ["id", "sections", "metadata", "structureMap"]
        for field in required_fields:
            if field not in data:
                raise ValueError(f"Missing required field: {field}")

        created_at = data.get("createdAt")
        return DecompiledReport(
            id=data["id"],
            sections=[ReportSerializer._dict_to_section(s) for s in data["sections"]],
            metadata=ReportSerializer._dict_to_metadata(data["metadata"]),
            terminology=[ReportSerializer._dict_to_term(t) for t in data.get("terminology", [])],
            compliance_markers=[
                ReportSerializer._dict_to_marker(m) for m in data.get("complianceMarkers", [])
            ],
            structure_map=ReportSerializer._dict_to_structure(data["structureMap"]),
            confidence_score=data.get("confidenceScore", 0.0),
            processing_time_ms=data.get("processingTimeMs", 0.0),
            input_format=InputFormat(data.get("inputFormat", InputFormat.TEXT.value)),
            source_hash=data.get("sourceHash", ""),
            detected_report_type=data.get("detectedReportType"),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )

    @staticmethod
    def _section_to_dict(section: DecompiledSection) -> dict[str, Any]:
        meta = section.metadata
        return {
            "id": section.id,
            "type": section.type.value,
            "level": section.level,
            "title": section.title,
            "content": section.content,
            "metadata": {
                "wordCount": meta.word_count,
                "lineCount": meta.line_count,
                "hasNumbers": meta.has_numbers,
                "hasBullets": meta.has_bullets,
                "hasTables": meta.has_tables,
                "confidence": meta.confidence,
            },
        }

    @staticmethod
    def _dict_to_section(data: dict[str, Any]) -> DecompiledSection:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for DecompiledSection")

        for field in ("id", "type", "level", "title", "content", "metadata"):
            if field not in data:
                raise ValueError(f"Missing required field '{field}' in DecompiledSection")

        meta = data["metadata"]
        if not isinstance(meta, dict):
            raise ValueError("Expected dictionary for SectionMetadata")

        return DecompiledSection(
            id=data["id"],
            type=SectionType(data["type"]),
            level=data["level"],
            title=data["title"],
            content=data["content"],
            metadata=SectionMetadata(
                word_count=meta.get("wordCount", 0),
                line_count=meta.get("lineCount", 1),
                has_numbers=meta.get("hasNumbers", False),
                has_bullets=meta.get("hasBullets", False),
                has_tables=meta.get("hasTables", False),
                confidence=meta.get("confidence", 0.0),
            ),
        )

    @staticmethod
    def _metadata_to_dict(metadata: ReportMetadata) -> dict[str, Any]:
        data: dict[str, Any] = {
            "wordCount": metadata.word_count,
            "keywords": list(metadata.keywords),
        }
        for attr, key in _OPTIONAL_METADATA_KEYS.items():
            value = getattr(metadata, attr)
            if value is not None:
                data[key] = value
        return data

    @staticmethod
    def _dict_to_metadata(data: dict[str, Any]) -> ReportMetadata:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for ReportMetadata")

        metadata = ReportMetadata(
            word_count=data.get("wordCount", 0),
            keywords=list(data.get("keywords", [])),
        )
        for attr, key in _OPTIONAL_METADATA_KEYS.items():
            setattr(metadata, attr, data.get(key))
        return metadata

    @staticmethod
    def _term_to_dict(entry: TerminologyEntry) -> dict[str, Any]:
        return {
            "term": entry.term,
            "context": entry.context,
            "frequency": entry.frequency,
            "category": entry.category.value,
            "confidence": entry.confidence,
        }

    @staticmethod
    def _dict_to_term(data: dict[str, Any]) -> TerminologyEntry:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for TerminologyEntry")
        if "term" not in data:
            raise ValueError("Missing required field 'term' in TerminologyEntry")

        return TerminologyEntry(
            term=data["term"],
            context=data.get("context", ""),
            frequency=data.get("frequency", 0),
            category=TermCategory(data.get("category", TermCategory.GENERAL.value)),
            confidence=data.get("confidence", 0.0),
        )

    @staticmethod
    def _marker_to_dict(marker: ComplianceMarker) -> dict[str, Any]:
        return {
            "type": marker.type.value,
            "text": marker.text,
            "standard": marker.standard,
            "confidence": marker.confidence,
        }

    @staticmethod
    def _dict_to_marker(data: dict[str, Any]) -> ComplianceMarker:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for ComplianceMarker")
        if "type" not in data:
            raise ValueError("Missing required field 'type' in ComplianceMarker")

        return ComplianceMarker(
            type=ComplianceType(data["type"]),
            text=data.get("text", ""),
            standard=data.get("standard", ""),
            confidence=data.get("confidence", 0.0),
        )

    @staticmethod
    def _structure_to_dict(structure: StructureMap) -> dict[str, Any]:
        return {
            "sectionCount": structure.section_count,
            "depth": structure.depth,
            "averageSectionLength": structure.average_section_length,
            "hasAppendices": structure.has_appendices,
            "hasMethodology": structure.has_methodology,
            "hasLegalSections": structure.has_legal_sections,
        }

    @staticmethod
    def _dict_to_structure(data: dict[str, Any]) -> StructureMap:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for StructureMap")

        return StructureMap(
            section_count=data.get("sectionCount", 0),
            depth=data.get("depth", 0),
            average_section_length=data.get("averageSectionLength", 0),
            has_appendices=data.get("hasAppendices", False),
            has_methodology=data.get("hasMethodology", False),
            has_legal_sections=data.get("hasLegalSections", False),
        )


def serialize_report(report: DecompiledReport) -> str:
    """Convenience function to serialize a DecompiledReport."""
    return ReportSerializer.serialize(report)


def deserialize_report(json_str: str) -> DecompiledReport:
    """Convenience function to deserialize a DecompiledReport."""
    return ReportSerializer.deserialize(json_str)
