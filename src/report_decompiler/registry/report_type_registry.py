"""Report type registry.

Holds the report type definitions known to an application and matches
decompiled reports against them. A registry is an ordinary object that
its owner constructs and fills.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..exceptions import RegistryError
from ..models.enums import SectionType
from ..models.report import DecompiledReport
from .builtins import build_builtin_types
from .models import ReportTypeDefinition


logger = logging.getLogger(__name__)

# Detection scoring
NAME_SCORE = 10
ID_SCORE = 15
STANDARD_SCORE = 5
SECTION_SCORE = 2
MIN_DETECTION_SCORE = 5

_TITLED_SECTION_TYPES = (SectionType.HEADING, SectionType.SUBHEADING)


class ReportTypeRegistry:
    """
    Registry of report type definitions.

    Supports registration, lookup, update and deprecation of report
    types, and scoring a decompiled report against every active type.
    """

    def __init__(self):
        self._types: Dict[str, ReportTypeDefinition] = {}

    @classmethod
    def with_builtins(cls) -> "ReportTypeRegistry":
        """Create a registry pre-loaded with the built-in arboricultural report types."""
        registry = cls()
        for definition in build_builtin_types():
            registry.register_type(definition)
        return registry

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, type_id: str) -> bool:
        return type_id in self._types

    # =========================================================================
    # Registration
    # =========================================================================

    def register_type(self, definition: ReportTypeDefinition) -> None:
        """
        Register a new report type.

        Raises:
            RegistryError: If the definition is invalid or its id is taken.
        """
        self._validate_definition(definition)
        if definition.id in self._types:
            raise RegistryError(
                message=f"Report type with ID '{definition.id}' already exists",
                type_id=definition.id,
            )

        now = datetime.now(timezone.utc)
        definition.created_at = now
        definition.updated_at = now
        self._types[definition.id] = definition
        logger.info(f"Registered report type: {definition.name} ({definition.id})")

    def update_type(self, definition: ReportTypeDefinition) -> None:
        """
        Replace an existing report type, keeping its original creation time.

        Raises:
            RegistryError: If the definition is invalid or not registered.
        """
        self._validate_definition(definition)
        existing = self._types.get(definition.id)
        if existing is None:
            raise RegistryError(
                message=f"Report type with ID '{definition.id}' not found",
                type_id=definition.id,
            )

        definition.created_at = existing.created_at
        definition.updated_at = datetime.now(timezone.utc)
        self._types[definition.id] = definition
        logger.info(f"Updated report type: {definition.name} ({definition.id})")

    def deprecate_type(self, type_id: str, reason: Optional[str] = None) -> None:
        """Mark a report type as deprecated; deprecated types are skipped by detection."""
        definition = self._types.get(type_id)
        if definition is None:
            raise RegistryError(
                message=f"Report type with ID '{type_id}' not found",
                type_id=type_id,
            )

        definition.deprecated = True
        definition.deprecated_reason = reason
        definition.updated_at = datetime.now(timezone.utc)
        logger.info(
            f"Deprecated report type: {definition.name} ({type_id}) - "
            f"{reason or 'No reason provided'}"
        )

    def _validate_definition(self, definition: ReportTypeDefinition) -> None:
        errors: List[str] = []
        if not definition.id or not definition.id.strip():
            errors.append("'id' must be a non-empty string")
        if not definition.name or not definition.name.strip():
            errors.append("'name' must be a non-empty string")

        section_ids = [s.id for s in definition.all_sections]
        duplicates = sorted({sid for sid in section_ids if section_ids.count(sid) > 1})
        if duplicates:
            errors.append(f"duplicate section ids: {duplicates}")

        if errors:
            raise RegistryError(
                message=f"Invalid report type definition: {'; '.join(errors)}",
                type_id=definition.id,
                details={"errors": errors},
            )

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_type(self, type_id: str) -> Optional[ReportTypeDefinition]:
        return self._types.get(type_id)

    def get_all_types(self) -> List[ReportTypeDefinition]:
        return list(self._types.values())

    def get_types_by_category(self, category: str) -> List[ReportTypeDefinition]:
        return [t for t in self._types.values() if t.category == category]

    def get_active_types(self) -> List[ReportTypeDefinition]:
        return [t for t in self._types.values() if not t.deprecated]

    # =========================================================================
    # Matching
    # =========================================================================

    def detect_report_type(self, report: DecompiledReport, text: str) -> Optional[str]:
        """
        Find the active report type that best fits a decompiled report.

        Each type scores points when its name or id appears in the text,
        for every compliance marker naming one of its standards, and for
        every heading whose title overlaps one of its section names. The
        highest score wins if it reaches MIN_DETECTION_SCORE.

        Args:
            report: The decompiled report.
            text: The text the report was decompiled from.

        Returns:
            The id of the best matching type, or None.
        """
        text_lower = text.lower()
        best_id: Optional[str] = None
        best_score = 0

        for definition in self.get_active_types():
            score = self._score_type(definition, report, text_lower)
            if score > best_score:
                best_id, best_score = definition.id, score

        if best_id is not None and best_score >= MIN_DETECTION_SCORE:
            logger.info(f"Detected report type: {best_id} (score: {best_score})")
            return best_id
        return None

    def _score_type(
        self,
        definition: ReportTypeDefinition,
        report: DecompiledReport,
        text_lower: str,
    ) -> int:
        score = 0
        if definition.name.lower() in text_lower:
            score += NAME_SCORE
        if definition.id.lower() in text_lower:
            score += ID_SCORE

        standards = [s.lower() for s in definition.compliance_standards]
        for marker in report.compliance_markers:
            marker_standard = marker.standard.lower()
            if any(marker_standard in standard for standard in standards):
                score += STANDARD_SCORE

        section_names = [s.name.lower() for s in definition.all_sections]
        for section in report.sections:
            if section.type not in _TITLED_SECTION_TYPES:
                continue
            title = section.title.lower()
            if any(name in title or title in name for name in section_names):
                score += SECTION_SCORE

        return score

    def find_missing_sections(self, type_id: str, report: DecompiledReport) -> List[str]:
        """
        Names of required sections with no matching heading in the report.

        Raises:
            RegistryError: If the type is not registered.
        """
        definition = self._types.get(type_id)
        if definition is None:
            raise RegistryError(
                message=f"Report type with ID '{type_id}' not found",
                type_id=type_id,
            )

        titles = [
            s.title.lower() for s in report.sections if s.type in _TITLED_SECTION_TYPES
        ]
        return [
            section.name
            for section in definition.required_sections
            if not any(section.name.lower() in title for title in titles)
        ]
