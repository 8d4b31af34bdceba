"""Built-in arboricultural report type definitions."""

from typing import List

from .models import ReportTypeDefinition, SectionDefinition


def _sections(names: List[str], required: bool = True) -> List[SectionDefinition]:
    return [
        SectionDefinition(
            id=name.lower().replace(" ", "-"),
            name=name,
            required=required,
        )
        for name in names
    ]


def build_builtin_types() -> List[ReportTypeDefinition]:
    """Return fresh copies of the built-in report types."""
    return [
        ReportTypeDefinition(
            id="bs5837-2012",
            name="BS5837:2012 Tree Survey",
            description=(
                "Tree survey report compliant with BS5837:2012 for trees in "
                "relation to design, demolition and construction."
            ),
            category="survey",
            required_sections=_sections([
                "Title Page",
                "Executive Summary",
                "Introduction",
                "Methodology",
                "Site Description",
                "Tree Data",
                "Category Assessment",
                "Root Protection Area Calculations",
                "Recommendations",
                "Conclusions",
            ]),
            optional_sections=_sections(
                ["Appendices", "Photographic Record", "Maps and Plans", "Glossary"],
                required=False,
            ),
            compliance_standards=["BS5837:2012"],
        ),
        ReportTypeDefinition(
            id="arb-impact-assessment",
            name="Arboricultural Impact Assessment (AIA)",
            description=(
                "Assessment of the impact of proposed development on existing "
                "trees, with mitigation measures and recommendations."
            ),
            category="assessment",
            required_sections=_sections([
                "Title Page",
                "Executive Summary",
                "Introduction",
                "Site Context",
                "Impact Analysis",
                "Mitigation Measures",
                "Recommendations",
                "Conclusions",
            ]),
            optional_sections=_sections(
                ["Appendices", "Risk Assessment", "Monitoring Plan"],
                required=False,
            ),
            compliance_standards=["BS5837:2012", "Best Practice"],
        ),
        ReportTypeDefinition(
            id="arb-method-statement",
            name="Arboricultural Method Statement (AMS)",
            description=(
                "Methodology for construction works near trees: protective "
                "measures, working methods and supervision."
            ),
            category="method",
            required_sections=_sections([
                "Title Page",
                "Scope",
                "Site Specific Risks",
                "Tree Protection Measures",
                "Working Methods",
                "Supervision and Monitoring",
                "Emergency Procedures",
                "Appendices",
            ]),
            optional_sections=_sections(
                [
                    "Contractor Responsibilities",
                    "Pre-construction Meeting",
                    "Post-construction Requirements",
                ],
                required=False,
            ),
            compliance_standards=["BS5837:2012", "Best Practice"],
        ),
    ]
