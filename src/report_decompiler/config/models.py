"""Data models for decompiler configuration."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class DecompilerConfig:
    """
    Thresholds and fixed scores used by the decompiler.
    
    The defaults reproduce the behaviour the decompiler has always had;
    none of them has a documented derivation, so they are kept as
    tunable values rather than baked into the detection code.
    """
    # Line classification
    paragraph_min_length: int = 20  # paragraphs must be strictly longer
    all_caps_min_tail: int = 10  # caps/spaces required after the first capital

    # Metadata extraction
    metadata_scan_lines: int = 20
    title_min_length: int = 10  # exclusive
    title_max_length: int = 200  # exclusive
    keyword_limit: int = 10
    keyword_min_length: int = 3  # exclusive

    # Terminology
    context_window: int = 50

    # Fixed confidences
    heading_confidence: float = 0.9
    list_confidence: float = 0.8
    paragraph_confidence: float = 0.6
    term_confidence: float = 0.8
    marker_confidence: float = 0.8

    # Overall confidence score
    base_confidence: float = 0.5
    sections_weight: float = 0.2
    terminology_weight: float = 0.15
    compliance_weight: float = 0.15

    @classmethod
    def field_types(cls) -> Dict[str, type]:
        """Map each configurable field name to its declared type."""
        defaults = cls()
        return {f.name: type(getattr(defaults, f.name)) for f in fields(cls)}

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    
    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False
    
    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)
    
    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""
    
    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
