"""Custom exceptions for the report decompiler."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class DecompilerError(Exception):
    """
    Base exception for decompiler errors.
    
    Carries a human-readable message plus optional location and details
    so callers can log or serialize the failure.
    
    Attributes:
        message: Human-readable error description.
        location: Where the problem was found (field name, line, report id).
        details: Additional error details.
    """
    message: str
    location: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "location": self.location,
            "details": self.details,
        }


@dataclass
class InvalidInputError(DecompilerError):
    """Raised when the text or input format handed to the decompiler is invalid."""


@dataclass
class ReportNotFoundError(DecompilerError):
    """Raised when a stored report cannot be found."""

    report_id: Optional[str] = None


@dataclass
class RegistryError(DecompilerError):
    """Raised for duplicate, unknown or malformed report type definitions."""

    type_id: Optional[str] = None
