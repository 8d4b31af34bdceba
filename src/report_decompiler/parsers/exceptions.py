"""Custom exceptions for loading report files."""

from dataclasses import dataclass
from typing import Any, Optional

from ..exceptions import DecompilerError


@dataclass
class ParseError(DecompilerError):
    """
    Base exception for file loading errors.
    
    Attributes:
        file_path: Path to the file that caused the error.
    """
    file_path: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["file_path"] = self.file_path
        return data


@dataclass
class DocumentCorruptedError(ParseError):
    """
    Exception raised when a document is corrupted or unreadable.
    
    The file exists but cannot be read due to corruption, an invalid
    container, or encryption.
    """

    def get_recovery_suggestions(self) -> list[str]:
        """Return suggestions for recovering from this error."""
        suggestions = [
            "Open the file in its native application to check it is readable",
            "Check whether the file is password-protected or encrypted",
            "Copy the report text and submit it as pasted text instead",
        ]
        if self.file_path and self.file_path.endswith(".pdf"):
            suggestions.append("For scanned PDFs, run OCR before loading")
        return suggestions


@dataclass
class UnsupportedFormatError(ParseError):
    """Exception raised when a file suffix is not supported by the loader."""

    def get_supported_formats(self) -> list[str]:
        """Return list of supported formats."""
        return self.details.get("supported_formats", [".txt", ".md", ".docx", ".pdf"])
