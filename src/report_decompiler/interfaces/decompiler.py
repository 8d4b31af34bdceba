"""Decompiler interface for the report decompiler."""

from abc import ABC, abstractmethod
from typing import Union

from ..models.enums import InputFormat
from ..models.report import DecompiledReport


class IReportDecompiler(ABC):
    """
    Abstract interface for report decompilation.
    
    Implementations turn unstructured report text into a
    DecompiledReport describing its sections, metadata, terminology
    and compliance references.
    """

    @abstractmethod
    def ingest(
        self,
        text: str,
        input_format: Union[InputFormat, str] = InputFormat.TEXT,
    ) -> DecompiledReport:
        """
        Decompile report text.
        
        Args:
            text: Raw report text.
            input_format: Source format of the text.
            
        Returns:
            DecompiledReport describing the text.
            
        Raises:
            InvalidInputError: If the text or input format is invalid.
        """
        pass
