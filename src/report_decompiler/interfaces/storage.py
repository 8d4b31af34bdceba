"""Report storage interface for the report decompiler."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.report import DecompiledReport


class IReportStorage(ABC):
    """
    Abstract interface for storing decompiled reports.
    
    The decompiler itself never persists anything; a storage
    implementation is handed to it (or used by the API) when reports
    should be kept.
    """

    @abstractmethod
    def store_report(self, report: DecompiledReport) -> None:
        """
        Store a decompiled report.
        
        Args:
            report: The report to store.
        """
        pass

    @abstractmethod
    def find_report_by_id(self, report_id: str) -> Optional[DecompiledReport]:
        """
        Look up a report by its id.
        
        Returns:
            The report, or None if no report has that id.
        """
        pass

    @abstractmethod
    def find_reports_by_hash(self, source_hash: str) -> List[DecompiledReport]:
        """
        Find reports decompiled from identical source text.
        
        Args:
            source_hash: The report's source_hash.
            
        Returns:
            Matching reports, most recent first.
        """
        pass

    @abstractmethod
    def delete_report(self, report_id: str) -> bool:
        """
        Delete a report.
        
        Returns:
            True if a report was deleted, False if none had that id.
        """
        pass
