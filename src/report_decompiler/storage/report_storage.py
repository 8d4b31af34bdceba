"""SQL-backed storage for decompiled reports."""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select

from ..exceptions import ReportNotFoundError
from ..interfaces.storage import IReportStorage
from ..models.report import DecompiledReport
from ..parsers.serialization import ReportSerializer
from .database import DatabaseManager
from .models import DecompiledReportModel


logger = logging.getLogger(__name__)

DEFAULT_MAX_REPORTS = 100


class DecompiledReportStorage(IReportStorage):
    """
    Report storage with a SQLAlchemy backend.
    
    Reports are stored in their serialized JSON form alongside a few
    indexed columns for lookup. When auto-pruning is on, the oldest
    reports are removed once more than ``max_reports`` are stored.
    """
    
    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        database_url: Optional[str] = None,
        max_reports: int = DEFAULT_MAX_REPORTS,
        auto_prune: bool = True,
    ):
        """
        Initialize the report storage.
        
        Args:
            db_manager: Optional DatabaseManager instance. If not provided,
                       a new one will be created.
            database_url: Database URL for creating a new DatabaseManager.
            max_reports: Number of reports kept when auto-pruning.
            auto_prune: Remove the oldest reports beyond max_reports on store.
        """
        if db_manager is not None:
            self._db_manager = db_manager
            self._owns_db_manager = False
        else:
            self._db_manager = DatabaseManager(database_url=database_url)
            self._owns_db_manager = True
        self._db_manager.init_database()
        self.max_reports = max_reports
        self.auto_prune = auto_prune

    def _to_model(self, report: DecompiledReport) -> DecompiledReportModel:
        """Convert DecompiledReport dataclass to SQLAlchemy model."""
        model = DecompiledReportModel(
            id=report.id,
            source_hash=report.source_hash,
            input_format=report.input_format.value,
            detected_report_type=report.detected_report_type,
            confidence_score=report.confidence_score,
            payload=ReportSerializer.to_dict(report),
        )
        if report.created_at is not None:
            model.created_at = report.created_at
        return model

    def _from_model(self, model: DecompiledReportModel) -> DecompiledReport:
        """Convert SQLAlchemy model to DecompiledReport dataclass."""
        return ReportSerializer.from_dict(model.payload)

    def store_report(self, report: DecompiledReport) -> None:
        """
        Store a decompiled report, replacing any report with the same id.
        
        Args:
            report: The report to store.
        """
        model = self._to_model(report)
        with self._db_manager.get_session() as session:
            session.merge(model)
        logger.info(f"Stored decompiled report {report.id}")

        if self.auto_prune:
            self.prune()

    def find_report_by_id(self, report_id: str) -> Optional[DecompiledReport]:
        with self._db_manager.get_session() as session:
            model = session.get(DecompiledReportModel, report_id)
            return self._from_model(model) if model is not None else None

    def get_report(self, report_id: str) -> DecompiledReport:
        """
        Look up a report by id.
        
        Raises:
            ReportNotFoundError: If no report has that id.
        """
        report = self.find_report_by_id(report_id)
        if report is None:
            raise ReportNotFoundError(
                message=f"Report '{report_id}' not found",
                report_id=report_id,
            )
        return report

    def find_reports_by_hash(self, source_hash: str) -> List[DecompiledReport]:
        with self._db_manager.get_session() as session:
            query = (
                select(DecompiledReportModel)
                .where(DecompiledReportModel.source_hash == source_hash)
                .order_by(DecompiledReportModel.created_at.desc())
            )
            result = session.execute(query)
            return [self._from_model(m) for m in result.scalars().all()]

    def list_reports(self, limit: Optional[int] = None) -> List[DecompiledReport]:
        """
        List stored reports, most recent first.
        
        Args:
            limit: Maximum number of reports to return.
        """
        with self._db_manager.get_session() as session:
            query = select(DecompiledReportModel).order_by(
                DecompiledReportModel.created_at.desc()
            )
            if limit is not None:
                query = query.limit(limit)
            result = session.execute(query)
            return [self._from_model(m) for m in result.scalars().all()]

    def count_reports(self) -> int:
        with self._db_manager.get_session() as session:
            return session.execute(
                select(func.count()).select_from(DecompiledReportModel)
            ).scalar_one()

    def delete_report(self, report_id: str) -> bool:
        with self._db_manager.get_session() as session:
            result = session.execute(
                delete(DecompiledReportModel).where(DecompiledReportModel.id == report_id)
            )
            deleted = result.rowcount > 0

        if deleted:
            logger.info(f"Deleted decompiled report {report_id}")
        return deleted

    def prune(self) -> int:
        """
        Remove the oldest reports beyond ``max_reports``.
        
        Returns:
            Number of reports removed.
        """
        with self._db_manager.get_session() as session:
            ordered_ids = session.execute(
                select(DecompiledReportModel.id).order_by(
                    DecompiledReportModel.created_at.desc()
                )
            ).scalars().all()
            stale_ids = list(ordered_ids[self.max_reports:])
            if stale_ids:
                session.execute(
                    delete(DecompiledReportModel).where(
                        DecompiledReportModel.id.in_(stale_ids)
                    )
                )

        if stale_ids:
            logger.info(f"Pruned {len(stale_ids)} old decompiled reports")
        return len(stale_ids)

    def close(self) -> None:
        """Close the database connection if owned by this storage."""
        if self._owns_db_manager:
            self._db_manager.close()
