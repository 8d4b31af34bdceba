"""SQLAlchemy models for decompiled report storage."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JSONType(TypeDecorator):
    """Platform-independent JSON type.
    
    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        else:
            return dialect.type_descriptor(JSON())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class DecompiledReportModel(Base):
    """Decompiled reports table model."""
    __tablename__ = "decompiled_reports"

    id = Column(String(36), primary_key=True)
    source_hash = Column(String(64), nullable=False)
    input_format = Column(String(20), nullable=False)
    detected_report_type = Column(String(100), nullable=True)
    confidence_score = Column(Float, nullable=False)
    payload = Column(JSONType, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_decompiled_reports_source_hash", "source_hash"),
        Index("idx_decompiled_reports_created_at", "created_at"),
    )
