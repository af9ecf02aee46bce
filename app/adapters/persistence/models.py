"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.adapters.persistence.database import Base


class DeviceAssignmentModel(Base):
    __tablename__ = "device_assignments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    device_id: Mapped[str] = mapped_column(String(100), nullable=False)
    device_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    survey_id: Mapped[str] = mapped_column(String(100), nullable=False)
    survey_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    from_date: Mapped[date] = mapped_column(Date, nullable=False)
    to_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    assigned_by: Mapped[str] = mapped_column(String(200), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("from_date <= to_date", name="ck_device_assignments_window"),
        Index("idx_device_assignments_device", "device_id"),
        Index("idx_device_assignments_survey", "survey_id"),
        Index("idx_device_assignments_status", "status"),
        Index("idx_device_assignments_device_status", "device_id", "status"),
    )
