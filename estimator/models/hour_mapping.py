"""Complexity x screen type hour matrix."""
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from estimator.database import Base


class HourMapping(Base):
    """Hours for one (complexity, screen type) pair. Keyed by names, edited independently of the masters."""

    __tablename__ = "hour_mappings"
    __table_args__ = (
        UniqueConstraint("complexity_name", "screen_type_name", name="uq_hour_mapping_pair"),
        CheckConstraint("hours >= 0", name="ck_hour_mapping_hours_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    complexity_name: Mapped[str] = mapped_column(String(100), nullable=False)
    screen_type_name: Mapped[str] = mapped_column(String(100), nullable=False)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
