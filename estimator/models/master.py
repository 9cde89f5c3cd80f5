"""Complexity and screen type master data - each tier carries an hours weight."""
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from estimator.database import Base


class ComplexityLevel(Base):
    """Named difficulty tier (Simple/Medium/Complex)."""

    __tablename__ = "complexity_master"
    __table_args__ = (CheckConstraint("hours > 0", name="ck_complexity_hours_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ScreenType(Base):
    """Named UI behavior tier (Static/Partial Dynamic/Dynamic)."""

    __tablename__ = "screen_type_master"
    __table_args__ = (CheckConstraint("hours > 0", name="ck_screen_type_hours_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    hours: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
