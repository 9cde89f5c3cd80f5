"""Estimation header and line-item models. Rows are append-only."""
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from estimator.database import Base


class Estimation(Base):
    """Named, versioned estimation for a project. total_hours equals the sum of its details."""

    __tablename__ = "estimations"
    __table_args__ = (CheckConstraint("total_hours >= 0", name="ck_estimation_total_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    version_number: Mapped[str] = mapped_column(String(50), nullable=False)
    total_hours: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    details: Mapped[list["EstimationDetail"]] = relationship(
        "EstimationDetail",
        back_populates="estimation",
        cascade="all, delete-orphan",
        order_by="EstimationDetail.id",
    )


class EstimationDetail(Base):
    """One screen line item. calculated_hours is a snapshot taken at creation time."""

    __tablename__ = "estimation_details"
    __table_args__ = (CheckConstraint("calculated_hours >= 0", name="ck_detail_hours_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    estimation_id: Mapped[int] = mapped_column(
        ForeignKey("estimations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    screen_id: Mapped[int] = mapped_column(ForeignKey("screens.id"), nullable=False)
    complexity_id: Mapped[int] = mapped_column(ForeignKey("complexity_master.id"), nullable=False)
    screen_type_id: Mapped[int] = mapped_column(ForeignKey("screen_type_master.id"), nullable=False)
    calculated_hours: Mapped[int] = mapped_column(Integer, nullable=False)

    estimation: Mapped["Estimation"] = relationship("Estimation", back_populates="details")
