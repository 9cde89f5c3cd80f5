"""SQLAlchemy models."""
from estimator.models.audit import AuditLog
from estimator.models.estimation import Estimation, EstimationDetail
from estimator.models.hour_mapping import HourMapping
from estimator.models.master import ComplexityLevel, ScreenType
from estimator.models.project import Project, Screen
from estimator.models.user import Role, User, UserRole

__all__ = [
    "AuditLog",
    "ComplexityLevel",
    "Estimation",
    "EstimationDetail",
    "HourMapping",
    "Project",
    "Role",
    "Screen",
    "ScreenType",
    "User",
    "UserRole",
]
