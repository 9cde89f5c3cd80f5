"""Pydantic schemas."""
from estimator.schemas.auth import Token, UserCreate, UserLogin, UserResponse
from estimator.schemas.dashboard import (
    ComplexityDistribution,
    DashboardStats,
    ProjectHours,
    ReportSummary,
    ScreenTypeDistribution,
)
from estimator.schemas.estimation import (
    CalculationRequest,
    CalculationResult,
    EstimationCreate,
    EstimationDetailCreate,
    EstimationDetailResponse,
    EstimationHeaderCreate,
    EstimationResponse,
    EstimationWithDetails,
)
from estimator.schemas.hour_mapping import HourMappingCreate, HourMappingResponse, HourMappingUpdate
from estimator.schemas.master import MasterItemCreate, MasterItemResponse, MasterItemUpdate
from estimator.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    ScreenCreate,
    ScreenResponse,
    ScreenUpdate,
)

__all__ = [
    "Token",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "ComplexityDistribution",
    "DashboardStats",
    "ProjectHours",
    "ReportSummary",
    "ScreenTypeDistribution",
    "CalculationRequest",
    "CalculationResult",
    "EstimationCreate",
    "EstimationDetailCreate",
    "EstimationDetailResponse",
    "EstimationHeaderCreate",
    "EstimationResponse",
    "EstimationWithDetails",
    "HourMappingCreate",
    "HourMappingResponse",
    "HourMappingUpdate",
    "MasterItemCreate",
    "MasterItemResponse",
    "MasterItemUpdate",
    "ProjectCreate",
    "ProjectResponse",
    "ProjectUpdate",
    "ScreenCreate",
    "ScreenResponse",
    "ScreenUpdate",
]
