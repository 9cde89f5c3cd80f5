"""Estimation schemas."""
from decimal import Decimal

from pydantic import BaseModel, Field


class EstimationHeaderCreate(BaseModel):
    # Required-ness is checked by the record store so API and service report the same errors
    project_id: int | None = None
    name: str | None = None
    version_number: str | None = None
    total_hours: int | None = None
    notes: str | None = None


class EstimationDetailCreate(BaseModel):
    screen_id: int
    complexity_id: int
    screen_type_id: int
    # Omitted: computed server-side from the hour mapping
    calculated_hours: int | None = None


class EstimationCreate(BaseModel):
    estimation: EstimationHeaderCreate
    details: list[EstimationDetailCreate] = []


class EstimationResponse(BaseModel):
    id: int
    project_id: int
    project_name: str | None = None
    name: str
    version_number: str
    total_hours: int
    estimated_days: Decimal
    estimated_days_label: str
    notes: str | None
    created_by: int
    creator_name: str | None = None
    created_at: str


class EstimationDetailResponse(BaseModel):
    id: int
    screen_id: int
    screen_name: str | None
    complexity_id: int
    complexity_name: str | None
    complexity_hours: int | None
    screen_type_id: int
    screen_type_name: str | None
    screen_type_hours: int | None
    calculated_hours: int


class EstimationWithDetails(EstimationResponse):
    details: list[EstimationDetailResponse] = []


class CalculationLine(BaseModel):
    complexity_name: str = Field(..., min_length=1)
    screen_type_name: str = Field(..., min_length=1)


class CalculationRequest(BaseModel):
    lines: list[CalculationLine] = []


class LineResult(BaseModel):
    complexity_name: str
    screen_type_name: str
    hours: int
    mapped: bool


class CalculationResult(BaseModel):
    lines: list[LineResult]
    total_hours: int
    estimated_days: Decimal
    estimated_days_label: str
