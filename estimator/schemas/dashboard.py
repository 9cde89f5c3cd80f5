"""Dashboard and report schemas."""
from decimal import Decimal

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_projects: int
    total_screens: int
    total_estimations: int
    total_hours: int


class ProjectHours(BaseModel):
    project_id: int
    project_name: str
    total_hours: int


class ScreenTypeDistribution(BaseModel):
    screen_type_name: str
    count: int


class ComplexityDistribution(BaseModel):
    complexity_name: str
    count: int
    total_hours: int


class ReportSummary(BaseModel):
    total_estimations: int
    total_hours: int
    avg_hours: int
    total_screens: int
    estimated_days: Decimal
    estimated_days_label: str
