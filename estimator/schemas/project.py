"""Project and screen schemas."""
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class ProjectResponse(BaseModel):
    id: int
    name: str
    description: str | None
    created_by: int
    created_at: str


class ScreenCreate(BaseModel):
    project_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class ScreenUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class ScreenResponse(BaseModel):
    id: int
    project_id: int
    name: str
    description: str | None

    class Config:
        from_attributes = True
