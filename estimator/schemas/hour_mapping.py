"""Hour mapping schemas."""
from pydantic import BaseModel, Field


class HourMappingCreate(BaseModel):
    complexity_name: str = Field(..., min_length=1, max_length=100)
    screen_type_name: str = Field(..., min_length=1, max_length=100)
    hours: int = Field(..., ge=0)


class HourMappingUpdate(BaseModel):
    hours: int = Field(..., ge=0)


class HourMappingResponse(BaseModel):
    id: int
    complexity_name: str
    screen_type_name: str
    hours: int

    class Config:
        from_attributes = True
