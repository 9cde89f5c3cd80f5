"""Complexity and screen type master data schemas. Both axes share one shape."""
from pydantic import BaseModel, Field, field_validator


class MasterItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    hours: int = Field(..., gt=0)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class MasterItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    hours: int | None = Field(None, gt=0)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class MasterItemResponse(BaseModel):
    id: int
    name: str
    hours: int
    description: str | None

    class Config:
        from_attributes = True
