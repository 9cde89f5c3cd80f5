"""Auth and user administration schemas."""
from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    """Self-registration. New accounts start with the viewer role."""

    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1, max_length=255)


class UserLogin(BaseModel):
    email: str  # plain str so seeded addresses like admin@estimator.local still log in
    password: str


class UserRolesUpdate(BaseModel):
    role_ids: list[int] = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    is_active: bool
    roles: list[str] = []

    class Config:
        from_attributes = True


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
