"""Authentication schemas for requests and responses."""
from pydantic import BaseModel, EmailStr, Field, ConfigDict


class UserCreate(BaseModel):
    """Schema for user registration."""
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Schema for user responses."""
    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Schema for a successful login."""
    user: UserResponse
    token: str


class TokenClaims(BaseModel):
    """Identity resolved from a validated token."""
    subject_id: int
    role: str
