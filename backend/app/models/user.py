"""
User Model - Defines the user data structure.
"""

from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from .base import CamelModel


class UserBase(CamelModel):
    """Base user model with common fields."""
    username: str = Field(..., min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    name: Optional[str] = None


class UserCreate(UserBase):
    """User creation model with password."""
    password: str = Field(..., min_length=6)


class UserLogin(CamelModel):
    """Login credentials."""
    username: str
    password: str


class User(UserBase):
    """User as returned by the API."""
    user_id: str
    created_at: datetime


class UserInDB(User):
    """User model as stored with the hashed password."""
    hashed_password: str


class Token(CamelModel):
    """JWT token response model."""
    access_token: str
    token_type: str = "bearer"
