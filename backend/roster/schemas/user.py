"""User Schemas - Pydantic models with field-level validation for the /users boundary.

Invariants:
    - UserCreate.name and UserCreate.email are required, stripped, non-empty
    - email needs exactly one "@" with text on both sides (uniqueness is not checked)

Design Decisions:
    - Pattern check over EmailStr: keeps email-validator out of the dependency set,
      and the store does not rely on deliverability
"""

import re

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class UserCreate(BaseModel):
    """User creation - validated before the store is called."""
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError("email must look like local@domain")
        return v


class UserResponse(BaseModel):
    """User response - public-facing user data."""
    id: str
    name: str
    email: str
