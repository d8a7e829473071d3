"""Item Schemas - request/response models for the /items boundary."""

from pydantic import BaseModel, Field, field_validator


class ItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ItemCreated(BaseModel):
    """POST /items returns only the assigned id."""
    id: int


class ItemResponse(BaseModel):
    id: int
    name: str
