# Standard library imports
from typing import Any
from uuid import UUID

# Third-party imports
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

# ============================
# ----- Request schemas ------
# ============================


class UserCreateRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str
    name: str | None = Field(None, max_length=120)

    @model_validator(mode="before")
    def check_passwords(cls, values: dict[str, Any]) -> dict[str, Any]:
        pwd = values.get("password")
        confirm = values.get("confirm_password")
        if pwd != confirm:
            raise ValueError("Passwords do not match")
        return values

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "mail@example.com",
                "password": "secret123",
                "confirm_password": "secret123",
                "name": "Jane Doe",
            }
        }
    }


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(None, max_length=120)
    bio: str | None = Field(None, max_length=500)


# ============================
# ----- Response schemas -----
# ============================


class ProfileResponse(BaseModel):
    """Public profile of a user; every field but the id may be null."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None = None
    email: str | None = None
    bio: str | None = None
