from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserPage(BaseModel):
    content: list[UserOut]
    page: int
    size: int
    totalPages: int


# Request bodies accept any value per field; rules (types included) are checked
# in the route so authorization runs first and every failing field is reported together.
class RegisterIn(BaseModel):
    username: Any = None
    email: Any = None
    password: Any = None


class UserUpdateIn(BaseModel):
    username: Any = None
    image: Any = None


class PasswordResetRequestIn(BaseModel):
    email: Any = None


class PasswordUpdateIn(BaseModel):
    password_reset_token: Any = Field(default=None, alias="passwordResetToken")
    password: Any = None

    model_config = ConfigDict(populate_by_name=True)
