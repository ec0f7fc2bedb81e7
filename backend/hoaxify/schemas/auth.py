# hoaxify/schemas/auth.py
from typing import Any

from pydantic import BaseModel


class LoginIn(BaseModel):
    # Any shape is accepted; a malformed login is an authentication failure, not a 400.
    email: Any = None
    password: Any = None


class LoginOut(BaseModel):
    id: int
    username: str
    image: str | None = None
    token: str


class MessageOut(BaseModel):
    message: str
