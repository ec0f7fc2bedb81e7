from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from hoaxify.auth.identity import Identity
from hoaxify.core.database import get_db
from hoaxify.core.errors import Forbidden, ValidationFailure
from hoaxify.core.i18n import t
from hoaxify.core.validation import (
    FieldErrors,
    email_violation,
    is_valid_email,
    password_violation,
    username_violation,
)
from hoaxify.dependencies.auth import get_identity
from hoaxify.dependencies.body import json_body
from hoaxify.dependencies.pagination import Pagination, get_pagination
from hoaxify.schemas.auth import MessageOut
from hoaxify.schemas.user import (
    PasswordResetRequestIn,
    PasswordUpdateIn,
    RegisterIn,
    UserOut,
    UserPage,
    UserUpdateIn,
)
from hoaxify.services import files
from hoaxify.services import users as user_service

router = APIRouter(prefix="/api/1.0", tags=["users"])


def _profile_image_violation(image: Any) -> str | None:
    if image is None or image == "":
        return None
    if not isinstance(image, str):
        return "unsupported_image_file"
    data = files.decode_base64(image)
    if not files.is_less_than_2mb(data):
        return "profile_image_size"
    if not files.is_supported_image(data):
        return "unsupported_image_file"
    return None


@router.post("/users", response_model=MessageOut)
def register(payload: RegisterIn, request: Request, db: Session = Depends(get_db)):
    errors = FieldErrors()
    errors.check("username", username_violation(payload.username))
    errors.check("email", email_violation(payload.email))
    if "email" not in errors and user_service.find_by_email(db, payload.email):
        errors.check("email", "email_inuse")
    errors.check("password", password_violation(payload.password))
    errors.raise_if_any()

    user_service.save_user(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )
    return {"message": t(request, "user_create_success")}


@router.post("/users/token/{token}", response_model=MessageOut)
def activate_account(token: str, request: Request, db: Session = Depends(get_db)):
    user_service.activate(db, token)
    return {"message": t(request, "account_activation_success")}


@router.get("/users", response_model=UserPage)
def list_users(
    pagination: Pagination = Depends(get_pagination),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return user_service.get_users(db, pagination, identity)


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: dict = Depends(json_body),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    if not identity.is_user(user_id):
        raise Forbidden("unauthorized_user_update")
    payload = UserUpdateIn.model_validate(body)

    errors = FieldErrors()
    errors.check("username", username_violation(payload.username))
    errors.check("image", _profile_image_violation(payload.image))
    errors.raise_if_any()

    return user_service.update_user(db, user_id, username=payload.username, image=payload.image)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    if not identity.is_user(user_id):
        raise Forbidden("unauthorized_user_delete")
    user_service.delete_user(db, user_id)
    return Response(status_code=200)


@router.post("/user/password", response_model=MessageOut)
def request_password_reset(payload: PasswordResetRequestIn, request: Request, db: Session = Depends(get_db)):
    if not is_valid_email(payload.email):
        raise ValidationFailure({"email": "email_invalid"})

    user_service.password_reset_request(db, payload.email)
    return {"message": t(request, "password_reset_request_success")}


@router.put("/user/password")
def update_password(body: dict = Depends(json_body), db: Session = Depends(get_db)):
    payload = PasswordUpdateIn.model_validate(body)
    reset_token = payload.password_reset_token if isinstance(payload.password_reset_token, str) else None
    user = user_service.find_by_password_reset_token(db, reset_token)
    if not user:
        raise Forbidden("unauthorized_password_reset")

    errors = FieldErrors()
    errors.check("password", password_violation(payload.password))
    errors.raise_if_any()

    user_service.update_password(db, user, payload.password)
    return Response(status_code=200)
