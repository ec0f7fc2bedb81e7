# hoaxify/routes/auth.py
from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from hoaxify.core.database import get_db
from hoaxify.core.errors import AuthenticationFailure, Forbidden
from hoaxify.core.rate_limit import maybe_limit
from hoaxify.core.security import verify_password
from hoaxify.core.validation import is_valid_email
from hoaxify.dependencies.auth import bearer_scheme, bearer_token
from hoaxify.dependencies.body import json_body
from hoaxify.schemas.auth import LoginIn, LoginOut
from hoaxify.services.tokens import create_token, delete_token
from hoaxify.services.users import find_by_email

router = APIRouter(prefix="/api/1.0", tags=["auth"])


@router.post("/auth", response_model=LoginOut)
@maybe_limit("10/minute")
def login(request: Request, body: dict = Depends(json_body), db: Session = Depends(get_db)):
    payload = LoginIn.model_validate(body)
    if not is_valid_email(payload.email) or not isinstance(payload.password, str):
        raise AuthenticationFailure()

    user = find_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.password):
        raise AuthenticationFailure()

    if user.inactive:
        raise Forbidden()

    token = create_token(db, user)
    return {
        "id": user.id,
        "username": user.username,
        "image": user.image,
        "token": token,
    }


@router.post("/logout")
def logout(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    """
    Revokes the bearer token the request was made with, if any.
    Matches on the raw token so an already-expired token is removed too.
    """
    delete_token(db, bearer_token(creds))
    return Response(status_code=200)
