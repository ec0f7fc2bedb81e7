from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from hoaxify.auth.identity import Identity
from hoaxify.core.database import get_db
from hoaxify.core.errors import AuthenticationFailure, Forbidden
from hoaxify.core.i18n import t
from hoaxify.core.validation import FieldErrors, hoax_content_violation
from hoaxify.dependencies.auth import get_identity
from hoaxify.dependencies.body import json_body
from hoaxify.dependencies.pagination import Pagination, get_pagination
from hoaxify.schemas.auth import MessageOut
from hoaxify.schemas.hoax import HoaxIn
from hoaxify.services import hoaxes as hoax_service

router = APIRouter(prefix="/api/1.0", tags=["hoaxes"])


@router.post("/hoaxes", response_model=MessageOut)
def submit_hoax(
    request: Request,
    body: dict = Depends(json_body),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    if not identity.is_authenticated:
        raise AuthenticationFailure("unauthorized_hoax_submit")
    payload = HoaxIn.model_validate(body)

    errors = FieldErrors()
    errors.check("content", hoax_content_violation(payload.content))
    errors.raise_if_any()

    attachment_id = payload.file_attachment
    if not isinstance(attachment_id, int) or isinstance(attachment_id, bool):
        attachment_id = None
    hoax_service.save(db, identity.user_id, payload.content, attachment_id)
    return {"message": t(request, "hoax_submit_success")}


@router.get("/hoaxes")
def list_hoaxes(pagination: Pagination = Depends(get_pagination), db: Session = Depends(get_db)):
    return hoax_service.get_hoaxes(db, pagination)


@router.get("/users/{user_id}/hoaxes")
def list_user_hoaxes(
    user_id: int,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    return hoax_service.get_hoaxes(db, pagination, user_id=user_id)


@router.delete("/hoaxes/{hoax_id}")
def delete_hoax(
    hoax_id: int,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    if not identity.is_authenticated:
        raise Forbidden("unauthorized_hoax_delete")
    hoax_service.delete_hoax(db, hoax_id, identity.user_id)
    return Response(status_code=200)
