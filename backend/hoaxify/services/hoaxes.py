from __future__ import annotations

import math

from sqlalchemy.orm import Session, joinedload

from hoaxify.core.clock import now_millis
from hoaxify.core.errors import Forbidden, NotFound
from hoaxify.dependencies.pagination import Pagination
from hoaxify.models.hoax import Hoax
from hoaxify.models.user import User
from hoaxify.services import files


def save(db: Session, user_id: int, content: str, file_attachment_id: int | None = None) -> Hoax:
    hoax = Hoax(content=content, timestamp=now_millis(), user_id=user_id)
    db.add(hoax)
    db.flush()
    if file_attachment_id:
        files.associate_file_to_hoax(db, file_attachment_id, hoax.id, commit=False)
    db.commit()
    db.refresh(hoax)
    return hoax


def _serialize(hoax: Hoax) -> dict:
    item = {
        "id": hoax.id,
        "content": hoax.content,
        "timestamp": hoax.timestamp,
        "user": {
            "id": hoax.user.id,
            "username": hoax.user.username,
            "email": hoax.user.email,
            "image": hoax.user.image,
        },
    }
    if hoax.file_attachment is not None:
        item["fileAttachment"] = {
            "filename": hoax.file_attachment.filename,
            "fileType": hoax.file_attachment.file_type,
        }
    return item


def get_hoaxes(db: Session, pagination: Pagination, user_id: int | None = None) -> dict:
    query = db.query(Hoax)
    if user_id is not None:
        if db.get(User, user_id) is None:
            raise NotFound("user_not_found")
        query = query.filter(Hoax.user_id == user_id)

    count = query.count()
    hoaxes = (
        query.options(joinedload(Hoax.user), joinedload(Hoax.file_attachment))
        .order_by(Hoax.timestamp.desc(), Hoax.id.desc())
        .offset(pagination.offset)
        .limit(pagination.size)
        .all()
    )
    return {
        "content": [_serialize(h) for h in hoaxes],
        "page": pagination.page,
        "size": pagination.size,
        "totalPages": math.ceil(count / pagination.size),
    }


def delete_hoax(db: Session, hoax_id: int, user_id: int) -> None:
    hoax = db.query(Hoax).filter(Hoax.id == hoax_id, Hoax.user_id == user_id).first()
    if not hoax:
        raise Forbidden("unauthorized_hoax_delete")

    filename = hoax.file_attachment.filename if hoax.file_attachment is not None else None
    db.delete(hoax)
    db.commit()
    files.delete_attachment(filename)
