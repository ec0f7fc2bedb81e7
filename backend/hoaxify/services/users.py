from __future__ import annotations

import logging
import math

from sqlalchemy.orm import Session

from hoaxify.auth.identity import Identity
from hoaxify.core.errors import EmailDeliveryFailure, InvalidActivationToken, NotFound
from hoaxify.core.security import hash_password, random_string
from hoaxify.dependencies.pagination import Pagination
from hoaxify.models.user import User
from hoaxify.services import email as email_service
from hoaxify.services import files
from hoaxify.services.tokens import clear_tokens

logger = logging.getLogger(__name__)

ACCOUNT_TOKEN_LENGTH = 16


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def find_by_password_reset_token(db: Session, token: str | None) -> User | None:
    if not token:
        return None
    return db.query(User).filter(User.password_reset_token == token).first()


def save_user(db: Session, *, username: str, email: str, password: str) -> User:
    """
    Creates an inactive user and sends the activation email in one
    transaction: if the email cannot be sent nothing is persisted.
    """
    user = User(
        username=username,
        email=email,
        password=hash_password(password),
        inactive=True,
        activation_token=random_string(ACCOUNT_TOKEN_LENGTH),
    )
    db.add(user)
    db.flush()
    try:
        email_service.send_account_activation(user.email, user.activation_token)
    except Exception as e:
        db.rollback()
        logger.exception("Activation email failed; registration rolled back for %s", email)
        raise EmailDeliveryFailure() from e
    db.commit()
    db.refresh(user)
    return user


def activate(db: Session, token: str) -> None:
    user = db.query(User).filter(User.activation_token == token).first()
    if not user:
        raise InvalidActivationToken()
    user.inactive = False
    user.activation_token = None
    db.commit()


def get_users(db: Session, pagination: Pagination, identity: Identity) -> dict:
    query = db.query(User).filter(User.inactive.is_(False))
    if identity.is_authenticated:
        query = query.filter(User.id != identity.user_id)

    count = query.count()
    users = query.order_by(User.id).offset(pagination.offset).limit(pagination.size).all()
    return {
        "content": users,
        "page": pagination.page,
        "size": pagination.size,
        "totalPages": math.ceil(count / pagination.size),
    }


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id, User.inactive.is_(False)).first()
    if not user:
        raise NotFound("user_not_found")
    return user


def update_user(db: Session, user_id: int, *, username: str | None, image: str | None) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("user_not_found")

    if username:
        user.username = username
    if image:
        old_image = user.image
        user.image = files.save_profile_image(image)
        files.delete_profile_image(old_image)

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> None:
    """
    Removes the user together with their tokens, hoaxes and hoax attachments.
    Stored files are removed best-effort after the rows are gone.
    """
    user = db.get(User, user_id)
    if not user:
        return

    attachment_files = [h.file_attachment.filename for h in user.hoaxes if h.file_attachment is not None]
    image = user.image

    db.delete(user)
    db.commit()

    for filename in attachment_files:
        files.delete_attachment(filename)
    files.delete_profile_image(image)


def password_reset_request(db: Session, email: str) -> None:
    user = find_by_email(db, email)
    if not user:
        raise NotFound("email_not_inuse")

    user.password_reset_token = random_string(ACCOUNT_TOKEN_LENGTH)
    db.flush()
    try:
        email_service.send_password_reset(user.email, user.password_reset_token)
    except Exception as e:
        db.rollback()
        logger.exception("Password reset email failed for %s", email)
        raise EmailDeliveryFailure() from e
    db.commit()


def update_password(db: Session, user: User, password: str) -> None:
    """
    Sets the new password, reactivates the account and signs the user out everywhere.
    """
    user.password = hash_password(password)
    user.password_reset_token = None
    user.inactive = False
    user.activation_token = None
    clear_tokens(db, user.id, commit=False)
    db.commit()
