from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path

import filetype
from sqlalchemy.orm import Session

from hoaxify.core.clock import ONE_HOUR_MILLIS, now_millis
from hoaxify.core.config import settings
from hoaxify.core.security import random_string
from hoaxify.models.file_attachment import FileAttachment
from hoaxify.services.sweeps import PeriodicSweep

logger = logging.getLogger(__name__)

FILENAME_LENGTH = 32
NO_ATTACHMENT_ID = 0
UNRECOGNIZED_FILE_TYPE = "non"
SUPPORTED_PROFILE_IMAGE_TYPES = {"image/png", "image/jpeg"}


# -----------------------------
# Storage layout
# -----------------------------
def upload_folder() -> Path:
    return Path(settings.UPLOAD_DIR)


def profile_folder() -> Path:
    return upload_folder() / settings.PROFILE_DIR


def attachment_folder() -> Path:
    return upload_folder() / settings.ATTACHMENT_DIR


def create_folders() -> None:
    for folder in (upload_folder(), profile_folder(), attachment_folder()):
        folder.mkdir(parents=True, exist_ok=True)


def _unlink_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("File already gone: %s", path)
    except OSError:
        logger.exception("Failed to delete file %s", path)


# -----------------------------
# Content sniffing
# -----------------------------
def detect_file_type(data: bytes) -> tuple[str | None, str | None]:
    """
    Returns (mime, extension) from the file's magic bytes, or (None, None)
    when the content is not recognized. Client filenames are never trusted.
    """
    kind = filetype.guess(data) if data else None
    if kind is None:
        return None, None
    return kind.mime, kind.extension


def is_less_than_2mb(data: bytes) -> bool:
    return len(data) <= settings.MAX_PROFILE_IMAGE_BYTES


def is_supported_image(data: bytes) -> bool:
    mime, _ = detect_file_type(data)
    return mime in SUPPORTED_PROFILE_IMAGE_TYPES


def decode_base64(raw: str) -> bytes:
    try:
        return base64.b64decode(raw)
    except (binascii.Error, ValueError):
        return b""


# -----------------------------
# Profile images
# -----------------------------
def save_profile_image(base64_file: str | None) -> str | None:
    if not base64_file:
        return None
    filename = random_string(FILENAME_LENGTH)
    (profile_folder() / filename).write_bytes(decode_base64(base64_file))
    return filename


def delete_profile_image(filename: str | None) -> None:
    if filename:
        _unlink_quietly(profile_folder() / filename)


def profile_image_path(filename: str) -> Path | None:
    # Only plain names inside the profile folder are served.
    if not filename or Path(filename).name != filename:
        return None
    path = profile_folder() / filename
    return path if path.is_file() else None


# -----------------------------
# Hoax attachments
# -----------------------------
def save_attachment(db: Session, data: bytes | None) -> int:
    """
    Stores an uploaded file and records it as an unlinked attachment.
    Returns the new attachment id, or NO_ATTACHMENT_ID when nothing was uploaded.
    """
    if not data:
        return NO_ATTACHMENT_ID

    mime, extension = detect_file_type(data)
    filename = random_string(FILENAME_LENGTH)
    if extension:
        filename = f"{filename}.{extension}"

    (attachment_folder() / filename).write_bytes(data)

    attachment = FileAttachment(
        filename=filename,
        upload_date=now_millis(),
        file_type=mime or UNRECOGNIZED_FILE_TYPE,
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    return attachment.id


def associate_file_to_hoax(db: Session, attachment_id: int, hoax_id: int, *, commit: bool = True) -> None:
    """
    Links an attachment to a hoax. The first association wins; later calls
    for an already-linked attachment leave it untouched.
    """
    attachment = db.get(FileAttachment, attachment_id)
    if attachment is None or attachment.hoax_id is not None:
        return
    attachment.hoax_id = hoax_id
    if commit:
        db.commit()


def delete_attachment(filename: str | None) -> None:
    if filename:
        _unlink_quietly(attachment_folder() / filename)


def remove_unused_attachments(db: Session) -> int:
    cutoff = now_millis() - int(settings.UNUSED_ATTACHMENT_TTL_HOURS) * ONE_HOUR_MILLIS
    orphans = (
        db.query(FileAttachment)
        .filter(FileAttachment.upload_date < cutoff, FileAttachment.hoax_id.is_(None))
        .all()
    )
    filenames = [attachment.filename for attachment in orphans]
    for attachment in orphans:
        db.delete(attachment)
    db.commit()
    # Files go only once the rows are gone.
    for filename in filenames:
        delete_attachment(filename)
    if orphans:
        logger.info("Attachment cleanup removed %s unused attachment(s)", len(orphans))
    return len(orphans)


def schedule_attachment_cleanup(interval_seconds: float | None = None) -> PeriodicSweep:
    sweep = PeriodicSweep(
        "attachment-cleanup",
        remove_unused_attachments,
        interval_seconds if interval_seconds is not None else settings.ATTACHMENT_CLEANUP_INTERVAL_SECONDS,
    )
    sweep.start()
    return sweep
