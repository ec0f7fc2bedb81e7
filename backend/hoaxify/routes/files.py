# hoaxify/routes/files.py
from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from hoaxify.core.config import settings
from hoaxify.core.database import get_db
from hoaxify.core.errors import FileSizeLimitExceeded, NotFound
from hoaxify.core.rate_limit import maybe_limit
from hoaxify.schemas.hoax import AttachmentOut
from hoaxify.services import files

router = APIRouter(tags=["files"])

ONE_YEAR_SECONDS = 365 * 24 * 60 * 60


def _read_limited(upload: UploadFile | None, max_bytes: int) -> bytes | None:
    if upload is None:
        return None
    data = upload.file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise FileSizeLimitExceeded()
    return data


@router.post("/api/1.0/hoaxes/attachments", response_model=AttachmentOut)
@maybe_limit("30/minute")
def upload_attachment(
    request: Request,
    file: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    data = _read_limited(file, settings.MAX_ATTACHMENT_BYTES)
    return {"id": files.save_attachment(db, data)}


@router.get("/images/{filename}")
def serve_profile_image(filename: str):
    path = files.profile_image_path(filename)
    if path is None:
        raise NotFound("file_not_found")
    return FileResponse(path, headers={"Cache-Control": f"public, max-age={ONE_YEAR_SECONDS}"})
