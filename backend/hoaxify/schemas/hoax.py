from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HoaxIn(BaseModel):
    content: Any = None
    file_attachment: Any = Field(default=None, alias="fileAttachment")

    model_config = ConfigDict(populate_by_name=True)


class AttachmentOut(BaseModel):
    id: int
