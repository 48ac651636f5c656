from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class HealthCheck(BaseModel):
    check_id: Optional[int] = None


class FileRecord(BaseModel):
    """Metadata row for one uploaded image; ``url`` is ``<bucket>/<key>``."""

    id: str
    file_name: str
    url: str
    upload_date: date


class FileResponse(BaseModel):
    file_name: str
    id: str
    url: str
    upload_date: date = Field(..., description="UTC calendar date of the upload")

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileResponse":
        return cls(
            file_name=record.file_name,
            id=record.id,
            url=record.url,
            upload_date=record.upload_date,
        )
