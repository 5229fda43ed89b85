from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from shortlinks.schemas.URLCreateRequest import ScheduleWindow

# Response DTOs
class URLInfoResponse(BaseModel):
    # Python fields are snake_case, JSON keys are camelCase
    short_code: str = Field(..., alias="shortCode")
    short_url: str = Field(..., alias="shortUrl")
    long_url: str = Field(..., alias="longUrl")
    title: Optional[str] = None
    qr_reference: Optional[str] = Field(None, alias="qrReference")
    created_at: datetime = Field(..., alias="createdAt")
    schedule: Optional[ScheduleWindow] = None

    model_config = {"from_attributes": True, "populate_by_name": True}

    @classmethod
    def from_item(cls, item, base_url: str, **extra):
        schedule = None
        if item.active_from is not None or item.active_to is not None:
            schedule = ScheduleWindow(start=item.active_from, end=item.active_to)
        return cls(
            short_code=item.short_code,
            short_url=f"{base_url.rstrip('/')}/{item.short_code}",
            long_url=item.long_url,
            title=item.title,
            qr_reference=item.qr_reference or None,
            created_at=item.created_at,
            schedule=schedule,
            **extra,
        )


class LinkDetailResponse(URLInfoResponse):
    click_count: int = Field(0, alias="clickCount")
