from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

class ScheduleWindow(BaseModel):
    # 'from'/'to' are the JSON keys; Python keywords, hence start/end
    start: Optional[datetime] = Field(None, alias="from")
    end: Optional[datetime] = Field(None, alias="to")

    model_config = {"populate_by_name": True}


# Request DTOs
class URLCreateRequest(BaseModel):
    # Checked by URLService so that a missing url is an InvalidInput (400), not a 422
    url: Optional[str] = None
    title: Optional[str] = None
    vanity: Optional[str] = None
    schedule: Optional[ScheduleWindow] = None

    @field_validator('title', 'vanity')
    def blank_to_none(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None
