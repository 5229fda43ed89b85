from shortlinks.schemas.URLInfoResponse import URLInfoResponse
from pydantic import BaseModel
from typing import List

class PaginatedURLList(BaseModel):
    total: int
    skip: int
    limit: int
    links: List[URLInfoResponse]
