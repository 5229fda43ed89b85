# re-export common schemas for simpler imports
from .URLCreateRequest import URLCreateRequest, ScheduleWindow
from .URLInfoResponse import URLInfoResponse, LinkDetailResponse
from .PaginatedURLList import PaginatedURLList
from .DailyStat import DailyStat

__all__ = [
    "URLCreateRequest",
    "ScheduleWindow",
    "URLInfoResponse",
    "LinkDetailResponse",
    "PaginatedURLList",
    "DailyStat",
]
