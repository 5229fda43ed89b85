from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from shortlinks.api.dependencies import get_url_service
from shortlinks.core.config import settings
from shortlinks.schemas.DailyStat import DailyStat
from shortlinks.schemas.PaginatedURLList import PaginatedURLList
from shortlinks.schemas.URLInfoResponse import LinkDetailResponse
from shortlinks.services.Analytics import URL
from shortlinks.services.shortener import URLService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/list", response_model=PaginatedURLList)
def list_urls_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: URLService = Depends(get_url_service)
):
    total, url_responses = URL.get_all(skip, limit, service.db)
    return PaginatedURLList(
        total=total,
        skip=skip,
        limit=limit,
        links=url_responses
    )

@router.get("/stats/daily", response_model=List[DailyStat])
def get_daily_stats_endpoint(code: Optional[str] = None, service: URLService = Depends(get_url_service)):
    """Clicks per day, zero-filled from the first click through today."""
    return service.stats_by_day(code)

@router.get("/stats/{short_code}", response_model=LinkDetailResponse)
def get_url_statistics_endpoint(short_code: str, service: URLService = Depends(get_url_service)):
    item = service.get(short_code)
    return LinkDetailResponse.from_item(item, settings.BASE_URL, click_count=service.click_count(item.short_code))
