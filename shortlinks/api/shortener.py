from fastapi import APIRouter, Depends, status, BackgroundTasks
from fastapi.responses import RedirectResponse
import logging

from shortlinks.core.config import settings
from shortlinks.schemas.URLInfoResponse import URLInfoResponse
from shortlinks.schemas.URLCreateRequest import URLCreateRequest
from shortlinks.services.shortener import URLService
from shortlinks.api.dependencies import get_url_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/api/v1/shorten", response_model=URLInfoResponse, status_code=status.HTTP_201_CREATED)
def shorten_url_endpoint(url_request: URLCreateRequest, service: URLService = Depends(get_url_service)):
    item = service.create(
        url_request.url,
        vanity=url_request.vanity,
        title=url_request.title,
        schedule=url_request.schedule,
    )
    logger.info(f"API success: Shortened {item.long_url[:50]}... to {item.short_code}")
    return URLInfoResponse.from_item(item, settings.BASE_URL)

@router.get("/{short_code}", tags=["redirect"])
def redirect_to_url_endpoint(short_code: str, background_tasks: BackgroundTasks, service: URLService = Depends(get_url_service)):
    # click recording runs after the response is sent
    long_url = service.resolve(short_code, defer=background_tasks.add_task)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
