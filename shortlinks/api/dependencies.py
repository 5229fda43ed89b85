import secrets

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

from shortlinks.core.config import settings
from shortlinks.db.Connection import database
from shortlinks.services.RedisURLCache import RedisURLCache
from shortlinks.services.metrics import ClickLedger
from shortlinks.services.qrcode_service import (
    HttpQRCodeProvider,
    LocalAssetStore,
    NullQRCodeProvider,
    QRCodeProvider,
)
from shortlinks.services.shortener import URLService
from shortlinks.utils.clock import utcnow
from shortlinks.utils.encoding import CodeGenerator


def build_qr_provider() -> QRCodeProvider:
    if not settings.QR_ENABLED:
        return NullQRCodeProvider()
    client = httpx.Client(timeout=httpx.Timeout(settings.QR_TIMEOUT_SECONDS), follow_redirects=True)
    return HttpQRCodeProvider(
        client,
        LocalAssetStore(settings.MEDIA_PATH, settings.BASE_URL),
        settings.QR_API_URL,
        timeout=settings.QR_TIMEOUT_SECONDS,
    )


qr_provider = build_qr_provider()
code_generator = CodeGenerator(
    secrets.SystemRandom(),
    length=settings.SHORT_CODE_LENGTH,
    max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
)


def get_clock():
    return utcnow


def get_code_generator() -> CodeGenerator:
    return code_generator


def get_qr_provider() -> QRCodeProvider:
    return qr_provider


def get_url_cache(client=Depends(database.get_redis_client)) -> RedisURLCache:
    return RedisURLCache(client, ttl=settings.CACHE_TTL)


def get_click_ledger(session_factory=Depends(database.get_session_factory)) -> ClickLedger:
    return ClickLedger(session_factory, attempts=settings.CLICK_RECORD_ATTEMPTS)


def get_url_service(
    db: Session = Depends(database.get_db),
    generator: CodeGenerator = Depends(get_code_generator),
    ledger: ClickLedger = Depends(get_click_ledger),
    qr: QRCodeProvider = Depends(get_qr_provider),
    cache: RedisURLCache = Depends(get_url_cache),
    clock=Depends(get_clock),
) -> URLService:
    return URLService(db, generator, ledger, qr_provider=qr, cache=cache, clock=clock)
