from typing import Callable, List, Optional
import logging

from pydantic import HttpUrl, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from shortlinks.core.config import settings
from shortlinks.core.errors import Conflict, InvalidInput, NotFound, StorageFailure
from shortlinks.db import repository
from shortlinks.db.Models.models import ShortLinkItem
from shortlinks.schemas.DailyStat import DailyStat
from shortlinks.schemas.URLCreateRequest import ScheduleWindow
from shortlinks.services import Analytics
from shortlinks.services.RedisURLCache import RedisURLCache
from shortlinks.services.metrics import ClickLedger
from shortlinks.services.qrcode_service import NullQRCodeProvider, QRCodeProvider
from shortlinks.utils.clock import Clock, to_utc_naive, utcnow
from shortlinks.utils.encoding import CodeGenerator, VanityCode, code_request, normalize_short_code

module_logger = logging.getLogger(__name__)

_http_url = TypeAdapter(HttpUrl)

# Schedules a callable to run after the response, e.g. BackgroundTasks.add_task
Deferrer = Callable[..., None]


def validate_long_url(long_url: Optional[str], max_length: int = 2048) -> str:
    if long_url is None or not long_url.strip():
        raise InvalidInput("The url parameter can not be empty.")

    candidate = long_url.strip()
    if len(candidate) > max_length:
        raise InvalidInput(f"URL must be less than {max_length} characters")

    try:
        _http_url.validate_python(candidate)
    except ValidationError:
        raise InvalidInput(
            f"{candidate} is not a valid absolute Url. The Url parameter must start with 'http://' or 'https://'."
        )
    return candidate


class URLService:
    """Create, resolve and count short links.

    Vanity codes are checked with an existence query before the write, and
    generated codes are checked the same way. Neither check is atomic with the
    save: concurrent creators of one code end up last-writer-wins in the store.
    """

    def __init__(
        self,
        db: Session,
        generator: CodeGenerator,
        ledger: ClickLedger,
        qr_provider: Optional[QRCodeProvider] = None,
        cache: Optional[RedisURLCache] = None,
        clock: Clock = utcnow,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.generator = generator
        self.ledger = ledger
        self.qr_provider = qr_provider or NullQRCodeProvider()
        self.cache = cache or RedisURLCache()
        self.clock = clock
        self.logger = logger or module_logger

    def exists(self, short_code: str) -> bool:
        return repository.short_code_exists(self.db, short_code)

    def create(
        self,
        long_url: Optional[str],
        vanity: Optional[str] = None,
        title: Optional[str] = None,
        schedule: Optional[ScheduleWindow] = None,
    ) -> ShortLinkItem:
        url = validate_long_url(long_url, settings.URL_MAX_LENGTH)
        request = code_request(vanity, settings.VANITY_MAX_LENGTH)
        active_from, active_to = self._schedule_bounds(schedule)

        if isinstance(request, VanityCode):
            if self.exists(request.code):
                self.logger.warning(f"Vanity collision: '{request.code}' already exists")
                raise Conflict("This Short URL already exist.")
            short_code = request.code
        else:
            short_code = self.generator.generate(self.exists)

        item = ShortLinkItem(
            short_code=short_code,
            long_url=url,
            title=title.strip() if title and title.strip() else None,
            created_at=self.clock(),
            active_from=active_from,
            active_to=active_to,
            qr_reference=self.qr_provider.fetch_reference(url),
        )
        try:
            saved = repository.save_short_link(self.db, item)
        except StorageFailure:
            if item.qr_reference:
                self.qr_provider.discard(item.qr_reference)
            raise
        self.cache.put(saved.short_code, saved.long_url)
        self.logger.info("Short Url created: %s -> %s", saved.short_code, saved.long_url[:50])
        return saved

    @staticmethod
    def _schedule_bounds(schedule: Optional[ScheduleWindow]):
        if schedule is None:
            return None, None
        start = to_utc_naive(schedule.start) if schedule.start else None
        end = to_utc_naive(schedule.end) if schedule.end else None
        if start and end and end < start:
            raise InvalidInput("schedule 'to' must not be before 'from'")
        return start, end

    def get(self, short_code: str) -> ShortLinkItem:
        item = repository.get_short_link(self.db, short_code)
        if item is None:
            raise NotFound(f"Short code not found: {short_code}")
        return item

    def resolve(self, short_code: str, defer: Optional[Deferrer] = None) -> str:
        """Long URL for ``short_code``; the click is recorded through ``defer``.

        Without a deferrer the click is recorded inline. ``ClickLedger.record``
        logs its own failures and never raises, so the redirect is unaffected.
        """
        normalized = normalize_short_code(short_code)
        long_url = self.cache.get(normalized)
        if long_url is None:
            item = repository.get_short_link(self.db, normalized)
            if item is None:
                self.logger.warning(f"Redirect 404: Short code not found: {short_code}")
                raise NotFound(f"Short code not found: {short_code}")
            long_url = item.long_url
            self.cache.put(normalized, long_url)

        clicked_at = self.clock()
        if defer is None:
            self.ledger.record(normalized, clicked_at)
        else:
            defer(self.ledger.record, normalized, clicked_at)
        return long_url

    def stats_by_day(self, short_code: Optional[str] = None) -> List[DailyStat]:
        if short_code:
            normalized = normalize_short_code(short_code)
            if not self.exists(normalized):
                raise NotFound(f"Short code not found: {short_code}")
            codes = [normalized]
        else:
            codes = [item.short_code for item in repository.list_short_links(self.db)]

        return Analytics.daily_stats(self.ledger, codes, self.clock().date())

    def click_count(self, short_code: str) -> int:
        return self.ledger.count_clicks(short_code)
