from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session

from shortlinks.db import repository
from shortlinks.schemas.DailyStat import DailyStat
from shortlinks.schemas.URLInfoResponse import URLInfoResponse
from shortlinks.services.metrics import ClickLedger
from shortlinks.core.config import settings


def date_range(start: date, end: date) -> List[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def daily_stats(ledger: ClickLedger, codes: Optional[Sequence[str]], today: date) -> List[DailyStat]:
    """Contiguous per-day click counts from the first recorded click through today.

    Days without clicks get a zero entry so charts have no gaps. No clicks at
    all yields an empty list.
    """
    first = ledger.first_click_date(codes)
    if first is None:
        return []

    last = max(today, first)
    counts = dict(ledger.aggregate_by_day(codes, first, last))
    return [DailyStat(date=day, count=counts.get(day, 0)) for day in date_range(first, last)]


class URL:
    def get_all(skip: int, limit: int, db: Session) -> Tuple[int, List[URLInfoResponse]]:
        total = repository.count_short_links(db)
        items = repository.list_short_links(db, skip=skip, limit=limit)
        url_responses = [URLInfoResponse.from_item(item, settings.BASE_URL) for item in items]
        return total, url_responses
