from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shortlinks.core.errors import StorageFailure
from shortlinks.db.Models.models import ClickEvent
from shortlinks.utils.encoding import normalize_short_code

module_logger = logging.getLogger(__name__)


class ClickLedger:
    """Append-only log of redirects, aggregated per UTC day on read.

    ``record`` is meant to run off the redirect path (a background task) and
    never raises. ``aggregate_by_day`` returns only days that have clicks;
    gap filling is done by ``Analytics.daily_stats``.
    """

    def __init__(self, session_factory: Callable[[], Session], attempts: int = 3,
                 logger: Optional[logging.Logger] = None):
        self.session_factory = session_factory
        self.attempts = max(1, attempts)
        self.logger = logger or module_logger

    def record(self, short_code: str, clicked_at: datetime) -> bool:
        normalized = normalize_short_code(short_code)
        for attempt in range(1, self.attempts + 1):
            db = None
            try:
                db = self.session_factory()
                db.add(ClickEvent(short_code=normalized, clicked_at=clicked_at, click_date=clicked_at.date()))
                db.commit()
                self.logger.info("metrics.record_click: click stored for %s", normalized)
                return True
            except Exception:
                if db is not None:
                    db.rollback()
                self.logger.warning(
                    "metrics.record_click: attempt %d/%d failed for %s",
                    attempt, self.attempts, normalized, exc_info=True,
                )
            finally:
                if db is not None:
                    db.close()

        self.logger.error(
            "metrics.record_click: click LOST for %s at %s after %d attempts",
            normalized, clicked_at.isoformat(), self.attempts,
        )
        return False

    @contextmanager
    def _read(self, action: str):
        db = self.session_factory()
        try:
            yield db
        except SQLAlchemyError:
            self.logger.exception("Click ledger %s failed", action)
            raise StorageFailure()
        finally:
            db.close()

    @staticmethod
    def _for_codes(query, codes: Optional[Sequence[str]]):
        if codes is None:
            return query
        return query.filter(ClickEvent.short_code.in_([normalize_short_code(c) for c in codes]))

    def first_click_date(self, codes: Optional[Sequence[str]] = None) -> Optional[date]:
        if codes is not None and not codes:
            return None
        with self._read("first_click_date") as db:
            return self._for_codes(db.query(func.min(ClickEvent.click_date)), codes).scalar()

    def aggregate_by_day(self, codes: Optional[Sequence[str]], from_date: date, to_date: date) -> List[Tuple[date, int]]:
        if codes is not None and not codes:
            return []
        with self._read("aggregate_by_day") as db:
            query = db.query(ClickEvent.click_date, func.count(ClickEvent.id)).filter(
                ClickEvent.click_date >= from_date,
                ClickEvent.click_date <= to_date,
            )
            rows = (
                self._for_codes(query, codes)
                .group_by(ClickEvent.click_date)
                .order_by(ClickEvent.click_date)
                .all()
            )
            return [(day, int(count)) for day, count in rows]

    def count_clicks(self, short_code: str) -> int:
        with self._read("count_clicks") as db:
            return db.query(func.count(ClickEvent.id)).filter(
                ClickEvent.short_code == normalize_short_code(short_code)
            ).scalar() or 0
