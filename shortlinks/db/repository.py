from contextlib import contextmanager
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from shortlinks.core.errors import StorageFailure
from shortlinks.utils.encoding import normalize_short_code

from shortlinks.db.Models.models import ShortLinkItem

logger = logging.getLogger(__name__)


@contextmanager
def _storage(db: Session, action: str, short_code: Optional[str] = None):
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Storage failure during %s (short_code=%s)", action, short_code)
        raise StorageFailure()


def short_code_exists(db: Session, short_code: str) -> bool:
    normalized = normalize_short_code(short_code)
    with _storage(db, "exists", normalized):
        return db.query(ShortLinkItem.short_code).filter(ShortLinkItem.short_code == normalized).first() is not None


def get_short_link(db: Session, short_code: str) -> Optional[ShortLinkItem]:
    normalized = normalize_short_code(short_code)
    with _storage(db, "get", normalized):
        return db.get(ShortLinkItem, normalized)


def list_short_links(db: Session, skip: int = 0, limit: Optional[int] = None) -> List[ShortLinkItem]:
    with _storage(db, "list"):
        query = db.query(ShortLinkItem).order_by(ShortLinkItem.created_at, ShortLinkItem.short_code).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


def count_short_links(db: Session) -> int:
    with _storage(db, "count"):
        return db.query(func.count(ShortLinkItem.short_code)).scalar() or 0


def save_short_link(db: Session, item: ShortLinkItem) -> ShortLinkItem:
    """Upsert keyed by short_code: saving an existing code overwrites it.

    Uniqueness of fresh codes is decided by the caller's existence check; two
    concurrent creators of the same code end up last-writer-wins here.
    """
    item.short_code = normalize_short_code(item.short_code)
    with _storage(db, "save", item.short_code):
        merged = db.merge(item)
        db.commit()
        db.refresh(merged)
        logger.debug("Saved %s -> %s", merged.short_code, merged.long_url[:50])
        return merged
