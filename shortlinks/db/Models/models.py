from sqlalchemy import Column, String, Integer, DateTime, Date, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ShortLinkItem(Base):
    __tablename__ = "short_links"

    # Short Code: unique and immutable once created, stored normalized (lowercase)
    short_code = Column(String(32), primary_key=True, index=True)

    long_url = Column(String(2048), nullable=False)
    title = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False)

    # Optional schedule window
    active_from = Column(DateTime, nullable=True)
    active_to = Column(DateTime, nullable=True)

    # URL of the QR image, empty when the provider was unavailable
    qr_reference = Column(String, nullable=True)


class ClickEvent(Base):
    __tablename__ = "click_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    short_code = Column(String(32), ForeignKey("short_links.short_code"), index=True, nullable=False)
    clicked_at = Column(DateTime, nullable=False)
    # UTC date of clicked_at; grouping key for daily stats
    click_date = Column(Date, index=True, nullable=False)
