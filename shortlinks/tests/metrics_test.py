import logging
from datetime import date, datetime

from sqlalchemy.exc import OperationalError

from shortlinks.services.metrics import ClickLedger


class FailingSession:
    def __init__(self, log):
        self.log = log

    def add(self, obj):
        self.log.append("add")

    def commit(self):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    def rollback(self):
        self.log.append("rollback")

    def close(self):
        self.log.append("close")


def test_record_and_aggregate(ledger):
    ledger.record("Ex1", datetime(2024, 3, 1, 8, 0))
    ledger.record("ex1", datetime(2024, 3, 1, 23, 59))
    ledger.record("ex1", datetime(2024, 3, 3, 0, 0))
    ledger.record("other", datetime(2024, 3, 2, 12, 0))

    assert ledger.aggregate_by_day(["ex1"], date(2024, 3, 1), date(2024, 3, 3)) == [
        (date(2024, 3, 1), 2),
        (date(2024, 3, 3), 1),
    ]
    assert ledger.aggregate_by_day(None, date(2024, 3, 2), date(2024, 3, 3)) == [
        (date(2024, 3, 2), 1),
        (date(2024, 3, 3), 1),
    ]
    assert ledger.first_click_date(["ex1", "other"]) == date(2024, 3, 1)
    assert ledger.first_click_date(["other"]) == date(2024, 3, 2)
    assert ledger.count_clicks("EX1") == 3


def test_empty_code_list(ledger):
    ledger.record("ex1", datetime(2024, 3, 1))
    assert ledger.first_click_date([]) is None
    assert ledger.aggregate_by_day([], date(2024, 3, 1), date(2024, 3, 1)) == []


def test_record_retries_then_logs_lost_click(caplog):
    log = []
    ledger = ClickLedger(lambda: FailingSession(log), attempts=3)

    with caplog.at_level(logging.WARNING, logger="shortlinks.services.metrics"):
        assert ledger.record("ex1", datetime(2024, 3, 1, 9, 30)) is False

    assert log.count("add") == 3
    assert log.count("rollback") == 3
    assert log.count("close") == 3
    lost = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(lost) == 1
    assert "ex1" in lost[0].getMessage()
    assert "2024-03-01T09:30:00" in lost[0].getMessage()


def test_record_recovers_on_retry(ledger, session_factory):
    attempts = []

    def flaky_factory():
        attempts.append(1)
        if len(attempts) == 1:
            return FailingSession([])
        return session_factory()

    flaky = ClickLedger(flaky_factory, attempts=2)
    assert flaky.record("ex1", datetime(2024, 3, 1)) is True
    assert ledger.count_clicks("ex1") == 1


def test_record_uses_injected_logger(caplog):
    custom = logging.getLogger("clicks.audit")
    ledger = ClickLedger(lambda: FailingSession([]), attempts=1, logger=custom)

    with caplog.at_level(logging.ERROR, logger="clicks.audit"):
        ledger.record("ex1", datetime(2024, 3, 1))

    assert any(r.name == "clicks.audit" for r in caplog.records)
