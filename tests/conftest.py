import datetime

import pytest

from libshare import Catalog, LendingConfig, LendingLedger
from libshare.models import Book

START = datetime.datetime(2024, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    """Fixed time source that tests move forward by hand."""

    def __init__(self, now=START):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return LendingConfig(fine_per_day=5, borrow_days=7)


@pytest.fixture
def catalog():
    return Catalog([
        Book("cs1", "Data Structures and Algorithms", "CS", "N. Karumanchi", 5, 1),
        Book("cs2", "Operating Systems", "CS", "Silberschatz", 2, 2),
        Book("me1", "Engineering Thermodynamics", "ME", "P.K. Nag", 3, 3),
        Book("ee1", "Microelectronic Circuits", "EE", "Sedra & Smith", 4, 0),
    ])


@pytest.fixture
def ledger(catalog, config, clock):
    return LendingLedger(catalog=catalog, config=config, clock=clock)


@pytest.fixture
def approved(ledger):
    """A request for cs1 by 101 with 102 and 103, approved by both members."""
    req = ledger.initiate_borrow(101, "cs1", 102, 103)
    ledger.approve(req.id, 102)
    return ledger.approve(req.id, 103)
