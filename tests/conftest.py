import pytest

from helpers import make_items, make_transactions
from TimestampOrdering import TimestampOrdering


@pytest.fixture
def items():
    return make_items()


@pytest.fixture
def transactions():
    return make_transactions()


@pytest.fixture
def scheduler(items, transactions):
    return TimestampOrdering(items, transactions)
