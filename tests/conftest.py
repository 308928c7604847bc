import os

# Settings are read at import time: point everything at throwaway storage first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)

import pytest

from marketplace.infrastructure.draft_store import CheckoutDraftStore
from tests.fakes import FakeCartRepository, FakeOrderRepository, FakeQuoteRepository


@pytest.fixture
def cart_repo():
    return FakeCartRepository()


@pytest.fixture
def order_repo():
    return FakeOrderRepository()


@pytest.fixture
def quote_repo():
    return FakeQuoteRepository()


@pytest.fixture
def draft_store():
    return CheckoutDraftStore(redis_url=None)
