"""Shared fixtures for the payoff calculator tests."""

import os

import pytest

# The web app opens its store at import time; keep it in memory for tests.
os.environ.setdefault("DEBT_DATABASE_URL", "sqlite://")

from card_payoff.data_models import PayoffParameters  # noqa: E402
from card_payoff_web.debt_store import DebtStore  # noqa: E402


@pytest.fixture
def card():
    """$1,000 at 18% APR with a $25 floor and no principal percentage."""
    return PayoffParameters(principal=1000, apr=18, minimum_payment=25)


@pytest.fixture
def stuck_card():
    """A plan whose required payment only ever covers the interest."""
    return PayoffParameters(principal=1000, apr=30, minimum_payment=1)


@pytest.fixture
def store():
    return DebtStore("sqlite://")


@pytest.fixture
def client(monkeypatch):
    from card_payoff_web import app as web

    monkeypatch.setattr(web, "debt_store", DebtStore("sqlite://"))
    web.app.config["TESTING"] = True
    with web.app.test_client() as test_client:
        yield test_client
