import asyncio

import pytest

from main import FeedScoutApp
from utils.config import Config

CANONICAL = "https://www.linkedin.com/feed/update/urn:li:activity:7123456789/"


@pytest.fixture
def app(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "ledger.db"))
    return FeedScoutApp(Config(env_file=str(tmp_path / "missing.env")))


def _answer(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))


@pytest.mark.parametrize("pasted", [
    "https://www.linkedin.com/posts/jane-doe_devtools-activity-7123456789-AbCd?utm_source=share",
    "https://www.linkedin.com/feed/update/urn:li:activity:7123456789/?trk=feed",
])
def test_manual_engagement_stores_canonical_url(app, monkeypatch, pasted):
    _answer(monkeypatch, pasted, "Jane Doe")
    asyncio.run(app.workflow_record_engagement())

    assert app.db.get_engaged_urls() == {CANONICAL}
    assert app.db.get_recent_authors(7) == {"jane doe"}


def test_manual_engagement_keeps_unrecognized_url(app, monkeypatch):
    _answer(monkeypatch, "https://example.com/some/article", "Jane Doe")
    asyncio.run(app.workflow_record_engagement())

    assert app.db.get_engaged_urls() == {"https://example.com/some/article"}


def test_manual_engagement_cancelled_on_empty_url(app, monkeypatch):
    _answer(monkeypatch, "")
    asyncio.run(app.workflow_record_engagement())

    assert app.db.get_engaged_urls() == set()
