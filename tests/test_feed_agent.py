import asyncio

from agents.feed_agent import FeedAgent
from database.db_manager import DatabaseManager
from scraper.page_snapshot import AncestorText, AnchorRecord, PageSnapshot

URL_1 = "https://www.linkedin.com/feed/update/urn:li:activity:1/"


class FakeBrowser:
    """Stands in for BrowserController"""

    def __init__(self, snapshot, navigate_ok=True):
        self.snapshot = snapshot
        self.navigate_ok = navigate_ok
        self.navigated = []
        self.scrolls = []

    async def navigate(self, url, **kwargs):
        self.navigated.append(url)
        return self.navigate_ok

    async def scroll_feed(self, passes, step_px, settle_ms):
        self.scrolls.append((passes, step_px, settle_ms))
        return passes

    async def capture_snapshot(self):
        return self.snapshot


def _snapshot(card_text):
    return PageSnapshot(
        url="https://www.linkedin.com/feed/",
        body_text=card_text,
        anchors=[
            AnchorRecord(href="/feed/update/urn:li:activity:1/", ancestors=[AncestorText(card_text)]),
            AnchorRecord(href="/feed/update/urn:li:activity:1/?again", ancestors=[AncestorText(card_text)]),
        ],
    )


def test_collect_candidates_scrolls_and_dedups(card_text):
    browser = FakeBrowser(_snapshot(card_text))
    agent = FeedAgent(browser, feed_settings={"scroll_passes": 3, "settle_ms": 10})

    candidates = asyncio.run(agent.collect_candidates())

    assert [c.source_locator for c in candidates] == [URL_1]
    assert browser.navigated == ["https://www.linkedin.com/feed/"]
    assert browser.scrolls == [(3, 900, 10)]
    assert agent.last_snapshot is browser.snapshot


def test_empty_snapshot_yields_nothing():
    agent = FeedAgent(FakeBrowser(PageSnapshot()))
    assert asyncio.run(agent.collect_candidates(navigate=False)) == []


def test_find_best_post_records_scan_run(card_text, tmp_path):
    db = DatabaseManager(str(tmp_path / "ledger.db"))
    agent = FeedAgent(FakeBrowser(_snapshot(card_text)), db=db, thresholds=[0])

    result = asyncio.run(agent.find_best_post())

    assert result.candidate.source_locator == URL_1
    history = db.get_scan_history()
    assert len(history) == 1
    assert history[0]["selected_url"] == URL_1
    assert history[0]["strategy"] == "anchor_walk"
    assert history[0]["status"] == "selected"


def test_find_best_post_skips_engaged_posts(card_text, tmp_path):
    db = DatabaseManager(str(tmp_path / "ledger.db"))
    db.record_engagement(URL_1, "Somebody Else")
    agent = FeedAgent(FakeBrowser(_snapshot(card_text)), db=db, thresholds=[0])

    result = asyncio.run(agent.find_best_post())

    assert result.candidate is None
    assert result.evaluations[0].status == "already_engaged"
    assert db.get_scan_history()[0]["status"] == "no_selection"


def test_find_best_post_respects_author_cooldown(card_text, tmp_path):
    db = DatabaseManager(str(tmp_path / "ledger.db"))
    db.record_engagement("https://www.linkedin.com/feed/update/urn:li:activity:77/", "jane doe")
    agent = FeedAgent(FakeBrowser(_snapshot(card_text)), db=db, thresholds=[0])

    result = asyncio.run(agent.find_best_post())

    assert result.candidate is None
    assert result.evaluations[0].status == "recent_author"


def test_debug_feed_reports_strategy_yields(card_text):
    agent = FeedAgent(FakeBrowser(_snapshot(card_text)))

    info = asyncio.run(agent.debug_feed(navigate=False))

    assert info["href_samples"] == ["/feed/update/urn:li:activity:1/"]
    assert info["strategy_yields"] == {"anchor_walk": 1, "identity_attribute": 0, "document_text": 1}
    assert info["body_preview"] == card_text[:2000]
    assert info["summary"]["anchors"] == 2
