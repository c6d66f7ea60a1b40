"""
Feed Agent: one discovery run over the home feed
scroll -> snapshot -> extraction cascade -> dedup -> exclusions/scoring -> selection
"""

import logging
from typing import Dict, Iterable, List, Optional

from scraper.browser_controller import FEED_URL
from scraper.deduplicator import dedup
from scraper.feed_extractor import FeedExtractor
from scraper.models import Candidate
from scraper.page_snapshot import PageSnapshot, sample_hrefs, sample_identity_values
from scoring.candidate_selector import DEFAULT_THRESHOLDS, SelectionResult, rank_candidates
from scoring.post_scoring import BALANCED_WEIGHTS, ScoringWeights
from scoring.signals import DEFAULT_SIGNALS, SignalTables

logger = logging.getLogger(__name__)

BODY_PREVIEW_CHARS = 2000


class FeedAgent:
    """Agent that finds the single best feed post to engage with"""

    def __init__(self, browser, extractor: Optional[FeedExtractor] = None, db=None,
                 feed_settings: Optional[Dict] = None,
                 thresholds: Iterable[int] = DEFAULT_THRESHOLDS,
                 weights: ScoringWeights = BALANCED_WEIGHTS,
                 signals: SignalTables = DEFAULT_SIGNALS,
                 author_cooldown_days: int = 7):
        self.browser = browser
        self.extractor = extractor or FeedExtractor()
        self.db = db
        self.feed = {'url': FEED_URL, 'scroll_passes': 6, 'scroll_step_px': 900, 'settle_ms': 1500}
        self.feed.update(feed_settings or {})
        self.thresholds = list(thresholds)
        self.weights = weights
        self.signals = signals
        self.author_cooldown_days = author_cooldown_days
        self.last_snapshot: Optional[PageSnapshot] = None

    async def _load_and_capture(self, navigate: bool) -> PageSnapshot:
        if navigate and not await self.browser.navigate(self.feed['url'], timeout=45000):
            logger.warning("[WARN] Could not open the feed, capturing whatever is loaded")

        await self.browser.scroll_feed(
            passes=self.feed['scroll_passes'],
            step_px=self.feed['scroll_step_px'],
            settle_ms=self.feed['settle_ms'],
        )
        snapshot = await self.browser.capture_snapshot()
        self.last_snapshot = snapshot
        logger.info(f"[OK] Captured snapshot: {snapshot.summary()}")
        return snapshot

    async def collect_candidates(self, navigate: bool = True) -> List[Candidate]:
        """Scroll the feed and return deduplicated candidates in discovery order"""
        snapshot = await self._load_and_capture(navigate)
        if snapshot.is_empty:
            logger.warning("[WARN] Snapshot is empty, nothing to extract")
            return []

        candidates = dedup(self.extractor.extract(snapshot))
        logger.info(f"[OK] {len(candidates)} unique post(s) via {self.extractor.last_strategy or 'none'}")
        return candidates

    def _ledger_filters(self):
        if self.db is None:
            return set(), set()
        try:
            return self.db.get_engaged_urls(), self.db.get_recent_authors(self.author_cooldown_days)
        except Exception as e:
            logger.error(f"[X] Could not read engagement ledger: {e}")
            return set(), set()

    def _record_run(self, candidates: List[Candidate], result: SelectionResult):
        if self.db is None:
            return
        try:
            self.db.record_scan_run(
                strategy=self.extractor.last_strategy,
                candidates_found=len(candidates),
                eligible_count=result.eligible_count,
                selected_url=result.candidate.source_locator if result.candidate else None,
                selected_score=result.breakdown.total if result.breakdown else None,
                threshold=result.threshold,
            )
        except Exception as e:
            logger.error(f"[X] Could not record scan run: {e}")

    async def find_best_post(self, navigate: bool = True) -> SelectionResult:
        """Run one full discovery pass; the result's candidate is None when nothing qualifies"""
        candidates = await self.collect_candidates(navigate)
        engaged, recent_authors = self._ledger_filters()

        result = rank_candidates(
            candidates,
            self.thresholds,
            engaged_locators=engaged,
            recent_authors=recent_authors,
            signals=self.signals,
            weights=self.weights,
        )
        self._record_run(candidates, result)

        if result.selected:
            logger.info(f"[OK] Best post: {result.candidate.source_locator} (score {result.breakdown.total})")
        else:
            logger.info(f"[SKIP] No post qualified this run ({result.status_counts()})")
        return result

    async def debug_feed(self, navigate: bool = True) -> Dict:
        """Diagnostics: link patterns, identity samples, body preview, per-strategy yields"""
        snapshot = await self._load_and_capture(navigate)
        return {
            'url': snapshot.url,
            'summary': snapshot.summary(),
            'href_samples': sample_hrefs(snapshot),
            'identity_samples': sample_identity_values(snapshot),
            'body_preview': (snapshot.body_text or '')[:BODY_PREVIEW_CHARS],
            'strategy_yields': self.extractor.strategy_yields(snapshot),
        }
