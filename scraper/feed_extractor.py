"""
Feed Extractor: ordered cascade of independent extraction strategies
- Anchor walk: permalink anchors -> nearest card-sized ancestor
- Identity attribute: elements carrying a data-urn / data-id activity token
- Document text: blank-line chunks of the whole page (no locator)

The cascade stops at the first strategy that yields at least one post.
A failing strategy counts as "found nothing" and the next one runs.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import unquote, urljoin, urlparse

from scraper.models import Candidate, RawBlock, RecencyProxy, MIN_BODY_LENGTH
from scraper.page_snapshot import PageSnapshot
from scraper.post_parser import (
    detect_format,
    parse_post_block,
    scan_age_label,
    scan_comments,
    scan_engagement,
    split_social_footer,
)

logger = logging.getLogger(__name__)

LINKEDIN_BASE = 'https://www.linkedin.com'

CARD_MIN_CHARS = 150
CARD_MAX_CHARS = 30000

CHUNK_MIN_CHARS = 120
CHUNK_MAX_CHARS = 6000
CHUNK_MIN_WORDS = 20
CHUNK_MAX_WORDS = 1200

# Destinations that look like links inside a card but never are the post itself
EXCLUDED_DESTINATIONS = (
    '/company/', '/jobs/', '/messaging/', '/notifications/', '/school/',
    '/groups/', '/events/', '/search/', '/learning/', '/showcase/', '/premium/',
)

NAVIGATION_PREFIXES = (
    'skip to', 'home', 'my network', 'jobs', 'messaging', 'notifications',
    'start a post', 'sort by', 'keyboard shortcuts', 'try premium', 'linkedin news',
    'add to your feed', 'accessibility', 'help center', 'privacy & terms',
    'ad choices', 'advertising', 'business services', 'get the linkedin app',
    'linkedin corporation', 'today’s puzzles', "today's puzzles",
)

_URN = re.compile(r'urn:li:(activity|ugcPost|share):([\w-]+)')
_FEED_UPDATE = re.compile(r'/feed/update/urn:li:(?:activity|ugcPost|share):[\w-]+')
_POSTS_PATH = re.compile(r'/posts/[^/?#\s]+')
_POSTS_ACTIVITY = re.compile(r'-activity-(\d+)')
_BLANK_LINES = re.compile(r'\n\s*\n+')


def canonical_locator(urn_type: str, urn_id: str) -> str:
    return f"{LINKEDIN_BASE}/feed/update/urn:li:{urn_type}:{urn_id}/"


def canonical_permalink(href: str) -> Optional[str]:
    """Normalize a post permalink; None for anything that is not a post"""
    if not href:
        return None
    raw = unquote(href.strip())
    parsed = urlparse(raw if raw.startswith('http') else urljoin(LINKEDIN_BASE, raw))
    host = (parsed.netloc or '').lower()
    if host and not host.endswith('linkedin.com'):
        return None

    path = parsed.path or ''
    if any(dest in path for dest in EXCLUDED_DESTINATIONS):
        return None

    if _FEED_UPDATE.search(path) or 'ugcPost' in path:
        urn = _URN.search(path)
        if urn:
            return canonical_locator(urn.group(1), urn.group(2))
    posts = _POSTS_PATH.search(path)
    if posts:
        # /posts/<slug>-activity-<id>-<hash> carries the same activity id
        activity = _POSTS_ACTIVITY.search(posts.group(0))
        if activity:
            return canonical_locator('activity', activity.group(1))
        return f"{LINKEDIN_BASE}{posts.group(0)}/"
    return None


def locator_from_identity(value: str) -> Optional[str]:
    urn = _URN.search(unquote(value or ''))
    if not urn:
        return None
    return canonical_locator(urn.group(1), urn.group(2))


def build_candidates(blocks: Iterable[RawBlock], strategy: str) -> List[Candidate]:
    """Parse raw blocks into candidates, dropping bodies shorter than 80 chars"""
    parsed_blocks = []
    for block in blocks:
        content, footer = split_social_footer(block.lines)
        parsed = parse_post_block(content)
        if len(parsed.body_text) < MIN_BODY_LENGTH:
            continue
        samples, replied = scan_comments(footer, parsed.author_name)
        parsed_blocks.append((block, parsed, footer, content, samples, replied))

    total = len(parsed_blocks)
    candidates = []
    for position, (block, parsed, footer, content, samples, replied) in enumerate(parsed_blocks):
        candidates.append(Candidate(
            source_locator=block.locator,
            author_name=parsed.author_name,
            author_headline=parsed.author_headline,
            body_text=parsed.body_text,
            is_connection=parsed.is_connection,
            format=detect_format(block.lines, block.large_images, block.videos),
            engagement=scan_engagement(footer),
            comment_samples=samples,
            author_replied=replied,
            recency=RecencyProxy(
                position_index=position,
                total_in_batch=total,
                age_label=scan_age_label(content),
            ),
            strategy=strategy,
        ))
    return candidates


class AnchorWalkStrategy:
    """Permalink anchors walked up to the first card-sized container"""

    name = 'anchor_walk'

    def __init__(self, min_chars: int = CARD_MIN_CHARS, max_chars: int = CARD_MAX_CHARS):
        self.min_chars = min_chars
        self.max_chars = max_chars

    def extract(self, snapshot: PageSnapshot) -> List[Candidate]:
        seen = set()
        blocks = []
        for anchor in snapshot.anchors:
            locator = canonical_permalink(anchor.href)
            if not locator or locator in seen:
                continue
            container = None
            for ancestor in anchor.ancestors:
                if self.min_chars <= len(ancestor.text) <= self.max_chars:
                    container = ancestor
                    break
            if container is None:
                continue
            seen.add(locator)
            blocks.append(RawBlock.from_text(
                container.text,
                locator=locator,
                large_images=container.large_images,
                videos=container.videos,
            ))
        return build_candidates(blocks, self.name)


class IdentityAttributeStrategy:
    """Elements decorated with a content-identity attribute (data-urn)"""

    name = 'identity_attribute'

    def extract(self, snapshot: PageSnapshot) -> List[Candidate]:
        seen = set()
        blocks = []
        for record in snapshot.identity_elements:
            locator = locator_from_identity(record.value)
            if not locator or locator in seen:
                continue
            seen.add(locator)
            blocks.append(RawBlock.from_text(
                record.text,
                locator=locator,
                large_images=record.large_images,
                videos=record.videos,
            ))
        return build_candidates(blocks, self.name)


class DocumentTextStrategy:
    """Last resort: paragraph chunks of the whole page, no locator"""

    name = 'document_text'

    def extract(self, snapshot: PageSnapshot) -> List[Candidate]:
        blocks = []
        for chunk in _BLANK_LINES.split(snapshot.body_text or ''):
            chunk = chunk.strip()
            if not (CHUNK_MIN_CHARS <= len(chunk) <= CHUNK_MAX_CHARS):
                continue
            words = len(chunk.split())
            if not (CHUNK_MIN_WORDS <= words <= CHUNK_MAX_WORDS):
                continue
            if chunk.lower().startswith(NAVIGATION_PREFIXES):
                continue
            blocks.append(RawBlock.from_text(chunk))
        return build_candidates(blocks, self.name)


def default_strategies() -> List:
    return [AnchorWalkStrategy(), IdentityAttributeStrategy(), DocumentTextStrategy()]


class FeedExtractor:
    """Runs the strategies in priority order until one yields posts"""

    def __init__(self, strategies: Optional[Sequence] = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.last_strategy: Optional[str] = None

    def extract(self, snapshot: PageSnapshot) -> List[Candidate]:
        self.last_strategy = None
        for strategy in self.strategies:
            try:
                found = strategy.extract(snapshot) or []
            except Exception as e:
                logger.warning(f"[WARN] Strategy '{strategy.name}' failed: {e}")
                continue

            if found:
                logger.info(f"[OK] Strategy '{strategy.name}' yielded {len(found)} post(s)")
                self.last_strategy = strategy.name
                return list(found)
            logger.info(f"[SKIP] Strategy '{strategy.name}' found no posts")

        logger.warning("[WARN] No extraction strategy produced posts")
        return []

    def strategy_yields(self, snapshot: PageSnapshot) -> Dict[str, int]:
        """Run every strategy (no short-circuit) for diagnostics; -1 marks an error"""
        yields = {}
        for strategy in self.strategies:
            try:
                yields[strategy.name] = len(strategy.extract(snapshot) or [])
            except Exception as e:
                logger.debug(f"Strategy '{strategy.name}' failed during diagnostics: {e}")
                yields[strategy.name] = -1
        return yields
