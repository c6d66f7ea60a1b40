"""
Deduplicator: collapses repeated posts by locator and by body-text prefix
"""

import logging
from typing import Iterable, List

from scraper.models import Candidate

logger = logging.getLogger(__name__)

TEXT_KEY_LENGTH = 60


def text_key(candidate: Candidate) -> str:
    return candidate.body_text[:TEXT_KEY_LENGTH]


def dedup(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Keep the first occurrence of each post, preserving order.

    A post is a duplicate when its 60-char body prefix was already seen, or
    when it has a locator that was already seen.
    """
    seen_locators = set()
    seen_text = set()
    unique = []
    dropped = 0

    for candidate in candidates:
        key = text_key(candidate)
        locator = candidate.source_locator
        if key in seen_text or (locator and locator in seen_locators):
            dropped += 1
            continue
        seen_text.add(key)
        if locator:
            seen_locators.add(locator)
        unique.append(candidate)

    if dropped:
        logger.debug(f"Dedup dropped {dropped} duplicate post(s), kept {len(unique)}")
    return unique
