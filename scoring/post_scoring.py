"""
Composite post scoring.

Six independent 0-100 sub-scores are combined with fixed weights:
- content: length tiers, keyword quality, story arc, AI boilerplate and
  engagement-pod penalties, plus contextual modifiers (traction, network
  proximity, format, comment depth, author replies)
- engagement: log-scaled reactions with a 20-500 sweet spot
- seniority: headline ladder, capped at 80, plus creator/investor boost
- niche: overlap with our own expertise keywords
- recency: feed position as a proxy for age, plus a "just posted" bonus
- visibility: how likely a new comment is to be seen

All functions are pure. Weight sets are validated to sum to 1.0.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Iterable, Optional

from scraper.models import Candidate, PostFormat, ScoreBreakdown, ScoringContext
from scoring.signals import DEFAULT_SIGNALS, SignalTables

CONTENT_MIN_LENGTH = 100
MAX_POD_SAMPLES = 5
SENIORITY_CAP = 80
NEUTRAL_SENIORITY = 20
JUST_POSTED_BONUS = 20

_JUST_POSTED = re.compile(
    r'^(?:just now|now|\d+\s*(?:m|min|mins|minute|minutes)|1\s*(?:h|hr|hour))\b',
    re.IGNORECASE,
)


# -----------------------------
# Weights
# -----------------------------
@dataclass(frozen=True)
class ScoringWeights:
    content: float = 0.35
    engagement: float = 0.15
    visibility: float = 0.15
    seniority: float = 0.15
    niche: float = 0.10
    recency: float = 0.10

    def __post_init__(self):
        values = self.as_dict()
        if any(v < 0 for v in values.values()):
            raise ValueError(f"Scoring weights must be non-negative: {values}")
        if not math.isclose(sum(values.values()), 1.0, abs_tol=1e-6):
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(values.values()):.4f}")

    def as_dict(self) -> Dict[str, float]:
        return {
            'content': self.content,
            'engagement': self.engagement,
            'visibility': self.visibility,
            'seniority': self.seniority,
            'niche': self.niche,
            'recency': self.recency,
        }


BALANCED_WEIGHTS = ScoringWeights()
LEGACY_WEIGHTS = ScoringWeights(
    content=0.40, engagement=0.25, visibility=0.0, seniority=0.15, niche=0.10, recency=0.10,
)
WEIGHT_PRESETS = {'balanced': BALANCED_WEIGHTS, 'legacy': LEGACY_WEIGHTS}


def get_weights(preset: str) -> ScoringWeights:
    try:
        return WEIGHT_PRESETS[(preset or 'balanced').strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown scoring preset '{preset}', expected one of {sorted(WEIGHT_PRESETS)}")


# -----------------------------
# Helpers
# -----------------------------
def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@lru_cache(maxsize=2048)
def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r'(?<!\w)' + re.escape(keyword.strip().lower()) + r'(?!\w)')


def has_keyword(text: str, keyword: str) -> bool:
    return bool(_keyword_pattern(keyword).search(text))


def keyword_hits(text: str, keywords: Iterable[str]) -> int:
    """Number of distinct keywords present as whole words in lowercase text"""
    return sum(1 for kw in keywords if has_keyword(text, kw))


def is_just_posted(age_label: Optional[str]) -> bool:
    return bool(_JUST_POSTED.match((age_label or '').strip()))


# -----------------------------
# Sub-scores
# -----------------------------
def content_score(candidate: Candidate, signals: SignalTables = DEFAULT_SIGNALS) -> float:
    body = candidate.body_text
    if len(body) < CONTENT_MIN_LENGTH:
        return 0.0

    text = body.lower()
    score = 0.0
    if len(body) > 300:
        score += 15
    if len(body) > 600:
        score += 10
    if len(body) > 1000:
        score += 5

    score += 5 * keyword_hits(text, signals.good_content)
    score -= 10 * keyword_hits(text, signals.low_value)
    if keyword_hits(text, signals.story_arc) >= 2:
        score += 20
    score -= 20 * keyword_hits(text, signals.ai_boilerplate)

    samples = candidate.comment_samples[:MAX_POD_SAMPLES]
    pod_replies = sum(1 for c in samples if keyword_hits(c.lower(), signals.engagement_pod) > 0)
    if pod_replies >= 2:
        score -= 30

    reactions = candidate.engagement.reaction_count
    comments = candidate.engagement.comment_count
    if 15 <= reactions <= 150 and comments <= 40:
        score += 15
    if candidate.is_connection:
        score += 15

    if candidate.format == PostFormat.TEXT:
        score += 10
    elif candidate.format == PostFormat.IMAGE:
        score += 5
    elif candidate.format == PostFormat.POLL:
        score -= 10

    if candidate.comment_samples:
        avg_len = sum(len(c) for c in candidate.comment_samples) / len(candidate.comment_samples)
        if avg_len < 50:
            # Shallow thread, a thoughtful reply stands out
            score += 20
    if candidate.author_replied:
        score += 20

    return clamp(score)


def _engagement_band(reaction_count: int, comment_count: int) -> float:
    if reaction_count < 5:
        return 10.0
    if reaction_count > 10000:
        return 15.0
    if comment_count > 200:
        return 10.0

    score = math.log10(reaction_count + 1) * 20
    if 20 <= reaction_count <= 500:
        score += 20
    return score


def engagement_score(reaction_count: int, comment_count: int, age_label: str = '') -> float:
    # Momentum on top of whichever band applies
    score = _engagement_band(reaction_count, comment_count)
    if is_just_posted(age_label) and reaction_count >= 50:
        score += 20
    return clamp(score)


def seniority_score(headline: str, signals: SignalTables = DEFAULT_SIGNALS) -> float:
    hl = (headline or '').lower()

    proxy_boost = 0
    if any(has_keyword(hl, kw) for kw in signals.creator_proxy):
        proxy_boost += 15
    if any(has_keyword(hl, kw) for kw in signals.investor_proxy):
        proxy_boost += 10

    raw = NEUTRAL_SENIORITY
    for keyword, points in signals.seniority:
        if has_keyword(hl, keyword):
            raw = points * 4
            break

    return clamp(min(raw, SENIORITY_CAP) + proxy_boost)


def niche_score(body_text: str, signals: SignalTables = DEFAULT_SIGNALS) -> float:
    return clamp(keyword_hits((body_text or '').lower(), signals.niche) * 15)


def recency_score(context: ScoringContext, age_label: str = '') -> float:
    if context.total_in_batch > 0:
        score = (1 - context.position_index / context.total_in_batch) * 100
    else:
        score = 50.0
    if is_just_posted(age_label):
        score += JUST_POSTED_BONUS
    return clamp(score)


def visibility_score(comment_count: int) -> float:
    if comment_count <= 5:
        return 90.0
    if comment_count <= 20:
        return 100.0
    if comment_count <= 50:
        return 75.0
    if comment_count <= 100:
        return 50.0
    if comment_count <= 200:
        return 25.0
    return 10.0


# -----------------------------
# Composite
# -----------------------------
def composite_score(
    candidate: Candidate,
    context: Optional[ScoringContext] = None,
    *,
    signals: SignalTables = DEFAULT_SIGNALS,
    weights: ScoringWeights = BALANCED_WEIGHTS,
    threshold: Optional[float] = None,
) -> ScoreBreakdown:
    if context is None:
        context = ScoringContext(candidate.recency.position_index, candidate.recency.total_in_batch)

    age_label = candidate.recency.age_label
    reactions = candidate.engagement.reaction_count
    comments = candidate.engagement.comment_count

    content = content_score(candidate, signals)
    engagement = engagement_score(reactions, comments, age_label)
    seniority = seniority_score(candidate.author_headline, signals)
    niche = niche_score(candidate.body_text, signals)
    recency = recency_score(context, age_label)
    visibility = visibility_score(comments)

    weighted = (
        content * weights.content
        + engagement * weights.engagement
        + visibility * weights.visibility
        + seniority * weights.seniority
        + niche * weights.niche
        + recency * weights.recency
    )
    total = round_half_up(clamp(weighted))

    return ScoreBreakdown(
        content=content,
        engagement=engagement,
        seniority=seniority,
        niche=niche,
        recency=recency,
        visibility=visibility,
        total=total,
        accepted=threshold is not None and total >= threshold,
    )


Scorer = Callable[[Candidate, ScoringContext], ScoreBreakdown]
