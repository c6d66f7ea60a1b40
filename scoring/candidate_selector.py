"""
Candidate Selector: picks at most one post to engage with per run.

Every candidate is scored (for diagnostics), but only eligible ones compete:
it must carry a locator, not be engaged already, not come from an author we
engaged with recently, and pass the exclusion filter. Thresholds are tried
from highest to lowest; the first tier met by any eligible candidate wins,
and within it the best total (earliest on ties) is selected.
"""

import logging
from dataclasses import dataclass, field, replace
from functools import partial
from typing import Iterable, List, Optional, Sequence

from scraper.models import Candidate, ScoreBreakdown, ScoringContext
from scoring.post_filters import ExclusionResult, NOT_EXCLUDED, should_exclude
from scoring.post_scoring import BALANCED_WEIGHTS, Scorer, ScoringWeights, composite_score
from scoring.signals import DEFAULT_SIGNALS, SignalTables

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = (80, 70, 60, 50, 40)

STATUS_ELIGIBLE = 'eligible'
STATUS_EXCLUDED = 'excluded'
STATUS_NO_LOCATOR = 'no_locator'
STATUS_ALREADY_ENGAGED = 'already_engaged'
STATUS_RECENT_AUTHOR = 'recent_author'


@dataclass(frozen=True)
class CandidateEvaluation:
    candidate: Candidate
    breakdown: ScoreBreakdown
    status: str
    exclusion: ExclusionResult = NOT_EXCLUDED

    @property
    def eligible(self) -> bool:
        return self.status == STATUS_ELIGIBLE


@dataclass
class SelectionResult:
    candidate: Optional[Candidate] = None
    breakdown: Optional[ScoreBreakdown] = None
    threshold: Optional[int] = None
    evaluations: List[CandidateEvaluation] = field(default_factory=list)

    @property
    def selected(self) -> bool:
        return self.candidate is not None

    @property
    def eligible_count(self) -> int:
        return sum(1 for e in self.evaluations if e.eligible)

    def status_counts(self) -> dict:
        counts = {}
        for evaluation in self.evaluations:
            counts[evaluation.status] = counts.get(evaluation.status, 0) + 1
        return counts


def normalize_thresholds(thresholds: Iterable[int]) -> List[int]:
    """Highest first, duplicates removed"""
    return sorted({int(t) for t in thresholds}, reverse=True)


def default_scorer(signals: SignalTables = DEFAULT_SIGNALS,
                   weights: ScoringWeights = BALANCED_WEIGHTS) -> Scorer:
    return partial(composite_score, signals=signals, weights=weights)


def _status_for(candidate: Candidate, exclusion: ExclusionResult,
                engaged_locators: set, recent_authors: set) -> str:
    if not candidate.source_locator:
        return STATUS_NO_LOCATOR
    if candidate.source_locator in engaged_locators:
        return STATUS_ALREADY_ENGAGED
    if candidate.author_name.strip().lower() in recent_authors:
        return STATUS_RECENT_AUTHOR
    if exclusion.excluded:
        return STATUS_EXCLUDED
    return STATUS_ELIGIBLE


def rank_candidates(
    candidates: Sequence[Candidate],
    thresholds: Iterable[int] = DEFAULT_THRESHOLDS,
    *,
    engaged_locators: Optional[Iterable[str]] = None,
    recent_authors: Optional[Iterable[str]] = None,
    signals: SignalTables = DEFAULT_SIGNALS,
    weights: ScoringWeights = BALANCED_WEIGHTS,
    scorer: Optional[Scorer] = None,
) -> SelectionResult:
    engaged = set(engaged_locators or ())
    authors = {a.strip().lower() for a in (recent_authors or ()) if a}
    score = scorer or default_scorer(signals, weights)
    total = len(candidates)

    evaluations = []
    for position, candidate in enumerate(candidates):
        breakdown = score(candidate, ScoringContext(position_index=position, total_in_batch=total))
        exclusion = should_exclude(candidate, signals)
        status = _status_for(candidate, exclusion, engaged, authors)
        evaluations.append(CandidateEvaluation(candidate, breakdown, status, exclusion))
        logger.debug(
            f"[SCORE] {breakdown.total:3d} {status:<15} {candidate.short_label(50)}"
            + (f" ({exclusion.rule})" if exclusion.excluded else '')
        )

    result = SelectionResult(evaluations=evaluations)
    eligible = [e for e in evaluations if e.eligible]
    if not eligible:
        logger.info(f"[SKIP] No eligible posts among {total} candidate(s)")
        return result

    for threshold in normalize_thresholds(thresholds):
        best = None
        for evaluation in eligible:
            if evaluation.breakdown.total < threshold:
                continue
            if best is None or evaluation.breakdown.total > best.breakdown.total:
                best = evaluation
        if best is not None:
            result.evaluations = [
                replace(e, breakdown=replace(e.breakdown, accepted=e.breakdown.total >= threshold))
                for e in evaluations
            ]
            best = next(r for e, r in zip(evaluations, result.evaluations) if e is best)
            result.candidate = best.candidate
            result.breakdown = best.breakdown
            result.threshold = threshold
            logger.info(
                f"[OK] Selected post scoring {best.breakdown.total} at threshold {threshold}: "
                f"{best.candidate.short_label()}"
            )
            return result
        logger.debug(f"No eligible post reached threshold {threshold}")

    top = max(e.breakdown.total for e in eligible)
    logger.info(f"[SKIP] Best eligible score {top} is below every threshold")
    return result


def select_candidate(
    candidates: Sequence[Candidate],
    thresholds: Iterable[int] = DEFAULT_THRESHOLDS,
    **kwargs,
) -> Optional[Candidate]:
    return rank_candidates(candidates, thresholds, **kwargs).candidate
