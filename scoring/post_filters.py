"""
Exclusion Filter: hard vetoes applied before any scoring
Rules run in fixed priority and stop at the first match:
1. Author is open to work / job seeking
2. Author is a student or junior
3. Post is a job advertisement
4. Post is about grief, tragedy or a personal crisis (never automated)
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from scraper.models import Candidate
from scoring.signals import DEFAULT_SIGNALS, SignalTables

logger = logging.getLogger(__name__)

AUTHOR_WINDOW = 400
JOB_POST_WINDOW = 800
GRIEF_WINDOW = 600


@dataclass(frozen=True)
class ExclusionResult:
    excluded: bool
    reason: str = ''
    rule: Optional[str] = None


NOT_EXCLUDED = ExclusionResult(excluded=False)


def _lc(*parts: str) -> str:
    return ' '.join(p for p in parts if p).lower()


def _has_any(text: str, signals: Iterable[str]) -> bool:
    return any(signal in text for signal in signals)


def is_open_to_work(candidate: Candidate, signals: SignalTables = DEFAULT_SIGNALS) -> bool:
    text = _lc(candidate.author_name, candidate.author_headline, candidate.body_text[:AUTHOR_WINDOW])
    return _has_any(text, signals.open_to_work)


def is_student(candidate: Candidate, signals: SignalTables = DEFAULT_SIGNALS) -> bool:
    text = _lc(candidate.author_name, candidate.author_headline, candidate.body_text[:AUTHOR_WINDOW])
    return _has_any(text, signals.student)


def is_job_post(candidate: Candidate, signals: SignalTables = DEFAULT_SIGNALS) -> bool:
    # Hiring phrases often sit below the opening lines, hence the wider window
    return _has_any(_lc(candidate.body_text[:JOB_POST_WINDOW]), signals.job_post)


def is_grief_post(candidate: Candidate, signals: SignalTables = DEFAULT_SIGNALS) -> bool:
    return _has_any(_lc(candidate.body_text[:GRIEF_WINDOW]), signals.grief)


def should_exclude(candidate: Candidate, signals: SignalTables = DEFAULT_SIGNALS) -> ExclusionResult:
    """Master exclusion check; returns the first matching rule"""
    if is_open_to_work(candidate, signals):
        return ExclusionResult(True, 'Author is Open To Work', 'open_to_work')
    if is_student(candidate, signals):
        return ExclusionResult(True, 'Author appears to be a student / junior', 'student')
    if is_job_post(candidate, signals):
        return ExclusionResult(True, 'Post is a job advertisement', 'job_post')
    if is_grief_post(candidate, signals):
        return ExclusionResult(True, 'Post is about grief / tragedy, skipped out of respect', 'grief')
    return NOT_EXCLUDED
