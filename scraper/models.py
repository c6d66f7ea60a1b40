"""
Feed data types shared by the extractor, the scorer and the selector
- RawBlock: unlabeled card text harvested from the page
- Candidate: one parsed feed post (immutable once extracted)
- ScoreBreakdown: transient composite score for one candidate
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

UNKNOWN_AUTHOR = "Unknown"
MIN_BODY_LENGTH = 80


class PostFormat(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    CAROUSEL = "carousel"
    POLL = "poll"


@dataclass(frozen=True)
class RawBlock:
    """Ordered text lines for one card or text chunk"""

    lines: Tuple[str, ...]
    locator: Optional[str] = None
    large_images: int = 0
    videos: int = 0

    @classmethod
    def from_text(cls, text: str, locator: Optional[str] = None,
                  large_images: int = 0, videos: int = 0) -> "RawBlock":
        lines = tuple(line.strip() for line in (text or "").split("\n") if line.strip())
        return cls(lines=lines, locator=locator, large_images=large_images, videos=videos)

    @property
    def text_length(self) -> int:
        return sum(len(line) for line in self.lines)


@dataclass(frozen=True)
class Engagement:
    reaction_count: int = 0
    comment_count: int = 0


@dataclass(frozen=True)
class RecencyProxy:
    """Position in the discovery batch plus the raw age label ("2h •")"""

    position_index: int = 0
    total_in_batch: int = 0
    age_label: str = ""


@dataclass(frozen=True)
class Candidate:
    """A feed post worth considering for engagement"""

    source_locator: Optional[str]
    author_name: str
    author_headline: str
    body_text: str
    is_connection: bool = False
    format: PostFormat = PostFormat.TEXT
    engagement: Engagement = field(default_factory=Engagement)
    comment_samples: Tuple[str, ...] = ()
    author_replied: bool = False
    recency: RecencyProxy = field(default_factory=RecencyProxy)
    strategy: str = ""

    @property
    def is_actionable(self) -> bool:
        return bool(self.source_locator)

    def short_label(self, width: int = 60) -> str:
        snippet = self.body_text[:width].replace("\n", " ")
        return f"{self.author_name} | {snippet}"


@dataclass(frozen=True)
class ScoringContext:
    position_index: int = 0
    total_in_batch: int = 0


@dataclass(frozen=True)
class ScoreBreakdown:
    content: float
    engagement: float
    seniority: float
    niche: float
    recency: float
    visibility: float
    total: int
    accepted: bool = False

    def as_dict(self) -> Dict[str, int]:
        return {
            "content": int(round(self.content)),
            "engagement": int(round(self.engagement)),
            "seniority": int(round(self.seniority)),
            "niche": int(round(self.niche)),
            "recency": int(round(self.recency)),
            "visibility": int(round(self.visibility)),
            "total": self.total,
        }
