# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scraper.models import Candidate, Engagement, PostFormat, RecencyProxy  # noqa: E402

POST_BODY = (
    "We shipped our new deployment pipeline last week. After 3 years of manual "
    "releases we finally learned that automation is not optional for a small team. "
    "Here is what we changed, what broke along the way, and the one decision I "
    "would make differently if we started again tomorrow."
)

CARD_LINES = [
    "Feed post",
    "Jane Doe • 1st",
    "Founder at Acme | Building developer tools",
    "2h •",
    POST_BODY,
    "127 reactions",
    "14 comments",
    "Like",
    "Comment",
    "Repost",
    "Send",
    "John Smith",
    "• 2nd",
    "Engineer at Foo",
    "1h",
    "Great insight, thanks!",
    "Jane Doe",
    "Author",
    "Founder at Acme",
    "45m",
    "Thanks John, glad it helped.",
]


def build_candidate(**overrides) -> Candidate:
    fields = dict(
        source_locator="https://www.linkedin.com/feed/update/urn:li:activity:7100000000000000001/",
        author_name="Jane Doe",
        author_headline="Founder at Acme",
        body_text=POST_BODY,
        is_connection=False,
        format=PostFormat.TEXT,
        engagement=Engagement(reaction_count=40, comment_count=8),
        comment_samples=(),
        author_replied=False,
        recency=RecencyProxy(position_index=0, total_in_batch=1, age_label="3h"),
        strategy="anchor_walk",
    )
    fields.update(overrides)
    return Candidate(**fields)


@pytest.fixture
def card_lines():
    return list(CARD_LINES)


@pytest.fixture
def card_text():
    return "\n".join(CARD_LINES)


@pytest.fixture
def post_body():
    return POST_BODY


@pytest.fixture
def make_candidate():
    return build_candidate
