"""
Text-Based Post Parser
- Recovers author name, headline and body from unlabeled card lines
- Secondary scans: reaction/comment counts, age label, comment samples, format
- Works on visible text only, so it survives class-name and markup changes

Nothing in this module raises on bad input; every function degrades to
neutral defaults.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from scraper.models import Engagement, PostFormat, UNKNOWN_AUTHOR

logger = logging.getLogger(__name__)

MAX_INSPECTED_LINES = 15
MAX_NAME_LINE_LENGTH = 80
MAX_NAME_WORDS = 8
MAX_HEADLINE_WORDS = 14
MAX_COMMENT_SAMPLES = 5

# Interface chrome that must never be mistaken for a name or headline
ACTION_LABELS = {
    'like', 'comment', 'repost', 'send', 'share', 'reply', 'follow', '+ follow',
    'following', 'connect', 'message', 'subscribe', 'see more', '…more', '...more',
    'see less', 'show more', 'show less', 'show translation', 'see translation',
    'feed post', 'view profile', 'visit my website', 'view my portfolio',
    'learn more', 'view job', 'apply', 'show results', 'view results',
    'load more comments', 'most relevant', 'most recent', 'add a comment…',
    'add a comment...', 'hide post', 'report post', 'celebrate', 'support',
    'love', 'insightful', 'funny', 'curious', 'open emoji keyboard',
    'activate to view larger image,', 'your document has finished loading',
}

PROMOTED_PREFIXES = ('promoted', 'sponsored', 'suggested', 'feed post number')

FOOTER_ACTION_LABELS = ('like', 'comment', 'repost', 'send')

CONNECTION_MARKERS = ('• 1st', '· 1st', '1st degree')

VIDEO_MARKERS = ('playback speed', 'remaining time', 'media player modal', 'loaded:', 'unmute')

_URL_LIKE = re.compile(r'https?://|www\.|\.com/|lnkd\.in/', re.IGNORECASE)
_NUMERIC_ONLY = re.compile(r'^\d[\d,]*(?:\.\d+)?\s*[kKmM]?$')
_DEGREE_MARKER = re.compile(r'^[•·]?\s*(?:1st|2nd|3rd\+?)$', re.IGNORECASE)
_AGE_LABEL = re.compile(
    r'^(?:\d+\s*(?:s|m|h|d|w|mo|yr|y)|now|just now)\b\s*(?:[•·].*)?$',
    re.IGNORECASE,
)
_COUNT_LINE = re.compile(
    r'^(?:.{0,60}\band\s+\d[\d,.]*[kKmM]?\s+others?|\d[\d,.]*\s*[kKmM]?\s+(?:reactions?|comments?|reposts?))$',
    re.IGNORECASE,
)
_REACTIONS = re.compile(r'(\d[\d,.]*\s*[kKmM]?)\s+reactions?\b', re.IGNORECASE)
_OTHERS = re.compile(r'\band\s+(\d[\d,.]*\s*[kKmM]?)\s+others?\b', re.IGNORECASE)
_COMMENTS = re.compile(r'(\d[\d,.]*\s*[kKmM]?)\s+comments?\b', re.IGNORECASE)
_POLL_VOTES = re.compile(r'\b\d[\d,]*\s+votes?\b', re.IGNORECASE)
_SLIDE_COUNTER = re.compile(r'^\d+\s*/\s*\d+$')
_DOCUMENT_PAGES = re.compile(r'\b\d+\s+pages\b', re.IGNORECASE)


@dataclass(frozen=True)
class ParsedPost:
    author_name: str
    author_headline: str
    body_text: str
    is_connection: bool


def _word_count(line: str) -> int:
    return len(line.split())


def is_chrome_line(line: str) -> bool:
    """True for action buttons, promo markers, counters, degree and age labels"""
    lowered = (line or '').strip().lower()
    if not lowered:
        return True
    if lowered in ACTION_LABELS:
        return True
    if lowered.startswith(PROMOTED_PREFIXES):
        return True
    return bool(
        _NUMERIC_ONLY.match(lowered)
        or _DEGREE_MARKER.match(lowered)
        or _AGE_LABEL.match(lowered)
        or _COUNT_LINE.match(lowered)
    )


def _is_rejected(line: str) -> bool:
    if not line or len(line) > MAX_NAME_LINE_LENGTH:
        return True
    if _URL_LIKE.search(line):
        return True
    return is_chrome_line(line)


def _clean_author_name(line: str) -> str:
    # "Jane Doe • 1st" / "Jane Doe · Following"
    name = re.split(r'\s[•·]\s?', line, maxsplit=1)[0].strip()
    return name or line.strip()


def detect_connection(headline: str, first_lines: Sequence[str]) -> bool:
    for text in [headline, *first_lines]:
        lowered = (text or '').lower()
        if lowered.strip() == '1st':
            return True
        if any(marker in lowered for marker in CONNECTION_MARKERS):
            return True
    return False


def parse_post_block(lines: Sequence[str]) -> ParsedPost:
    """Split unlabeled card lines into author name, headline and body.

    The first acceptable short line (1-8 words) is the author name, the next
    acceptable line of at most 14 words is the headline, and everything after
    that is the body. Without a usable name the whole block becomes the body
    and the author is "Unknown".
    """
    try:
        clean = [str(line).strip() for line in lines if line and str(line).strip()]

        name_idx = None
        for idx, line in enumerate(clean[:MAX_INSPECTED_LINES]):
            if _is_rejected(line):
                continue
            if 1 <= _word_count(line) <= MAX_NAME_WORDS:
                name_idx = idx
                break

        if name_idx is None:
            return ParsedPost(
                author_name=UNKNOWN_AUTHOR,
                author_headline='',
                body_text=' '.join(clean),
                is_connection=detect_connection('', clean[:3]),
            )

        author_name = _clean_author_name(clean[name_idx])
        headline = ''
        body_start = name_idx + 1
        for idx in range(name_idx + 1, min(len(clean), MAX_INSPECTED_LINES)):
            line = clean[idx]
            if is_chrome_line(line):
                continue
            # Anything too long or wordy for a headline is where the body begins
            if _is_rejected(line) or _word_count(line) > MAX_HEADLINE_WORDS:
                body_start = idx
            else:
                headline = line
                body_start = idx + 1
            break

        # Age / degree labels between the header and the post text
        while body_start < len(clean) and is_chrome_line(clean[body_start]):
            body_start += 1

        return ParsedPost(
            author_name=author_name,
            author_headline=headline,
            body_text=' '.join(clean[body_start:]),
            is_connection=detect_connection(headline, clean[:3]),
        )
    except Exception as e:
        logger.debug(f"Post block parse fell back to defaults: {e}")
        try:
            body = ' '.join(str(line).strip() for line in lines if line)
        except Exception:
            body = ''
        return ParsedPost(UNKNOWN_AUTHOR, '', body, False)


def _is_footer_start(line: str) -> bool:
    lowered = line.strip().lower()
    if lowered in FOOTER_ACTION_LABELS:
        return True
    return bool(_NUMERIC_ONLY.match(lowered) or _COUNT_LINE.match(lowered))


def split_social_footer(lines: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Separate post content from the counters / action bar / comments below it"""
    lines = list(lines)
    # Name and headline always come first; never cut before them
    for idx in range(2, len(lines)):
        if _is_footer_start(lines[idx]):
            return lines[:idx], lines[idx:]
    return lines, []


def parse_count(raw: str) -> int:
    """'1,234' -> 1234, '1.2K' -> 1200, '3M' -> 3000000"""
    token = (raw or '').strip().replace(',', '').replace(' ', '').upper()
    multiplier = 1
    if token.endswith('K'):
        multiplier, token = 1_000, token[:-1]
    elif token.endswith('M'):
        multiplier, token = 1_000_000, token[:-1]
    try:
        return int(float(token) * multiplier)
    except ValueError:
        return 0


def scan_engagement(lines: Sequence[str]) -> Engagement:
    text = '\n'.join(lines)

    reactions = 0
    match = _REACTIONS.search(text)
    if match:
        reactions = parse_count(match.group(1))
    else:
        match = _OTHERS.search(text)
        if match:
            # "Jane Doe and 127 others" counts Jane too
            reactions = parse_count(match.group(1)) + 1
        else:
            for line in lines:
                if _NUMERIC_ONLY.match(line.strip()):
                    reactions = parse_count(line)
                    break

    comments = 0
    match = _COMMENTS.search(text)
    if match:
        comments = parse_count(match.group(1))

    return Engagement(reaction_count=reactions, comment_count=comments)


def scan_age_label(lines: Sequence[str], limit: int = 10) -> str:
    for line in lines[:limit]:
        if _AGE_LABEL.match(line.strip()):
            return line.strip()
    return ''


def scan_comments(footer_lines: Sequence[str], author_name: str = '') -> Tuple[Tuple[str, ...], bool]:
    """Return (comment samples, author replied) from the footer text.

    Comments render as: commenter, degree/"Author" badge, headline, age, text.
    The line right after each age label is taken as the comment body.
    """
    footer = [line.strip() for line in footer_lines if line and line.strip()]
    start = None
    for idx, line in enumerate(footer):
        if line.lower() in FOOTER_ACTION_LABELS:
            start = idx
    if start is None:
        return (), False

    region = footer[start + 1:]
    samples: List[str] = []
    for idx, line in enumerate(region[:-1]):
        if _AGE_LABEL.match(line):
            body = region[idx + 1]
            if not is_chrome_line(body):
                samples.append(body)
        if len(samples) >= MAX_COMMENT_SAMPLES:
            break

    replied = any(line.lower() == 'author' for line in region)
    if not replied and author_name and author_name != UNKNOWN_AUTHOR:
        replied = any(line.startswith(author_name) for line in region)

    return tuple(samples), replied


def detect_format(lines: Sequence[str], large_images: int = 0, videos: int = 0) -> PostFormat:
    lowered = [line.strip().lower() for line in lines]
    text = '\n'.join(lowered)

    if _POLL_VOTES.search(text) or 'show results' in lowered or 'view results' in lowered:
        return PostFormat.POLL
    if videos > 0 or 'play' in lowered or any(marker in text for marker in VIDEO_MARKERS):
        return PostFormat.VIDEO
    if any(_SLIDE_COUNTER.match(line) for line in lowered) or _DOCUMENT_PAGES.search(text):
        return PostFormat.CAROUSEL
    if large_images > 0:
        return PostFormat.IMAGE
    return PostFormat.TEXT
