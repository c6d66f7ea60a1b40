"""
Page Snapshot: a plain-data copy of the rendered feed
- Captured in one JavaScript evaluation (anchors + ancestor texts,
  identity-attribute elements, full body text)
- Everything downstream works on this snapshot, never on the live page
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import Page

logger = logging.getLogger(__name__)

# Cheap pre-filter applied in the browser; exact matching happens in Python
PERMALINK_HINTS = ['/feed/update/', '/posts/', 'ugcPost', 'urn:li:activity', 'urn:li:share']
IDENTITY_ATTRIBUTES = ['data-urn', 'data-id']
MAX_ANCESTOR_DEPTH = 12
MAX_ANCESTOR_TEXT = 30000
MAX_ANCHORS = 300
MAX_IDENTITY_ELEMENTS = 200

SNAPSHOT_JS = """
(opts) => {
    const mediaCounts = (el) => {
        let largeImages = 0;
        el.querySelectorAll('img').forEach(img => {
            if ((img.naturalWidth || img.width || 0) >= 200) largeImages++;
        });
        return { largeImages, videos: el.querySelectorAll('video').length };
    };

    const anchors = [];
    for (const a of document.querySelectorAll('a[href]')) {
        if (anchors.length >= opts.maxAnchors) break;
        const href = a.getAttribute('href') || '';
        if (!opts.permalinkHints.some(h => href.includes(h))) continue;
        const ancestors = [];
        let el = a.parentElement;
        for (let i = 0; i < opts.maxDepth && el; i++) {
            const text = el.innerText ? el.innerText.trim() : '';
            ancestors.push({ text, ...mediaCounts(el) });
            if (text.length > opts.maxText) break;
            el = el.parentElement;
        }
        anchors.push({ href, ancestors });
    }

    const identity = [];
    const selector = opts.identityAttributes.map(a => '[' + a + ']').join(',');
    for (const el of document.querySelectorAll(selector)) {
        if (identity.length >= opts.maxIdentity) break;
        for (const attr of opts.identityAttributes) {
            const value = el.getAttribute(attr);
            if (value && value.includes('urn:li:')) {
                identity.push({
                    attribute: attr,
                    value,
                    text: el.innerText ? el.innerText.trim() : '',
                    ...mediaCounts(el),
                });
                break;
            }
        }
    }

    return {
        url: window.location.href,
        bodyText: document.body ? document.body.innerText : '',
        anchors,
        identity,
    };
}
"""


@dataclass(frozen=True)
class AncestorText:
    text: str
    large_images: int = 0
    videos: int = 0


@dataclass(frozen=True)
class AnchorRecord:
    """A permalink-looking anchor and its ancestors' texts, innermost first"""

    href: str
    ancestors: List[AncestorText] = field(default_factory=list)


@dataclass(frozen=True)
class IdentityRecord:
    attribute: str
    value: str
    text: str
    large_images: int = 0
    videos: int = 0


@dataclass(frozen=True)
class PageSnapshot:
    url: str = ''
    body_text: str = ''
    anchors: List[AnchorRecord] = field(default_factory=list)
    identity_elements: List[IdentityRecord] = field(default_factory=list)
    captured_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not (self.body_text or self.anchors or self.identity_elements)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PageSnapshot":
        """Build a snapshot from the capture script's JSON result"""
        if not isinstance(data, dict):
            return cls(captured_at=datetime.now())

        anchors = []
        for raw in data.get('anchors') or []:
            if not isinstance(raw, dict) or not raw.get('href'):
                continue
            ancestors = [
                AncestorText(
                    text=str(a.get('text') or ''),
                    large_images=int(a.get('largeImages') or 0),
                    videos=int(a.get('videos') or 0),
                )
                for a in raw.get('ancestors') or []
                if isinstance(a, dict)
            ]
            anchors.append(AnchorRecord(href=str(raw['href']), ancestors=ancestors))

        identity = []
        for raw in data.get('identity') or []:
            if not isinstance(raw, dict) or not raw.get('value'):
                continue
            identity.append(IdentityRecord(
                attribute=str(raw.get('attribute') or ''),
                value=str(raw['value']),
                text=str(raw.get('text') or ''),
                large_images=int(raw.get('largeImages') or 0),
                videos=int(raw.get('videos') or 0),
            ))

        return cls(
            url=str(data.get('url') or ''),
            body_text=str(data.get('bodyText') or ''),
            anchors=anchors,
            identity_elements=identity,
            captured_at=datetime.now(),
        )

    def summary(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'anchors': len(self.anchors),
            'identity_elements': len(self.identity_elements),
            'body_chars': len(self.body_text),
        }


def sample_hrefs(snapshot: PageSnapshot, limit: int = 30) -> List[str]:
    seen: List[str] = []
    for anchor in snapshot.anchors:
        href = anchor.href.split('?')[0][:120]
        if href not in seen:
            seen.append(href)
        if len(seen) >= limit:
            break
    return seen


def sample_identity_values(snapshot: PageSnapshot, limit: int = 20) -> List[str]:
    values: List[str] = []
    for record in snapshot.identity_elements:
        if record.value not in values:
            values.append(record.value)
        if len(values) >= limit:
            break
    return values


async def capture_snapshot(page: Page, permalink_hints: Sequence[str] = PERMALINK_HINTS) -> PageSnapshot:
    """Evaluate the capture script on the live page; empty snapshot on failure"""
    try:
        data = await page.evaluate(SNAPSHOT_JS, {
            'permalinkHints': list(permalink_hints),
            'identityAttributes': IDENTITY_ATTRIBUTES,
            'maxDepth': MAX_ANCESTOR_DEPTH,
            'maxText': MAX_ANCESTOR_TEXT,
            'maxAnchors': MAX_ANCHORS,
            'maxIdentity': MAX_IDENTITY_ELEMENTS,
        })
        snapshot = PageSnapshot.from_dict(data)
        logger.info(
            f"[OK] Snapshot captured: {len(snapshot.anchors)} anchors, "
            f"{len(snapshot.identity_elements)} identity elements, {len(snapshot.body_text)} chars"
        )
        return snapshot
    except Exception as e:
        logger.warning(f"[WARN] Snapshot capture failed: {e}")
        return PageSnapshot(captured_at=datetime.now())
