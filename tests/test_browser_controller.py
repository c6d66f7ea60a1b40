import asyncio

import pytest

from scraper.browser_controller import BrowserController


@pytest.mark.parametrize("url,expected", [
    ("https://www.linkedin.com/feed/", False),
    ("https://www.linkedin.com/login?session_redirect=x", True),
    ("https://www.linkedin.com/authwall?trk=feed", True),
    ("https://www.linkedin.com/checkpoint/challenge/abc", True),
    ("https://www.linkedin.com/uas/login", True),
])
def test_auth_wall_detection(url, expected):
    assert BrowserController().is_auth_wall(url) is expected


def test_context_args_include_proxy():
    args = BrowserController(use_proxy="http://proxy:8080")._get_context_args()
    assert args["proxy"] == {"server": "http://proxy:8080"}
    assert args["user_agent"] in BrowserController.USER_AGENTS


class _FakeMouse:
    def __init__(self, fail_after=None):
        self.moves = []
        self.fail_after = fail_after

    async def wheel(self, dx, dy):
        if self.fail_after is not None and len(self.moves) >= self.fail_after:
            raise RuntimeError("page closed")
        self.moves.append(dy)


class _FakePage:
    def __init__(self, mouse):
        self.mouse = mouse


def test_scroll_feed_counts_completed_passes():
    controller = BrowserController()
    controller.page = _FakePage(_FakeMouse())
    assert asyncio.run(controller.scroll_feed(passes=3, step_px=500, settle_ms=0)) == 3
    assert len(controller.page.mouse.moves) == 3


def test_scroll_feed_stops_on_error():
    controller = BrowserController()
    controller.page = _FakePage(_FakeMouse(fail_after=1))
    assert asyncio.run(controller.scroll_feed(passes=4, step_px=500, settle_ms=0)) == 1
