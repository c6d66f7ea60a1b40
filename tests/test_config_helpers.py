from datetime import datetime

import pytest

from scraper.models import ScoreBreakdown
from scoring.candidate_selector import rank_candidates
from scoring.signals import SIGNALS_VERSION
from utils.config import Config
from utils.helpers import format_score_table, is_within_schedule, schedule_now

ENV_KEYS = [
    "HEADLESS", "SCORE_THRESHOLDS", "AUTHOR_COOLDOWN_DAYS", "MAX_ENGAGEMENTS_PER_DAY",
    "SCHEDULE_ACTIVE_DAYS", "SCORING_PRESET", "USE_PROXY", "PROXY_SERVER", "DATABASE_PATH",
]

SCHEDULE = {"enforce": True, "timezone": "Asia/Karachi", "start_hour": 9, "end_hour": 22,
            "active_days": [1, 2, 3, 4, 5, 6]}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_config_defaults(clean_env, tmp_path):
    config = Config(env_file=str(tmp_path / "missing.env"))
    assert config.HEADLESS is False
    assert config.scoring["thresholds"] == [80, 70, 60, 50, 40]
    assert config.scoring["preset"] == "balanced"
    assert config.scoring["signals_version"] == SIGNALS_VERSION
    assert config.limits == {"max_engagements_per_day": 10, "author_cooldown_days": 7}
    assert config.schedule["active_days"] == [1, 2, 3, 4, 5, 6]
    assert config.schedule["timezone"] == "Asia/Karachi"
    assert config.database["path"] == "data/feed_scout.db"
    assert config.proxy is None


def test_config_from_environment(clean_env, tmp_path):
    clean_env.setenv("HEADLESS", "true")
    clean_env.setenv("SCORE_THRESHOLDS", "90, 65")
    clean_env.setenv("USE_PROXY", "yes")
    clean_env.setenv("PROXY_SERVER", "http://proxy:8080")
    config = Config(env_file=str(tmp_path / "missing.env"))
    assert config.HEADLESS is True
    assert config.scoring["thresholds"] == [90, 65]
    assert config.proxy == "http://proxy:8080"


def test_config_reads_env_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("MAX_ENGAGEMENTS_PER_DAY=3\nSCORING_PRESET=legacy\n")
    config = Config(env_file=str(env_file))
    assert config.limits["max_engagements_per_day"] == 3
    assert config.scoring["preset"] == "legacy"


def test_malformed_numbers_fall_back(clean_env, tmp_path):
    clean_env.setenv("AUTHOR_COOLDOWN_DAYS", "a week")
    clean_env.setenv("SCORE_THRESHOLDS", "high,low")
    config = Config(env_file=str(tmp_path / "missing.env"))
    assert config.limits["author_cooldown_days"] == 7
    assert config.scoring["thresholds"] == [80, 70, 60, 50, 40]


@pytest.mark.parametrize("now,expected", [
    (datetime(2024, 1, 8, 10, 0), True),    # Monday
    (datetime(2024, 1, 8, 8, 59), False),
    (datetime(2024, 1, 8, 22, 30), True),   # end hour is inclusive
    (datetime(2024, 1, 8, 23, 0), False),
    (datetime(2024, 1, 7, 12, 0), False),   # Sunday
    (datetime(2024, 1, 13, 12, 0), True),   # Saturday
])
def test_is_within_schedule(now, expected):
    assert is_within_schedule(SCHEDULE, now) is expected


def test_schedule_not_enforced():
    assert is_within_schedule(dict(SCHEDULE, enforce=False), datetime(2024, 1, 7, 3, 0)) is True


def test_unknown_timezone_uses_local_time():
    assert isinstance(schedule_now("Mars/Olympus_Mons"), datetime)


def test_format_score_table(make_candidate, post_body):
    best = make_candidate(body_text="Best post. " + post_body)
    grief = make_candidate(
        source_locator="https://www.linkedin.com/feed/update/urn:li:activity:2/",
        body_text="Our founder passed away this week. " + post_body,
    )
    totals = {"Best post. W": 71, "Our founder ": 95}

    def scorer(candidate, context):
        return ScoreBreakdown(50, 40, 80, 15, 100, 90, total=totals[candidate.body_text[:12]])

    result = rank_candidates([best, grief], [70], scorer=scorer)
    table = format_score_table(result)
    lines = table.splitlines()

    assert lines[0].split()[:2] == ["#", "TOTAL"]
    assert "excluded:grief" in lines[2]
    assert "*" in lines[3] and "eligible" in lines[3]
