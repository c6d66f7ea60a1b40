"""
Configuration loaded from environment variables (.env via python-dotenv)
"""

import os
import logging
from typing import List, Optional

from dotenv import load_dotenv

from scoring.signals import SIGNALS_VERSION

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = [80, 70, 60, 50, 40]
DEFAULT_ACTIVE_DAYS = [1, 2, 3, 4, 5, 6]  # 0 = Sunday


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(f"[WARN] Invalid integer for {name}={raw!r}, using {default}")
        return default


def _get_int_list(name: str, default: List[int]) -> List[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return list(default)
    try:
        values = [int(part.strip()) for part in raw.split(',') if part.strip()]
    except ValueError:
        logger.warning(f"[WARN] Invalid list for {name}={raw!r}, using {default}")
        return list(default)
    return values or list(default)


class Config:
    """Application configuration"""

    def __init__(self, env_file: Optional[str] = None):
        load_dotenv(env_file)

        # Credentials
        self.LINKEDIN_EMAIL = os.getenv('LINKEDIN_EMAIL', '')
        self.LINKEDIN_PASSWORD = os.getenv('LINKEDIN_PASSWORD', '')
        self.HEADLESS = _get_bool('HEADLESS', False)

        self.browser = {
            'session_dir': os.getenv('BROWSER_SESSION_DIR', 'data/browser_session'),
            'use_proxy': _get_bool('USE_PROXY', False),
            'proxy_server': os.getenv('PROXY_SERVER', ''),
            'use_stealth': _get_bool('USE_STEALTH', True),
        }

        self.feed = {
            'url': os.getenv('FEED_URL', 'https://www.linkedin.com/feed/'),
            'scroll_passes': _get_int('FEED_SCROLL_PASSES', 6),
            'scroll_step_px': _get_int('FEED_SCROLL_STEP_PX', 900),
            'settle_ms': _get_int('FEED_SETTLE_MS', 1500),
        }

        self.scoring = {
            'preset': os.getenv('SCORING_PRESET', 'balanced').strip().lower(),
            'thresholds': _get_int_list('SCORE_THRESHOLDS', DEFAULT_THRESHOLDS),
            'signals_version': SIGNALS_VERSION,
        }

        self.limits = {
            'max_engagements_per_day': _get_int('MAX_ENGAGEMENTS_PER_DAY', 10),
            'author_cooldown_days': _get_int('AUTHOR_COOLDOWN_DAYS', 7),
        }

        self.schedule = {
            'enforce': _get_bool('ENFORCE_SCHEDULE', True),
            'timezone': os.getenv('SCHEDULE_TIMEZONE', 'Asia/Karachi'),
            'start_hour': _get_int('SCHEDULE_START_HOUR', 9),
            'end_hour': _get_int('SCHEDULE_END_HOUR', 22),
            'active_days': _get_int_list('SCHEDULE_ACTIVE_DAYS', DEFAULT_ACTIVE_DAYS),
        }

        self.database = {
            'path': os.getenv('DATABASE_PATH', 'data/feed_scout.db'),
        }

        self.logging = {
            'level': os.getenv('LOG_LEVEL', 'INFO'),
            'dir': os.getenv('LOG_DIR', 'logs'),
        }

    @property
    def proxy(self) -> Optional[str]:
        if self.browser['use_proxy'] and self.browser['proxy_server']:
            return self.browser['proxy_server']
        return None

    @property
    def has_credentials(self) -> bool:
        return bool(self.LINKEDIN_EMAIL and self.LINKEDIN_PASSWORD)
