"""
Console helpers: banner, config summary, schedule gate, score tables
"""

import logging
from datetime import datetime
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner"""
    print("""
    ============================================================
                    LINKEDIN FEED SCOUT
    ============================================================
      Finds the single best post in your feed worth a thoughtful
      comment. Extraction cascade, hard exclusions, composite
      scoring and a dynamic threshold.
    ============================================================
    """)


def print_config_info(config):
    """Print the active configuration (no secrets)"""
    print("\n[CONFIG] Current Configuration:")
    print(f"  - Headless: {config.HEADLESS}")
    print(f"  - Session dir: {config.browser['session_dir']}")
    print(f"  - Proxy: {config.proxy or 'disabled'}")
    print(f"  - Stealth: {config.browser['use_stealth']}")
    print(f"  - Scroll passes: {config.feed['scroll_passes']}")
    print(f"  - Scoring preset: {config.scoring['preset']} (signals {config.scoring['signals_version']})")
    print(f"  - Thresholds: {', '.join(str(t) for t in config.scoring['thresholds'])}")
    print(f"  - Max engagements/day: {config.limits['max_engagements_per_day']}")
    print(f"  - Author cooldown: {config.limits['author_cooldown_days']} days")
    schedule = config.schedule
    if schedule['enforce']:
        print(f"  - Schedule: {schedule['start_hour']}:00-{schedule['end_hour']}:00 "
              f"{schedule['timezone']} (days {schedule['active_days']})")
    else:
        print("  - Schedule: not enforced")
    print(f"  - Database: {config.database['path']}")
    print()


def schedule_now(timezone: str) -> datetime:
    try:
        return datetime.now(ZoneInfo(timezone))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"[WARN] Unknown timezone '{timezone}', using local time")
        return datetime.now()


def is_within_schedule(schedule: Dict, now: Optional[datetime] = None) -> bool:
    """True when now falls on an active day (0=Sunday) between start and end hour inclusive"""
    if not schedule.get('enforce', True):
        return True
    if now is None:
        now = schedule_now(schedule.get('timezone', 'UTC'))

    day = now.isoweekday() % 7
    if day not in schedule.get('active_days', []):
        return False
    return schedule.get('start_hour', 0) <= now.hour <= schedule.get('end_hour', 23)


def format_score_table(result, limit: int = 10) -> str:
    """Render the top evaluations of a SelectionResult as a text table"""
    header = f"{'#':>3} {'TOTAL':>5} {'CONT':>4} {'ENG':>4} {'VIS':>4} {'SEN':>4} {'NICHE':>5} {'REC':>4}  {'STATUS':<15} POST"
    lines = [header, '-' * len(header)]

    ranked = sorted(
        enumerate(result.evaluations),
        key=lambda item: (-item[1].breakdown.total, item[0]),
    )
    for position, evaluation in ranked[:limit]:
        b = evaluation.breakdown.as_dict()
        marker = '*' if result.candidate is evaluation.candidate else ' '
        status = evaluation.status
        if evaluation.exclusion.excluded:
            status = f"{status}:{evaluation.exclusion.rule}"
        lines.append(
            f"{position + 1:>3}{marker}{b['total']:>5} {b['content']:>4} {b['engagement']:>4} "
            f"{b['visibility']:>4} {b['seniority']:>4} {b['niche']:>5} {b['recency']:>4}  "
            f"{status:<15} {evaluation.candidate.short_label(50)}"
        )

    if len(result.evaluations) > limit:
        lines.append(f"... {len(result.evaluations) - limit} more")
    return '\n'.join(lines)
