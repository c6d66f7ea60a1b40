"""
LinkedIn Feed Scout
Main entry point with interactive menu

Features:
- Persistent browser session with stealth (login once)
- Text-based feed extraction with a three-strategy fallback cascade
- Hard exclusions (open to work, students, job ads, grief)
- Composite 0-100 scoring and a dynamic threshold ladder
- SQLite engagement ledger (no double engagement, author cooldown, daily cap)
"""

import asyncio
import sys
from pathlib import Path
from datetime import datetime
import logging

from dotenv import load_dotenv

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from utils.logger import setup_logging
from utils.config import Config
from utils.helpers import print_banner, print_config_info, is_within_schedule, format_score_table
from scraper.browser_controller import BrowserController
from scraper.feed_extractor import FeedExtractor, canonical_permalink
from scoring.post_scoring import get_weights
from agents.feed_agent import FeedAgent
from database.db_manager import DatabaseManager

logger = logging.getLogger(__name__)


class FeedScoutApp:
    """Main application with complete workflow"""

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.db = DatabaseManager(self.config.database['path'])
        self.browser_controller: BrowserController = None
        self.feed_agent: FeedAgent = None
        self.start_time = None

    async def initialize(self) -> bool:
        """Initialize all components"""
        try:
            logger.info("Initializing Feed Scout...")

            self.browser_controller = BrowserController(
                session_dir=self.config.browser['session_dir'],
                headless=self.config.HEADLESS,
                use_proxy=self.config.proxy,
                use_stealth=self.config.browser['use_stealth'],
            )

            if not await self.browser_controller.initialize():
                logger.error("[X] Browser initialization failed")
                return False

            self.feed_agent = FeedAgent(
                self.browser_controller,
                FeedExtractor(),
                db=self.db,
                feed_settings=self.config.feed,
                thresholds=self.config.scoring['thresholds'],
                weights=get_weights(self.config.scoring['preset']),
                author_cooldown_days=self.config.limits['author_cooldown_days'],
            )

            logger.info("[OK] All components initialized successfully")
            return True

        except Exception as e:
            logger.error(f"[X] Initialization failed: {e}")
            return False

    async def login(self) -> bool:
        """Reuse the saved session, or log in with credentials"""
        return await self.browser_controller.ensure_session(
            self.config.LINKEDIN_EMAIL,
            self.config.LINKEDIN_PASSWORD,
            self.config.feed['url'],
        )

    def can_engage_now(self) -> bool:
        """Schedule window and daily cap"""
        if not is_within_schedule(self.config.schedule):
            s = self.config.schedule
            print(f"[SKIP] Outside active hours ({s['start_hour']}:00-{s['end_hour']}:00 {s['timezone']}, days {s['active_days']})")
            return False

        done_today = self.db.count_engagements_today()
        cap = self.config.limits['max_engagements_per_day']
        if done_today >= cap:
            print(f"[SKIP] Daily limit reached ({done_today}/{cap})")
            return False
        return True

    async def workflow_find_best_post(self):
        """Scan the feed, show the ranking and optionally record the engagement"""
        try:
            if not self.can_engage_now():
                return

            print("[WAIT] Scanning feed...")
            result = await self.feed_agent.find_best_post()

            if not result.evaluations:
                print("[INFO] No posts extracted. Try option 3 (feed diagnostics).")
                return

            print("\n" + format_score_table(result))
            print()

            if not result.selected:
                print(f"[INFO] No post met any threshold ({', '.join(str(t) for t in self.feed_agent.thresholds)})")
                return

            post = result.candidate
            print("=" * 60)
            print(f"[BEST] Score {result.breakdown.total} (threshold {result.threshold})")
            print(f"  Author:   {post.author_name}")
            print(f"  Headline: {post.author_headline[:80]}")
            print(f"  Format:   {post.format.value}  |  Reactions: {post.engagement.reaction_count}  "
                  f"Comments: {post.engagement.comment_count}")
            print(f"  URL:      {post.source_locator}")
            print(f"\n{post.body_text[:500]}")
            print("=" * 60)

            answer = input("\nDid you engage with this post? (y/n): ").strip().lower()
            if answer == 'y':
                self.db.record_engagement(
                    post.source_locator,
                    post.author_name,
                    score=result.breakdown.total,
                    threshold=result.threshold,
                    body_preview=post.body_text,
                )
                print("[OK] Engagement recorded")

        except Exception as e:
            logger.error(f"[X] Feed scan error: {e}")
            print(f"[ERROR] Feed scan error: {e}")

    async def workflow_record_engagement(self):
        """Record an engagement made outside the tool"""
        url = input("\nPost URL: ").strip()
        if not url:
            print("[CANCELLED]")
            return
        # Same form as the locators the extractor produces
        url = canonical_permalink(url) or url
        author = input("Author name: ").strip()
        if self.db.record_engagement(url, author, action='manual'):
            print("[OK] Engagement recorded")
        else:
            print("[INFO] Post was already recorded")

    async def workflow_debug_feed(self):
        """Dump what the page looks like to the extractor"""
        try:
            print("[WAIT] Capturing feed for diagnostics...")
            info = await self.feed_agent.debug_feed()

            print("\n" + "-" * 60)
            print(f"PAGE URL: {info['url']}")
            print(f"Snapshot: {info['summary']}")
            print("-" * 60)

            print("\n-- Post-like href patterns --")
            for href in info['href_samples']:
                print(f"  {href}")

            print("\n-- Identity attribute values --")
            for value in info['identity_samples']:
                print(f"  {value}")

            print("\n-- Strategy yields --")
            for name, count in info['strategy_yields'].items():
                print(f"  {name:<20} {'error' if count < 0 else count}")

            print("\n-- Body text preview --")
            print(info['body_preview'])
            print("-" * 60)

        except Exception as e:
            logger.error(f"[X] Diagnostics error: {e}")

    async def show_menu(self) -> int:
        """Show interactive menu"""
        print("\n" + "="*60)
        print("[MENU] SELECT MODE")
        print("="*60)
        print("1. Find Best Post To Engage")
        print("2. Record An Engagement Manually")
        print("3. Feed Diagnostics")
        print("4. View Statistics")
        print("5. Scan History")
        print("6. Cleanup Old Data")
        print("0. Exit")
        print("="*60)

        while True:
            try:
                choice = input("\nEnter your choice (0-6): ").strip()
                if choice in ['0', '1', '2', '3', '4', '5', '6']:
                    return int(choice)
                print("[X] Invalid choice. Please try again.")
            except KeyboardInterrupt:
                return 0

    async def show_statistics(self):
        print("\n" + "="*60)
        print("[STAT] LEDGER STATISTICS")
        print("="*60)

        stats = self.db.get_stats()
        for key, value in stats.items():
            print(f"  {key.replace('_', ' ').title()}: {value}")
        print(f"  Database Size: {self.db.get_db_size()}")
        print("="*60 + "\n")

    async def show_scan_history(self):
        print("\n" + "-"*60)
        print("[HISTORY] RECENT SCAN RUNS")
        print("-"*60)

        history = self.db.get_scan_history(limit=15)
        if not history:
            print("  No scan runs yet.")
            return
        for h in history:
            status_icon = "+" if h['status'] == 'selected' else "-"
            score = h['score'] if h['score'] is not None else '--'
            print(f"  {status_icon} #{h['id']} {h['created_at']} [{(h['strategy'] or 'none'):<18}] "
                  f"Posts: {h['candidates']:<3} Eligible: {h['eligible']:<3} Score: {score}")

    async def cleanup_data(self):
        """Cleanup old data with options"""
        print("\nCLEANUP OPTIONS:")
        print("  1. Delete scan runs older than X days")
        print("  2. Clear everything (fresh start)")
        print("  0. Cancel")

        try:
            choice = input("\nSelect option (0-2): ").strip()

            if choice == '1':
                days = int(input("Delete runs older than (days): ") or "90")
                deleted = self.db.cleanup_old_data(days)
                print(f"[OK] Deleted {deleted} old scan runs")

            elif choice == '2':
                confirm = input("DELETE EVERYTHING? This cannot be undone! (type 'DELETE'): ").strip()
                if confirm == 'DELETE':
                    self.db.clear_all()
                    print("[OK] All data cleared. Fresh start!")
                else:
                    print("[CANCELLED]")
            else:
                print("[CANCELLED]")

        except ValueError as e:
            print(f"[ERROR] Cleanup error: {e}")

    async def run(self):
        """Run main application loop"""
        try:
            self.start_time = datetime.now()

            print_banner()
            print_config_info(self.config)

            if not await self.initialize():
                logger.error("Initialization failed")
                return

            if not await self.login():
                logger.error("Login failed")
                return

            while True:
                choice = await self.show_menu()

                if choice == 0:
                    break
                elif choice == 1:
                    await self.workflow_find_best_post()
                elif choice == 2:
                    await self.workflow_record_engagement()
                elif choice == 3:
                    await self.workflow_debug_feed()
                elif choice == 4:
                    await self.show_statistics()
                elif choice == 5:
                    await self.show_scan_history()
                elif choice == 6:
                    await self.cleanup_data()

            logger.info("[OK] Goodbye!")

        except KeyboardInterrupt:
            logger.info("[INTERRUPT] Interrupted by user")
        except Exception as e:
            logger.error(f"[X] Fatal error: {e}")
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Cleanup and shutdown"""
        logger.info("[SHUTDOWN] Shutting down...")

        if self.browser_controller:
            await self.browser_controller.cleanup()

        if self.start_time:
            elapsed = datetime.now() - self.start_time
            logger.info(f"Total execution time: {elapsed}")

        logger.info("[OK] Shutdown completed")


async def main():
    """Main entry point"""
    load_dotenv()
    config = Config()

    Path('data').mkdir(exist_ok=True)
    setup_logging(level=config.logging['level'], log_dir=config.logging['dir'])

    app = FeedScoutApp(config)
    await app.run()


def main_cli():
    asyncio.run(main())


if __name__ == "__main__":
    main_cli()
