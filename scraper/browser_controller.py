"""
Browser Controller for the LinkedIn feed
- Persistent Chromium profile (session survives restarts)
- Fingerprint randomization and stealth init script
- Navigation with retry/backoff
- Session check and credential login
- Feed scroll/settle and page snapshot capture
"""

import asyncio
import random
from pathlib import Path
from typing import Optional, Dict, Any
from playwright.async_api import async_playwright, Page, BrowserContext
import logging

from scraper.page_snapshot import PageSnapshot, capture_snapshot

logger = logging.getLogger(__name__)

LOGIN_URL = 'https://www.linkedin.com/login'
FEED_URL = 'https://www.linkedin.com/feed/'

# Landing on any of these means the session is not authenticated
AUTH_WALL_MARKERS = ('/login', '/authwall', '/checkpoint', '/uas/')

BLOCK_SIGNALS = ['access denied', 'unusual traffic', 'verify you are human', 'we suspect unusual activity']


class BrowserController:
    """Playwright session management with anti-detection"""

    # Realistic user agents for fingerprinting
    USER_AGENTS = [
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36',
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
        'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36',
    ]

    LOCALES = ['en-US', 'en-GB']

    SCREEN_RESOLUTIONS = [
        {'width': 1920, 'height': 1080},
        {'width': 1440, 'height': 900},
        {'width': 1536, 'height': 864},
    ]

    def __init__(self, session_dir: str = 'data/browser_session', headless: bool = False,
                 use_proxy: Optional[str] = None, use_stealth: bool = True):
        """
        Initialize browser controller

        Args:
            session_dir: Persistent Chromium profile directory
            headless: Run in headless mode
            use_proxy: Proxy server URL (e.g., http://proxy:8080)
            use_stealth: Enable stealth mode
        """
        self.session_dir = session_dir
        self.headless = headless
        self.use_proxy = use_proxy
        self.use_stealth = use_stealth

        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._playwright = None

    async def initialize(self) -> bool:
        """Launch a persistent Chromium context with stealth"""
        try:
            logger.info("Initializing browser controller...")
            Path(self.session_dir).mkdir(parents=True, exist_ok=True)

            self._playwright = await async_playwright().start()

            launch_args = [
                '--disable-blink-features=AutomationControlled',
                '--disable-dev-shm-usage',
                '--no-sandbox',
                '--disable-background-timer-throttling',
                '--disable-backgrounding-occluded-windows',
                '--disable-popup-blocking',
                '--disable-extensions',
                '--disable-default-apps',
                '--disable-sync',
                '--disable-translate',
            ]

            self.context = await self._playwright.chromium.launch_persistent_context(
                self.session_dir,
                headless=self.headless,
                args=launch_args,
                ignore_default_args=['--enable-automation'],
                **self._get_context_args(),
            )

            # Persistent contexts open with one blank page already
            self.page = self.context.pages[0] if self.context.pages else await self.context.new_page()

            if self.use_stealth:
                await self._apply_stealth()

            logger.info("[OK] Browser initialized successfully")
            return True

        except Exception as e:
            logger.error(f"[X] Browser initialization failed: {e}")
            await self.cleanup()
            return False

    def _get_context_args(self) -> Dict[str, Any]:
        """Generate realistic context arguments"""
        context_args = {
            'viewport': random.choice(self.SCREEN_RESOLUTIONS),
            'user_agent': random.choice(self.USER_AGENTS),
            'locale': random.choice(self.LOCALES),
            'color_scheme': random.choice(['light', 'dark']),
            'reduced_motion': 'reduce',
        }

        if self.use_proxy:
            context_args['proxy'] = {'server': self.use_proxy}

        return context_args

    async def _apply_stealth(self):
        """Hide the usual automation indicators"""
        try:
            await self.context.add_init_script("""
                // Remove automation indicators
                Object.defineProperty(navigator, 'webdriver', {
                    get: () => undefined,
                });

                Object.defineProperty(navigator, 'plugins', {
                    get: () => [1, 2, 3, 4, 5],
                });

                Object.defineProperty(navigator, 'languages', {
                    get: () => ['en-US', 'en'],
                });

                window.chrome = {
                    runtime: {},
                    loadTimes: function() {},
                    csi: function() {},
                };

                const originalQuery = window.navigator.permissions.query;
                window.navigator.permissions.query = (parameters) => (
                    parameters.name === 'notifications' ?
                        Promise.resolve({ state: Notification.permission }) :
                        originalQuery(parameters)
                );

                Object.defineProperty(navigator, 'vendor', {
                    get: () => 'Google Inc.',
                });
            """)

            logger.info("Stealth mode applied (JavaScript injections)")

        except Exception as e:
            logger.debug(f"Stealth application note: {e}")

    async def navigate(self, url: str, wait_until: str = 'domcontentloaded', timeout: int = 30000, max_retries: int = 3) -> bool:
        """Navigate with retry/backoff.

        Args:
            url: URL to navigate to
            wait_until: Playwright wait strategy
            timeout: initial timeout in ms
            max_retries: number of retry attempts on timeout
        """
        await asyncio.sleep(random.uniform(0.5, 2))

        attempt = 0
        current_timeout = timeout
        while attempt < max_retries:
            attempt += 1
            try:
                logger.debug(f"Navigating to {url} (attempt {attempt}/{max_retries}, timeout={current_timeout})")
                await self.page.goto(url, wait_until=wait_until, timeout=current_timeout)

                # let dynamic content load
                await asyncio.sleep(random.uniform(0.5, 1.5))

                if await self._is_blocked():
                    logger.warning(f"[WARN] Navigation may be blocked for {url}")
                    return False

                logger.info(f"[OK] Navigated to {url}")
                return True

            except asyncio.TimeoutError:
                logger.warning(f"[TIME] Navigation timeout for {url} on attempt {attempt}")
                current_timeout = int(current_timeout * 1.8) + random.randint(2000, 5000)
                await asyncio.sleep(random.uniform(1, 3))
                continue
            except Exception as e:
                if 'Timeout' in type(e).__name__:
                    logger.warning(f"[TIME] Navigation timeout for {url} on attempt {attempt}")
                    current_timeout = int(current_timeout * 1.8) + random.randint(2000, 5000)
                    await asyncio.sleep(random.uniform(1, 3))
                    continue
                logger.error(f"[X] Navigation failed: {e}")
                await self._save_error_screenshot('nav_error')
                return False

        logger.error(f"[X] Navigation failed after {max_retries} attempts: {url}")
        return False

    async def _is_blocked(self) -> bool:
        try:
            content = (await self.page.content()).lower()
        except Exception as e:
            logger.debug(f"Could not read page content: {e}")
            return False
        return any(sig in content for sig in BLOCK_SIGNALS)

    async def _save_error_screenshot(self, prefix: str):
        try:
            Path('logs').mkdir(exist_ok=True)
            screenshot_path = Path('logs') / f"{prefix}_{int(asyncio.get_event_loop().time())}.png"
            await self.page.screenshot(path=str(screenshot_path))
            logger.info(f"[OK] Saved screenshot: {screenshot_path}")
        except Exception as e:
            logger.debug(f"Screenshot note: {e}")

    def is_auth_wall(self, url: Optional[str] = None) -> bool:
        current = (url if url is not None else (self.page.url if self.page else '')) or ''
        return any(marker in current for marker in AUTH_WALL_MARKERS)

    async def is_session_valid(self, feed_url: str = FEED_URL) -> bool:
        """Open the feed and check we were not bounced to a login wall"""
        if not await self.navigate(feed_url, timeout=45000):
            return False
        if self.is_auth_wall():
            logger.info(f"[WARN] Session not authenticated (landed on {self.page.url})")
            return False
        logger.info("[OK] Existing session is valid")
        return True

    async def login(self, email: str, password: str, feed_url: str = FEED_URL) -> bool:
        """Credential login; waits for the feed or a manual checkpoint"""
        try:
            logger.info("[LOCK] Attempting LinkedIn login...")

            if not email or not password:
                logger.error("[X] LinkedIn credentials not configured")
                logger.error("   Set LINKEDIN_EMAIL and LINKEDIN_PASSWORD in .env file")
                return False

            if not await self.navigate(LOGIN_URL, timeout=60000):
                return False

            await self.page.fill('#username', '')
            await self.page.type('#username', email, delay=random.randint(60, 140))
            await asyncio.sleep(random.uniform(0.8, 1.6))
            await self.page.type('#password', password, delay=random.randint(60, 140))
            await asyncio.sleep(random.uniform(0.8, 1.6))
            await self.page.click('button[type="submit"]')

            try:
                await self.page.wait_for_url('**/feed/**', timeout=20000)
                logger.info("[OK] Login successful")
                return True
            except Exception:
                current_url = self.page.url
                if 'feed' in current_url:
                    logger.info("[OK] Login successful (feed detected)")
                    return True
                if 'checkpoint' in current_url:
                    logger.warning("[LOCK] Additional security verification required")
                    print("\n" + "=" * 60)
                    print("Please complete the security verification in the browser")
                    print("The script will wait for 3 minutes...")
                    print("=" * 60)
                    try:
                        await self.page.wait_for_url('**/feed/**', timeout=180000)
                        logger.info("[OK] Verification completed")
                        return True
                    except Exception:
                        logger.error("[X] Verification timeout")
                        return False
                logger.warning(f"[WARN] Login did not reach the feed (at {current_url})")
                return False

        except Exception as e:
            logger.error(f"[X] Login error: {e}")
            return False

    async def ensure_session(self, email: str, password: str, feed_url: str = FEED_URL) -> bool:
        if await self.is_session_valid(feed_url):
            return True
        if not await self.login(email, password, feed_url):
            return False
        return await self.navigate(feed_url, timeout=45000)

    async def scroll_feed(self, passes: int = 6, step_px: int = 900, settle_ms: int = 1500) -> int:
        """Scroll the feed so lazily-rendered cards load; returns passes completed"""
        done = 0
        for i in range(max(0, passes)):
            try:
                await self.page.mouse.wheel(0, step_px + random.randint(-120, 120))
                jitter = random.uniform(0.8, 1.3)
                await asyncio.sleep(settle_ms / 1000 * jitter)
                done += 1
            except Exception as e:
                logger.warning(f"[WARN] Scroll pass {i + 1}/{passes} failed: {e}")
                break

        logger.debug(f"Scrolled feed {done}/{passes} passes")
        return done

    async def capture_snapshot(self) -> PageSnapshot:
        return await capture_snapshot(self.page)

    async def cleanup(self):
        """Clean up resources with proper error handling"""
        try:
            if self.context:
                try:
                    await self.context.close()
                except (asyncio.CancelledError, Exception) as e:
                    logger.debug(f"Context close note: {type(e).__name__}")

            if self._playwright:
                try:
                    await self._playwright.stop()
                except (asyncio.CancelledError, Exception) as e:
                    logger.debug(f"Playwright stop note: {type(e).__name__}")

            self.context = None
            self.page = None
            self._playwright = None
            logger.info("Browser cleanup completed")
        except Exception as e:
            logger.debug(f"Cleanup wrapper note: {e}")
