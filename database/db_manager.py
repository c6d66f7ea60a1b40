"""
Database Manager: SQLite engagement ledger and scan-run history
"""

import sqlite3
import time
import logging
from pathlib import Path
from typing import List, Dict, Optional, Set

logger = logging.getLogger(__name__)

LEDGER_TABLES = ('engaged_posts', 'scan_runs')


class DatabaseManager:
    """Remembers which posts and authors were engaged, and every scan run"""

    def __init__(self, db_path: str = 'data/feed_scout.db'):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self):
        """Initialize database schema"""
        conn = self._get_connection()
        cursor = conn.cursor()

        # One row per post we engaged with
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS engaged_posts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                post_url TEXT UNIQUE NOT NULL,
                author_name TEXT,
                author_key TEXT,
                score INTEGER,
                threshold INTEGER,
                action TEXT DEFAULT 'comment',
                body_preview TEXT,
                engaged_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # One row per selection run, selected or not
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS scan_runs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                strategy TEXT,
                candidates_found INTEGER DEFAULT 0,
                eligible_count INTEGER DEFAULT 0,
                selected_url TEXT,
                selected_score INTEGER,
                threshold INTEGER,
                status TEXT DEFAULT 'no_selection',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_engaged_author ON engaged_posts(author_key)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_engaged_at ON engaged_posts(engaged_at)')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_runs_created ON scan_runs(created_at)')

        conn.commit()
        conn.close()

        logger.info("Database initialized")

    def _get_connection(self, retries: int = 3) -> sqlite3.Connection:
        """Get database connection with timeout, WAL mode, and retry logic"""
        for attempt in range(retries):
            try:
                conn = sqlite3.connect(str(self.db_path), timeout=60.0)
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA busy_timeout=60000")
                return conn
            except sqlite3.OperationalError as e:
                if "locked" in str(e) and attempt < retries - 1:
                    logger.warning(f"Database locked, retrying in 2 seconds... (attempt {attempt + 1}/{retries})")
                    time.sleep(2)
                else:
                    raise
        raise sqlite3.OperationalError("Could not connect to database after retries")

    # =================== ENGAGEMENT LEDGER ===================

    def record_engagement(self, post_url: str, author_name: str = '', score: Optional[int] = None,
                          threshold: Optional[int] = None, body_preview: str = '',
                          action: str = 'comment') -> bool:
        """Record an engagement; False when the post was already recorded"""
        if not post_url:
            logger.warning("[WARN] Refusing to record an engagement without a post URL")
            return False

        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('''
                INSERT OR IGNORE INTO engaged_posts
                (post_url, author_name, author_key, score, threshold, action, body_preview)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (post_url, author_name, (author_name or '').strip().lower(), score, threshold,
                  action, (body_preview or '')[:300]))

            conn.commit()
            inserted = cursor.rowcount > 0
            if inserted:
                logger.info(f"[OK] Recorded {action} on post by {author_name or 'Unknown'}")
            else:
                logger.info(f"[SKIP] Post already recorded: {post_url}")
            return inserted

        except Exception as e:
            logger.error(f"[X] Error recording engagement: {e}")
            return False
        finally:
            conn.close()

    def is_engaged(self, post_url: str) -> bool:
        """Check if a post was already engaged"""
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('SELECT 1 FROM engaged_posts WHERE post_url = ?', (post_url,))
            result = cursor.fetchone() is not None
        finally:
            conn.close()

        return result

    def get_engaged_urls(self) -> Set[str]:
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('SELECT post_url FROM engaged_posts')
            return {row[0] for row in cursor.fetchall()}
        finally:
            conn.close()

    def get_recent_authors(self, days: int = 7) -> Set[str]:
        """Lowercased author names engaged within the cooldown window"""
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('''
                SELECT DISTINCT author_key FROM engaged_posts
                WHERE author_key != '' AND engaged_at >= datetime('now', ?)
            ''', (f'-{int(days)} days',))
            return {row[0] for row in cursor.fetchall() if row[0]}
        finally:
            conn.close()

    def count_engagements_today(self) -> int:
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) FROM engaged_posts WHERE date(engaged_at) = date('now')")
            return cursor.fetchone()[0]
        finally:
            conn.close()

    # =================== SCAN HISTORY ===================

    def record_scan_run(self, strategy: Optional[str], candidates_found: int, eligible_count: int = 0,
                        selected_url: Optional[str] = None, selected_score: Optional[int] = None,
                        threshold: Optional[int] = None) -> int:
        """Store the outcome of one selection run"""
        status = 'selected' if selected_url else 'no_selection'
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('''
                INSERT INTO scan_runs
                (strategy, candidates_found, eligible_count, selected_url, selected_score, threshold, status)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (strategy, candidates_found, eligible_count, selected_url, selected_score, threshold, status))

            conn.commit()
            run_id = cursor.lastrowid
            logger.debug(f"Recorded scan run #{run_id}: {status}")
            return run_id

        finally:
            conn.close()

    def get_scan_history(self, limit: int = 20) -> List[Dict]:
        """Get recent scan runs, newest first"""
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('''
                SELECT id, strategy, candidates_found, eligible_count, selected_url,
                       selected_score, threshold, status, created_at
                FROM scan_runs
                ORDER BY id DESC
                LIMIT ?
            ''', (limit,))

            history = []
            for row in cursor.fetchall():
                history.append({
                    'id': row[0],
                    'strategy': row[1],
                    'candidates': row[2],
                    'eligible': row[3],
                    'selected_url': row[4],
                    'score': row[5],
                    'threshold': row[6],
                    'status': row[7],
                    'created_at': row[8],
                })

            return history

        finally:
            conn.close()

    def get_stats(self) -> Dict:
        """Get ledger statistics"""
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('SELECT COUNT(*) FROM engaged_posts')
            engaged = cursor.fetchone()[0]

            cursor.execute('SELECT COUNT(DISTINCT author_key) FROM engaged_posts')
            authors = cursor.fetchone()[0]

            cursor.execute('SELECT AVG(score) FROM engaged_posts WHERE score IS NOT NULL')
            avg_score = cursor.fetchone()[0] or 0

            cursor.execute('SELECT COUNT(*) FROM scan_runs')
            runs = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM scan_runs WHERE status = 'selected'")
            selected_runs = cursor.fetchone()[0]

            hit_rate = (selected_runs / runs * 100) if runs > 0 else 0

            stats = {
                'engaged_posts': engaged,
                'unique_authors': authors,
                'avg_score': f"{avg_score:.1f}",
                'scan_runs': runs,
                'selected_runs': selected_runs,
                'hit_rate': f"{hit_rate:.1f}%",
            }

        finally:
            conn.close()

        stats['engaged_today'] = self.count_engagements_today()
        return stats

    # =================== MAINTENANCE ===================

    def cleanup_old_data(self, days: int = 90) -> int:
        """Delete scan runs older than the given number of days"""
        conn = self._get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute('''
                DELETE FROM scan_runs
                WHERE created_at < datetime('now', ?)
            ''', (f'-{int(days)} days',))

            deleted_count = cursor.rowcount
            conn.commit()

        finally:
            conn.close()

        return deleted_count

    def clear_all(self) -> Dict[str, int]:
        """Delete every ledger row; returns rows removed per table"""
        conn = self._get_connection()
        cursor = conn.cursor()
        removed = {}

        try:
            for table in LEDGER_TABLES:
                cursor.execute(f'DELETE FROM {table}')
                removed[table] = cursor.rowcount
            conn.commit()
        finally:
            conn.close()

        logger.info(f"[OK] Cleared ledger tables: {removed}")
        return removed

    def get_db_size(self) -> str:
        """Get database file size"""
        try:
            size_bytes = self.db_path.stat().st_size
            size_mb = size_bytes / (1024 * 1024)
            return f"{size_mb:.2f} MB"
        except OSError:
            return "Unknown"
