"""
Database Cleaner Script
Clears the engagement ledger and scan history (posts engaged, runs recorded)
"""

import os
import sqlite3
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DB_PATH = Path(os.getenv("DATABASE_PATH", "data/feed_scout.db"))
LEDGER_TABLES = ("engaged_posts", "scan_runs")


def clear_all_tables(db_path: Path = DB_PATH, confirm: str = None) -> bool:
    """Clear all ledger rows after a 'yes' confirmation"""
    if not db_path.exists():
        print("[ERROR] Database not found!")
        return False

    conn = sqlite3.connect(str(db_path))
    cursor = conn.cursor()

    try:
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = [row[0] for row in cursor.fetchall() if row[0] in LEDGER_TABLES]

        print(f"\n{'='*50}")
        print("LEDGER CLEANER")
        print(f"{'='*50}")
        print(f"\nFound {len(tables)} ledger tables: {', '.join(tables)}")

        print("\nCurrent data:")
        for table in tables:
            cursor.execute(f"SELECT COUNT(*) FROM {table}")
            count = cursor.fetchone()[0]
            print(f"  - {table}: {count} rows")

        print("\n" + "="*50)
        if confirm is None:
            confirm = input("Delete ALL engagement history? (yes/no): ")

        if confirm.strip().lower() != 'yes':
            print("\n[CANCELLED] No data was deleted.")
            return False

        for table in tables:
            cursor.execute(f"DELETE FROM {table}")
            print(f"  [OK] Cleared {table}")
        conn.commit()
        print("\n[SUCCESS] Ledger cleared!")

        cursor.execute("VACUUM")
        print("[OK] Database vacuumed (space reclaimed)")
        return True
    finally:
        conn.close()


if __name__ == "__main__":
    clear_all_tables()
