import sqlite3

import pytest

from database.db_manager import DatabaseManager

URL_1 = "https://www.linkedin.com/feed/update/urn:li:activity:1/"
URL_2 = "https://www.linkedin.com/feed/update/urn:li:activity:2/"


@pytest.fixture
def db(tmp_path):
    return DatabaseManager(str(tmp_path / "data" / "ledger.db"))


def _age_rows(db, table, column, days):
    conn = sqlite3.connect(str(db.db_path))
    try:
        conn.execute(f"UPDATE {table} SET {column} = datetime('now', ?)", (f"-{days} days",))
        conn.commit()
    finally:
        conn.close()


def test_record_and_query_engagements(db):
    assert db.record_engagement(URL_1, "Jane Doe", score=72, threshold=70, body_preview="hello")
    assert db.is_engaged(URL_1)
    assert not db.is_engaged(URL_2)
    assert db.get_engaged_urls() == {URL_1}
    assert db.get_recent_authors(7) == {"jane doe"}
    assert db.count_engagements_today() == 1


def test_duplicate_engagement_is_ignored(db):
    assert db.record_engagement(URL_1, "Jane Doe")
    assert db.record_engagement(URL_1, "Jane Doe") is False
    assert db.get_stats()["engaged_posts"] == 1


def test_engagement_without_url_is_rejected(db):
    assert db.record_engagement("", "Jane Doe") is False
    assert db.get_engaged_urls() == set()


def test_author_cooldown_window(db):
    db.record_engagement(URL_1, "Jane Doe")
    _age_rows(db, "engaged_posts", "engaged_at", 10)
    assert db.get_recent_authors(7) == set()
    assert db.get_recent_authors(14) == {"jane doe"}
    assert db.count_engagements_today() == 0
    # Old engagements still block the same post forever
    assert db.is_engaged(URL_1)


def test_scan_history_newest_first(db):
    db.record_scan_run("anchor_walk", 12, 8, selected_url=URL_1, selected_score=74, threshold=70)
    db.record_scan_run("document_text", 5, 0)

    history = db.get_scan_history()
    assert [h["strategy"] for h in history] == ["document_text", "anchor_walk"]
    assert history[0]["status"] == "no_selection"
    assert history[1]["status"] == "selected"
    assert history[1]["score"] == 74


def test_stats(db):
    db.record_engagement(URL_1, "Jane Doe", score=70)
    db.record_engagement(URL_2, "Sam Lee", score=80)
    db.record_scan_run("anchor_walk", 10, 4, selected_url=URL_1, selected_score=70, threshold=70)
    db.record_scan_run("anchor_walk", 10, 0)

    stats = db.get_stats()
    assert stats["engaged_posts"] == 2
    assert stats["unique_authors"] == 2
    assert stats["avg_score"] == "75.0"
    assert stats["scan_runs"] == 2
    assert stats["selected_runs"] == 1
    assert stats["hit_rate"] == "50.0%"
    assert stats["engaged_today"] == 2


def test_cleanup_old_scan_runs(db):
    db.record_scan_run("anchor_walk", 3, 1)
    _age_rows(db, "scan_runs", "created_at", 120)
    db.record_scan_run("anchor_walk", 4, 2)

    assert db.cleanup_old_data(90) == 1
    assert len(db.get_scan_history()) == 1


def test_clear_all(db):
    db.record_engagement(URL_1, "Jane Doe")
    db.record_scan_run("anchor_walk", 3, 1)

    assert db.clear_all() == {"engaged_posts": 1, "scan_runs": 1}
    assert db.get_engaged_urls() == set()
    assert db.get_scan_history() == []
    assert db.get_db_size().endswith("MB")


def test_clear_database_script(db):
    from clear_database import clear_all_tables

    db.record_engagement(URL_1, "Jane Doe")
    assert clear_all_tables(db.db_path, confirm="no") is False
    assert db.get_engaged_urls() == {URL_1}

    assert clear_all_tables(db.db_path, confirm="yes") is True
    assert db.get_engaged_urls() == set()


def test_clear_database_script_missing_file(tmp_path):
    from clear_database import clear_all_tables

    assert clear_all_tables(tmp_path / "nope.db", confirm="yes") is False
