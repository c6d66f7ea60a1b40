from scraper.deduplicator import dedup


def test_dedup_by_locator_and_text_prefix(make_candidate, post_body):
    a = make_candidate()
    same_locator = make_candidate(body_text="Different opening line for the same post. " + post_body)
    same_text = make_candidate(source_locator="https://www.linkedin.com/feed/update/urn:li:activity:2/")
    other = make_candidate(
        source_locator="https://www.linkedin.com/feed/update/urn:li:activity:3/",
        body_text="Another post entirely. " + post_body,
    )

    assert dedup([a, same_locator, same_text, other]) == [a, other]


def test_locatorless_candidates_dedup_on_text_only(make_candidate, post_body):
    a = make_candidate(source_locator=None)
    b = make_candidate(source_locator=None, body_text="A second chunk of feed text. " + post_body)
    c = make_candidate(source_locator=None)

    assert dedup([a, b, c]) == [a, b]


def test_dedup_is_idempotent_and_order_preserving(make_candidate, post_body):
    items = [
        make_candidate(source_locator=f"https://www.linkedin.com/feed/update/urn:li:activity:{i}/",
                       body_text=f"Post number {i}. " + post_body)
        for i in range(5)
    ]
    once = dedup(items + items[:2])
    assert once == items
    assert dedup(once) == once


def test_dedup_empty():
    assert dedup([]) == []
