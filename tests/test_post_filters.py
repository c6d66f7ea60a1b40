import pytest

from scoring.post_filters import (
    AUTHOR_WINDOW,
    GRIEF_WINDOW,
    JOB_POST_WINDOW,
    is_grief_post,
    is_job_post,
    should_exclude,
)


def test_clean_post_is_not_excluded(make_candidate):
    result = should_exclude(make_candidate())
    assert result.excluded is False
    assert result.reason == ""
    assert result.rule is None


@pytest.mark.parametrize("overrides,rule", [
    ({"author_headline": "Backend Engineer | Open to work"}, "open_to_work"),
    ({"author_name": "Ali Khan #OpenToWork"}, "open_to_work"),
    ({"author_headline": "CS Student at State University"}, "student"),
    ({"body_text": "We're hiring a senior backend engineer to join our platform team. " * 3}, "job_post"),
    ({"body_text": "My father passed away last month and I have been thinking about time. " * 3}, "grief"),
])
def test_exclusion_rules(make_candidate, overrides, rule):
    result = should_exclude(make_candidate(**overrides))
    assert result.excluded is True
    assert result.rule == rule
    assert result.reason


def test_rules_apply_in_priority_order(make_candidate):
    candidate = make_candidate(
        author_headline="Student | Open to work",
        body_text="We are hiring interns. Apply now. " * 5,
    )
    assert should_exclude(candidate).rule == "open_to_work"


def test_author_window_limits_body_scan(make_candidate, post_body):
    padding = "a" * AUTHOR_WINDOW
    late = make_candidate(body_text=padding + " open to work " + post_body)
    assert should_exclude(late).excluded is False


def test_job_post_window(make_candidate):
    inside = make_candidate(body_text="x" * (JOB_POST_WINDOW - 20) + " #hiring now")
    outside = make_candidate(body_text="x" * JOB_POST_WINDOW + " #hiring now")
    assert is_job_post(inside)
    assert not is_job_post(outside)


def test_grief_window(make_candidate):
    inside = make_candidate(body_text="y" * (GRIEF_WINDOW - 30) + " rest in peace")
    outside = make_candidate(body_text="y" * GRIEF_WINDOW + " rest in peace")
    assert is_grief_post(inside)
    assert not is_grief_post(outside)
