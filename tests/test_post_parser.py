from scraper.models import PostFormat, UNKNOWN_AUTHOR
from scraper.post_parser import (
    detect_format,
    is_chrome_line,
    parse_count,
    parse_post_block,
    scan_age_label,
    scan_comments,
    scan_engagement,
    split_social_footer,
)


def test_name_and_headline_from_first_lines(post_body):
    parsed = parse_post_block(["Jane Doe", "Founder at Acme", post_body])
    assert parsed.author_name == "Jane Doe"
    assert parsed.author_headline == "Founder at Acme"
    assert parsed.body_text == post_body
    assert parsed.is_connection is False


def test_long_second_line_is_body_not_headline(post_body):
    parsed = parse_post_block(["Jane Doe", post_body])
    assert parsed.author_name == "Jane Doe"
    assert parsed.author_headline == ""
    assert parsed.body_text == post_body


def test_long_line_after_name_starts_body_before_short_closing_line(post_body):
    parsed = parse_post_block(["Jane Doe", post_body, "Thoughts welcome."])
    assert parsed.author_name == "Jane Doe"
    assert parsed.author_headline == ""
    assert parsed.body_text == post_body + " Thoughts welcome."


def test_wordy_line_after_name_is_body():
    wordy = "We tried it and it simply did not work at all for our small team"
    parsed = parse_post_block(["Jane Doe", "2h \u2022", wordy, "Short close."])
    assert parsed.author_headline == ""
    assert parsed.body_text == wordy + " Short close."


def test_no_recognizable_name_keeps_every_line():
    long_line = "x" * 90
    lines = [long_line, "Like", long_line + " tail"]
    parsed = parse_post_block(lines)
    assert parsed.author_name == UNKNOWN_AUTHOR
    assert parsed.author_headline == ""
    assert parsed.body_text == " ".join(lines)


def test_empty_input_does_not_raise():
    parsed = parse_post_block([])
    assert parsed.author_name == UNKNOWN_AUTHOR
    assert parsed.body_text == ""


def test_chrome_lines_are_skipped(card_lines):
    content, _ = split_social_footer(card_lines)
    parsed = parse_post_block(content)
    assert parsed.author_name == "Jane Doe"
    assert parsed.author_headline.startswith("Founder at Acme")
    assert parsed.body_text.startswith("We shipped")
    assert parsed.is_connection is True


def test_chrome_line_detection():
    for line in ["Like", "+ Follow", "1,234", "12K", "• 2nd", "2h •", "Promoted", "and 40 others", "14 comments"]:
        assert is_chrome_line(line), line
    assert not is_chrome_line("Jane Doe")
    assert not is_chrome_line("Founder at Acme")


def test_split_social_footer(card_lines):
    content, footer = split_social_footer(card_lines)
    assert content[-1].startswith("We shipped")
    assert footer[0] == "127 reactions"


def test_parse_count():
    assert parse_count("1,234") == 1234
    assert parse_count("1.2K") == 1200
    assert parse_count("3M") == 3000000
    assert parse_count("n/a") == 0


def test_scan_engagement_counts(card_lines):
    _, footer = split_social_footer(card_lines)
    engagement = scan_engagement(footer)
    assert engagement.reaction_count == 127
    assert engagement.comment_count == 14


def test_scan_engagement_others_counts_named_reactor():
    engagement = scan_engagement(["Sam Lee and 127 others", "9 comments"])
    assert engagement.reaction_count == 128
    assert engagement.comment_count == 9


def test_scan_engagement_defaults_to_zero():
    engagement = scan_engagement(["Like", "Comment"])
    assert engagement.reaction_count == 0
    assert engagement.comment_count == 0


def test_scan_age_label(card_lines):
    assert scan_age_label(card_lines) == "2h •"
    assert scan_age_label(["Jane Doe", "hello"]) == ""


def test_scan_comments_samples_and_author_reply(card_lines):
    _, footer = split_social_footer(card_lines)
    samples, replied = scan_comments(footer, "Jane Doe")
    assert samples == ("Great insight, thanks!", "Thanks John, glad it helped.")
    assert replied is True


def test_scan_comments_without_action_bar():
    assert scan_comments(["127 reactions"], "Jane Doe") == ((), False)


def test_detect_format():
    assert detect_format(["What stack?", "1,204 votes", "Show results"]) == PostFormat.POLL
    assert detect_format(["Some text"], videos=1) == PostFormat.VIDEO
    assert detect_format(["Some text", "1 / 8"]) == PostFormat.CAROUSEL
    assert detect_format(["Some text"], large_images=2) == PostFormat.IMAGE
    assert detect_format(["Some text"]) == PostFormat.TEXT
