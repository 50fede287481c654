"""Title-prefix deduplication."""

from datetime import datetime, timezone

from newsradar.news.dedup import TitleDeduplicator, dedup_key, dedupe
from newsradar.schemas import CandidateItem

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_item(title, source="Test"):
    return CandidateItem(title=title, published_at=NOW, source_label=source)


def test_key_ignores_case_and_punctuation():
    assert dedup_key("Foo Bar!!") == dedup_key("foo bar")


def test_key_keeps_first_fifty_characters():
    title = "x" * 80
    assert dedup_key(title) == "x" * 50
    assert dedup_key("A" * 50 + " one") == dedup_key("a" * 50 + " two")


def test_key_is_stable():
    assert dedup_key("Alpha: the story") == dedup_key("Alpha: the story")


def test_first_occurrence_wins():
    first = make_item("Alpha scandal erupts", "Google News - X")
    second = make_item("alpha scandal erupts!", "YouTube - Y")
    third = make_item("Something else")
    assert dedupe([first, second, third]) == [first, third]


def test_dedupe_is_idempotent():
    items = [make_item("A b c"), make_item("a, b, c"), make_item("d")]
    once = dedupe(items)
    assert dedupe(once) == once


def test_deduplicator_handles_empty_input():
    assert TitleDeduplicator().deduplicate([]) == []


def test_deduplicator_preserves_order():
    items = [make_item("one"), make_item("two"), make_item("ONE"), make_item("three")]
    result = TitleDeduplicator().deduplicate(items)
    assert [i.title for i in result] == ["one", "two", "three"]
