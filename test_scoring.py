"""Scoring rules and recency boundary."""

from datetime import datetime, timedelta, timezone

from newsradar.news.scoring import (
    DESCRIPTION_MATCH_POINTS, LEXICON_POINTS, RECENCY_POINTS, TITLE_MATCH_POINTS,
    is_recent, lexicon_hits, score_item,
)
from newsradar.schemas import CandidateItem

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_item(title, description="", hours_old=1.0):
    return CandidateItem(
        title=title,
        description=description,
        published_at=NOW - timedelta(hours=hours_old),
        source_label="Test",
    )


def test_title_match_and_recency():
    item = make_item("CarryMinati uploads a new video")
    assert score_item(item, "CarryMinati", NOW) == TITLE_MATCH_POINTS + RECENCY_POINTS


def test_keyword_match_is_case_insensitive():
    item = make_item("carryminati uploads", "CARRYMINATI again")
    assert score_item(item, "CarryMinati", NOW) == (
        TITLE_MATCH_POINTS + DESCRIPTION_MATCH_POINTS + RECENCY_POINTS
    )


def test_lexicon_terms_counted_once_each():
    # "drama" appears three times, "viral" once, and "drama" is also the keyword
    item = make_item("Drama drama everywhere", "the drama went viral")
    expected = TITLE_MATCH_POINTS + DESCRIPTION_MATCH_POINTS + 2 * LEXICON_POINTS + RECENCY_POINTS
    assert score_item(item, "drama", NOW) == expected


def test_scenario_title_with_lexicon_term():
    item = make_item("Alpha scandal erupts", hours_old=2)
    assert score_item(item, "Alpha", NOW) == 10 + 3 + 15


def test_stale_item_gets_no_recency_points():
    item = make_item("Alpha news", hours_old=30)
    assert score_item(item, "Alpha", NOW) == TITLE_MATCH_POINTS


def test_score_is_deterministic():
    item = make_item("Alpha leaked secret", "exposed")
    assert score_item(item, "Alpha", NOW) == score_item(item, "Alpha", NOW)


def test_empty_keyword_scores_only_lexicon_and_recency():
    item = make_item("Breaking story")
    assert score_item(item, "", NOW) == LEXICON_POINTS + RECENCY_POINTS


def test_recency_boundary_is_inclusive():
    assert is_recent(make_item("edge", hours_old=24), NOW)
    past_edge = CandidateItem(
        title="past edge",
        published_at=NOW - timedelta(hours=24, seconds=1),
        source_label="Test",
    )
    assert not is_recent(past_edge, NOW)


def test_future_items_are_recent():
    assert is_recent(make_item("scheduled", hours_old=-1), NOW)


def test_lexicon_hits_in_lexicon_order():
    assert lexicon_hits("A roast turned into a fight, then drama") == ["drama", "fight", "roast"]
