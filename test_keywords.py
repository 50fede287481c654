"""Keyword set mutations."""

from newsradar.config import Settings
from newsradar.news.keywords import KeywordSet
from newsradar.schemas import KeywordCategory, MutationStatus


def test_add_and_exists():
    keywords = KeywordSet()
    assert keywords.add("CarryMinati", KeywordCategory.ENTITY).status == MutationStatus.ADDED
    assert keywords.add("CarryMinati").status == MutationStatus.EXISTS
    assert keywords.snapshot() == ["CarryMinati"]
    assert keywords.category_of("CarryMinati") == KeywordCategory.ENTITY


def test_keywords_are_case_sensitive():
    keywords = KeywordSet()
    keywords.add("drama")
    assert keywords.add("Drama").status == MutationStatus.ADDED
    assert len(keywords) == 2


def test_invalid_terms_rejected():
    keywords = KeywordSet()
    assert keywords.add("").status == MutationStatus.INVALID
    assert keywords.add("   ").status == MutationStatus.INVALID
    result = keywords.add("x")
    assert result.status == MutationStatus.INVALID
    assert "2 characters" in result.message
    assert len(keywords) == 0


def test_remove():
    keywords = KeywordSet()
    keywords.add("alpha")
    assert keywords.remove("alpha").status == MutationStatus.REMOVED
    assert keywords.remove("alpha").status == MutationStatus.NOT_FOUND
    assert "alpha" not in keywords


def test_snapshot_is_a_copy_in_insertion_order():
    keywords = KeywordSet()
    for term in ("gamma", "alpha", "beta"):
        keywords.add(term)
    snapshot = keywords.snapshot()
    keywords.remove("alpha")
    keywords.add("delta")
    assert snapshot == ["gamma", "alpha", "beta"]
    assert keywords.snapshot() == ["gamma", "beta", "delta"]


def test_add_many_reports_each_term():
    keywords = KeywordSet()
    keywords.add("beef")
    results = keywords.add_many("roast, beef, x ,diss")
    assert [r.status for r in results] == [
        MutationStatus.ADDED, MutationStatus.EXISTS, MutationStatus.INVALID, MutationStatus.ADDED,
    ]
    assert keywords.snapshot() == ["beef", "roast", "diss"]


def test_remove_many_and_empty_input():
    keywords = KeywordSet()
    keywords.add_many("one1, two2")
    results = keywords.remove_many("one1, nope")
    assert [r.status for r in results] == [MutationStatus.REMOVED, MutationStatus.NOT_FOUND]
    assert [r.status for r in keywords.remove_many("")] == [MutationStatus.INVALID]


def test_from_settings_seeds_categories():
    settings = Settings(TRACKED_ENTITIES="CarryMinati, Elvish", TRACKED_TOPICS="drama")
    keywords = KeywordSet.from_settings(settings)
    assert keywords.snapshot() == ["CarryMinati", "Elvish", "drama"]
    assert keywords.by_category(KeywordCategory.ENTITY) == ["CarryMinati", "Elvish"]
    assert keywords.by_category(KeywordCategory.TOPIC) == ["drama"]
