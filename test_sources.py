"""Source adapters against mocked HTTP, the failure boundary, and text/time normalization."""

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone

import httpx

from newsradar.config import SUPPLEMENTARY_FEEDS, Settings
from newsradar.sources import (
    FeedAdapter, GoogleNewsAdapter, RedditAdapter, StaticAdapter, YouTubeAdapter, build_adapters,
)
from newsradar.sources.normalize import (
    clean_description, clean_title, estimate_published, parse_relative_time,
)
from newsradar.sources.youtube import extract_initial_data

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def mock_transport(body, status=200, content_type="text/html", seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, text=body, headers={"Content-Type": content_type})
    return httpx.MockTransport(handler)


# ── Relative time and text normalization ─────────────────────────────────────

def test_parse_relative_time_units():
    assert parse_relative_time("3 hours ago", NOW) == NOW - timedelta(hours=3)
    assert parse_relative_time("2 mins ago", NOW) == NOW - timedelta(minutes=2)
    assert parse_relative_time("Streamed 1 week ago", NOW) == NOW - timedelta(days=7)
    assert parse_relative_time("an hour ago", NOW) == NOW - timedelta(hours=1)
    assert parse_relative_time("5 days ago", NOW) == NOW - timedelta(days=5)


def test_parse_relative_time_words():
    assert parse_relative_time("Just now", NOW) == NOW
    assert parse_relative_time("Yesterday", NOW) == NOW - timedelta(hours=24)


def test_parse_relative_time_without_signal():
    assert parse_relative_time("Premieres soon", NOW) is None
    assert parse_relative_time("", NOW) is None
    assert estimate_published("Premieres soon", NOW) == NOW
    assert estimate_published(None, NOW) == NOW


def test_clean_title_strips_known_publisher_suffix():
    assert clean_title("Big news - Times of India", "Times of India") == "Big news"
    assert clean_title("Big news - Part 2", "Times of India") == "Big news - Part 2"


def test_clean_title_guessed_suffix_only_when_asked():
    assert clean_title("Star responds - Hindustan Times", guess_suffix=True) == "Star responds"
    assert clean_title("Star responds - Hindustan Times") == "Star responds - Hindustan Times"
    long_tail = "Star responds - and the whole internet cannot stop talking"
    assert clean_title(long_tail, guess_suffix=True) == long_tail


def test_clean_title_normalizes_markup():
    assert clean_title("  *Big*   [update] &amp; `more`  ") == "Big (update) & 'more'"
    assert len(clean_title("x" * 500)) == 200


def test_clean_description():
    assert clean_description("<p>Hello&nbsp;<b>world</b></p>") == "Hello world"
    assert clean_description("a" * 400).endswith("...")
    assert clean_description(None) == ""


# ── Google News RSS ──────────────────────────────────────────────────────────

GOOGLE_NEWS_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
<title>"CarryMinati" when:1d - Google News</title>
<item>
  <title>CarryMinati roast video goes viral - Hindustan Times</title>
  <link>https://news.google.com/articles/abc</link>
  <pubDate>Mon, 19 Oct 2026 09:00:00 GMT</pubDate>
  <description>&lt;a href="x"&gt;CarryMinati roast video goes viral&lt;/a&gt;</description>
  <source url="https://www.hindustantimes.com">Hindustan Times</source>
</item>
<item>
  <title>CarryMinati responds to critics - NDTV</title>
  <link>https://news.google.com/articles/def</link>
  <source url="https://www.ndtv.com">NDTV</source>
</item>
</channel>
</rss>
"""


def test_google_news_adapter_parses_feed():
    seen = []
    adapter = GoogleNewsAdapter(
        transport=mock_transport(GOOGLE_NEWS_RSS, content_type="application/rss+xml", seen=seen),
        clock=lambda: NOW,
    )
    items = asyncio.run(adapter.fetch("CarryMinati"))

    assert [i.title for i in items] == ["CarryMinati roast video goes viral", "CarryMinati responds to critics"]
    assert items[0].source_label == "Google News - Hindustan Times"
    assert items[0].published_at == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    assert items[0].description == "CarryMinati roast video goes viral"
    assert items[0].matched_keyword == "CarryMinati"
    # no pubDate: stamped with the fetch time
    assert items[1].published_at == NOW

    params = seen[0].url.params
    assert params["q"] == '"CarryMinati" when:1d'
    assert params["hl"] == "en-IN"
    assert params["ceid"] == "IN:en"
    assert adapter.health.status == "healthy"


def test_google_news_respects_max_items():
    adapter = GoogleNewsAdapter(
        transport=mock_transport(GOOGLE_NEWS_RSS, content_type="application/rss+xml"),
        max_items=1,
    )
    assert len(asyncio.run(adapter.fetch("CarryMinati"))) == 1


def test_feed_adapter_labels_with_feed_name():
    rss = GOOGLE_NEWS_RSS.replace("Hindustan Times", "Times of India")
    adapter = FeedAdapter.from_config(
        SUPPLEMENTARY_FEEDS["toi_entertainment"],
        transport=mock_transport(rss, content_type="application/rss+xml"),
    )
    items = asyncio.run(adapter.fetch(""))

    assert adapter.name == "toi_entertainment"
    assert items[0].title == "CarryMinati roast video goes viral"
    assert items[0].source_label == "RSS - Times of India"
    assert items[1].title == "CarryMinati responds to critics - NDTV"


# ── YouTube ──────────────────────────────────────────────────────────────────

def youtube_page(videos):
    data = {
        "contents": {"twoColumnSearchResultsRenderer": {"primaryContents": {"sectionListRenderer": {
            "contents": [{"itemSectionRenderer": {"contents": [{"videoRenderer": v} for v in videos]}}],
        }}}},
    }
    return (
        "<html><head><title>YouTube</title></head><body>"
        "<script>var ytcfg = {};</script>"
        f"<script>var ytInitialData = {json.dumps(data)};</script>"
        "</body></html>"
    )


YOUTUBE_VIDEOS = [
    {
        "videoId": "abc123",
        "title": {"runs": [{"text": "CarryMinati roast goes viral"}]},
        "ownerText": {"runs": [{"text": "CarryMinati"}]},
        "publishedTimeText": {"simpleText": "3 hours ago"},
        "descriptionSnippet": {"runs": [{"text": "New "}, {"text": "roast"}]},
    },
    {
        "videoId": "def456",
        "title": {"simpleText": "Reaction video - Fan Channel"},
        "ownerText": {"runs": [{"text": "Fan Channel"}]},
        "detailedMetadataSnippets": [{"snippetText": {"runs": [{"text": "Fans react"}]}}],
    },
    {"title": {"simpleText": "No id, skipped"}},
]


def test_extract_initial_data():
    data = extract_initial_data(youtube_page(YOUTUBE_VIDEOS))
    assert "contents" in data
    assert extract_initial_data("<html><body>nothing</body></html>") is None


def test_youtube_adapter_parses_results():
    adapter = YouTubeAdapter(transport=mock_transport(youtube_page(YOUTUBE_VIDEOS)), clock=lambda: NOW)
    items = asyncio.run(adapter.fetch("CarryMinati"))

    assert len(items) == 2
    first, second = items
    assert first.url == "https://www.youtube.com/watch?v=abc123"
    assert first.source_label == "YouTube - CarryMinati"
    assert first.description == "New roast"
    assert first.published_at == NOW - timedelta(hours=3)
    assert second.title == "Reaction video"
    assert second.description == "Fans react"
    assert second.published_at == NOW


def test_youtube_page_without_data_is_a_failure():
    adapter = YouTubeAdapter(transport=mock_transport("<html><body>consent wall</body></html>"))
    assert asyncio.run(adapter.fetch("CarryMinati")) == []
    assert adapter.health.status == "failing"
    assert "ytInitialData" in adapter.health.last_error


# ── Reddit ───────────────────────────────────────────────────────────────────

def reddit_listing():
    created = (NOW - timedelta(hours=1)).timestamp()
    return json.dumps({"data": {"children": [
        {"data": {
            "title": "Drama in the creator scene - discussion",
            "selftext": "What do you think?",
            "created_utc": created,
            "subreddit": "IndianYouTubers",
            "permalink": "/r/IndianYouTubers/comments/x1/drama/",
            "over_18": False,
        }},
        {"data": {"title": "NSFW drama", "created_utc": created, "subreddit": "x", "over_18": True}},
        {"data": {"title": "", "created_utc": created}},
    ]}})


def test_reddit_adapter_parses_listing():
    seen = []
    adapter = RedditAdapter(
        transport=mock_transport(reddit_listing(), content_type="application/json", seen=seen),
    )
    items = asyncio.run(adapter.fetch("drama"))

    assert len(items) == 1
    item = items[0]
    assert item.title == "Drama in the creator scene - discussion"
    assert item.source_label == "Reddit - r/IndianYouTubers"
    assert item.url == "https://www.reddit.com/r/IndianYouTubers/comments/x1/drama/"
    assert item.published_at == NOW - timedelta(hours=1)
    assert seen[0].url.params["sort"] == "new"
    assert seen[0].url.params["t"] == "day"


# ── Failure boundary ─────────────────────────────────────────────────────────

def test_http_error_becomes_empty_list():
    adapter = RedditAdapter(transport=mock_transport("rate limited", status=429))
    items, error = asyncio.run(adapter.fetch_outcome("drama"))

    assert items == []
    assert "HTTPStatusError" in error
    assert adapter.health.consecutive_failures == 1


def test_timeout_becomes_empty_list():
    adapter = StaticAdapter({"x1": []}, delay=1.0, timeout=0.05)
    items, error = asyncio.run(adapter.fetch_outcome("x1"))

    assert items == []
    assert error.startswith("timeout")


def test_exception_becomes_empty_list_and_recovers():
    adapter = StaticAdapter({"x1": []}, fail_all=True)
    assert asyncio.run(adapter.fetch("x1")) == []
    assert adapter.health.status == "failing"

    adapter.fail_all = False
    assert asyncio.run(adapter.fetch("x1")) == []
    assert adapter.health.status == "healthy"
    assert adapter.health.consecutive_failures == 0
    assert adapter.health.total_failures == 1


def test_label_format():
    adapter = StaticAdapter(kind="Demo")
    assert adapter.label() == "Demo"
    assert adapter.label("Desk") == "Demo - Desk"


def test_build_adapters_from_settings():
    settings = Settings(SUPPLEMENTARY_FEEDS="toi_sports, nope", REDDIT_ENABLED=False)
    adapters = build_adapters(settings)

    assert isinstance(adapters.primary, GoogleNewsAdapter)
    assert isinstance(adapters.secondary, YouTubeAdapter)
    assert adapters.tertiary is None
    assert [f.name for f in adapters.feeds] == ["toi_sports"]


def test_reddit_malformed_timestamp_falls_back_to_clock():
    created = (NOW - timedelta(hours=2)).timestamp()
    body = json.dumps({"data": {"children": [
        {"data": {"title": "Good post", "created_utc": created, "subreddit": "a"}},
        {"data": {"title": "Odd post", "created_utc": "not-a-number", "subreddit": "a"}},
        {"data": {"title": "Missing time", "subreddit": "a"}},
    ]}})
    adapter = RedditAdapter(transport=mock_transport(body, content_type="application/json"), clock=lambda: NOW)
    items = asyncio.run(adapter.fetch("drama"))

    assert [i.title for i in items] == ["Good post", "Odd post", "Missing time"]
    assert items[0].published_at == NOW - timedelta(hours=2)
    assert items[1].published_at == NOW
    assert items[2].published_at == NOW
    assert adapter.health.status == "healthy"


def test_term_agnostic_fetch_logs_without_empty_term(caplog):
    adapter = StaticAdapter(fail_all=True, name="daily")
    with caplog.at_level(logging.WARNING, logger="newsradar.sources.base"):
        asyncio.run(adapter.fetch(""))

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("[FAIL] daily: full feed:") for m in messages)
    assert not any("''" in m for m in messages)
