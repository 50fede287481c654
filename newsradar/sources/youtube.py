"""
YouTube search adapter (secondary source).

There is no keyless API, so the search results page is fetched and the
embedded ytInitialData JSON is decoded. Upload times are only exposed as
relative text ("3 hours ago"), which is converted into an estimated
publish time; items without any time text are stamped with the fetch time.
"""

import json
import logging
import re
from typing import Any, Dict, Iterator, List, Optional

from bs4 import BeautifulSoup

from ..schemas import CandidateItem
from .base import SourceAdapter
from .normalize import clean_description, clean_title, estimate_published

logger = logging.getLogger(__name__)

YOUTUBE_SEARCH_URL = "https://www.youtube.com/results"
# Search filter: upload date = today
_UPLOADED_TODAY = "EgIIAg=="

_INITIAL_DATA_RE = re.compile(r"ytInitialData\s*=\s*(\{.*\})\s*;?\s*$", re.DOTALL)


def extract_initial_data(page: str) -> Optional[Dict[str, Any]]:
    """Locate and decode the ytInitialData blob from a results page."""
    soup = BeautifulSoup(page, "lxml")
    for script in soup.find_all("script"):
        text = script.string or script.get_text() or ""
        if "ytInitialData" not in text:
            continue
        match = _INITIAL_DATA_RE.search(text.strip())
        if not match:
            continue
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as e:
            logger.debug(f"ytInitialData decode failed: {e}")
    return None


def iter_video_renderers(node: Any) -> Iterator[Dict[str, Any]]:
    """Depth-first walk yielding every videoRenderer dict in document order."""
    if isinstance(node, dict):
        renderer = node.get("videoRenderer")
        if isinstance(renderer, dict):
            yield renderer
        for value in node.values():
            if value is not renderer:
                yield from iter_video_renderers(value)
    elif isinstance(node, list):
        for value in node:
            yield from iter_video_renderers(value)


def _runs_text(block: Optional[Dict]) -> str:
    if not block:
        return ""
    if "simpleText" in block:
        return block["simpleText"] or ""
    return "".join(run.get("text", "") for run in block.get("runs", []))


class YouTubeAdapter(SourceAdapter):
    name = "youtube"
    kind = "YouTube"
    default_timeout = 15.0

    async def _fetch(self, term: str) -> List[CandidateItem]:
        params = {"search_query": term, "sp": _UPLOADED_TODAY}
        headers = {"Accept-Language": "en-US,en;q=0.9"}
        async with self._client(headers=headers) as client:
            response = await client.get(YOUTUBE_SEARCH_URL, params=params)
            response.raise_for_status()

        data = extract_initial_data(response.text)
        if data is None:
            raise ValueError("ytInitialData not found in results page")

        now = self._clock()
        items: List[CandidateItem] = []
        for video in iter_video_renderers(data):
            video_id = video.get("videoId")
            channel = _runs_text(video.get("ownerText"))
            title = clean_title(_runs_text(video.get("title")), channel or None)
            if not video_id or not title:
                continue

            snippet = _runs_text(video.get("descriptionSnippet"))
            if not snippet:
                for meta in video.get("detailedMetadataSnippets") or []:
                    snippet = _runs_text(meta.get("snippetText"))
                    if snippet:
                        break

            items.append(CandidateItem(
                title=title,
                description=clean_description(snippet),
                url=f"https://www.youtube.com/watch?v={video_id}",
                published_at=estimate_published(_runs_text(video.get("publishedTimeText")), now),
                source_label=self.label(channel),
                matched_keyword=term,
            ))
            if len(items) >= self.max_items:
                break
        return items
