"""
In-process adapter serving canned items.

Used by the test-suite and by `--demo` runs. It goes through the same
fetch() boundary as the network adapters, so delays longer than the timeout
and injected failures are converted to [] exactly like real ones.
"""

import asyncio
from datetime import timedelta
from typing import Dict, Iterable, List, Optional

from ..schemas import CandidateItem, utcnow
from .base import SourceAdapter


class StaticAdapter(SourceAdapter):
    """
    Returns preset items per term (exact term match).

    Usage:
        adapter = StaticAdapter({"Alpha": [item1, item2]}, name="fixture")
        await adapter.fetch("Alpha")   # [item1, item2] with matched_keyword="Alpha"
    """

    default_timeout = 5.0

    def __init__(
        self,
        items_by_term: Optional[Dict[str, Iterable[CandidateItem]]] = None,
        name: str = "static",
        kind: str = "Static",
        delay: float = 0.0,
        fail_terms: Iterable[str] = (),
        fail_all: bool = False,
        **kwargs,
    ):
        self.name = name
        self.kind = kind
        self.items_by_term = {k: list(v) for k, v in (items_by_term or {}).items()}
        self.delay = delay
        self.fail_terms = set(fail_terms)
        self.fail_all = fail_all
        self.calls: List[str] = []
        super().__init__(**kwargs)

    async def _fetch(self, term: str) -> List[CandidateItem]:
        self.calls.append(term)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_all or term in self.fail_terms:
            raise ConnectionError(f"{self.name} unavailable")
        return [
            item if item.matched_keyword else item.model_copy(update={"matched_keyword": term})
            for item in self.items_by_term.get(term, [])
        ]


def demo_adapter(now_factory=None) -> StaticAdapter:
    """Sample data for offline demo runs."""
    now = (now_factory or utcnow)()

    def _item(title, hours, source, description=""):
        return CandidateItem(
            title=title,
            description=description,
            url="https://example.com/" + title.lower().replace(" ", "-")[:40],
            published_at=now - timedelta(hours=hours),
            source_label=source,
        )

    return StaticAdapter(
        {
            "CarryMinati": [
                _item("CarryMinati roast video goes viral overnight", 2, "Demo - Tubefilter"),
                _item("CarryMinati announces new channel", 30, "Demo - Tubefilter"),
            ],
            "drama": [
                _item("Reality show drama exposed by former contestant", 5, "Demo - Gossip Daily",
                      "The drama behind the scenes was leaked on social media."),
            ],
            "controversy": [
                _item("Cricket board controversy deepens", 1, "Demo - Sports Desk"),
            ],
        },
        name="demo",
        kind="Demo",
    )
