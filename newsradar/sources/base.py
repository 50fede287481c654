"""
Source adapter contract.

Every external source is wrapped in a SourceAdapter. Subclasses implement
_fetch(term) and are free to raise; the public fetch(term) is the failure
boundary: it enforces the per-adapter timeout and converts any error into an
empty list plus a log line and a health-record update. Callers rely on
fetch() never raising.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

import httpx

from ..config import USER_AGENT
from ..schemas import CandidateItem, utcnow

logger = logging.getLogger(__name__)


@dataclass
class SourceHealth:
    """Per-adapter success/failure history (in-memory, process lifetime)."""
    source_name: str
    status: str = "unknown"              # unknown | healthy | failing
    calls: int = 0
    items_fetched: int = 0
    consecutive_failures: int = 0
    total_failures: int = 0
    last_success: Optional[str] = None   # ISO UTC
    last_failure: Optional[str] = None   # ISO UTC
    last_error: Optional[str] = None

    def record_success(self, count: int) -> None:
        self.calls += 1
        self.items_fetched += count
        self.consecutive_failures = 0
        self.status = "healthy"
        self.last_success = utcnow().isoformat()

    def record_failure(self, error: str) -> None:
        self.calls += 1
        self.consecutive_failures += 1
        self.total_failures += 1
        self.status = "failing"
        self.last_failure = utcnow().isoformat()
        self.last_error = error[:300]

    def status_report(self) -> Dict:
        return asdict(self)


class SourceAdapter(ABC):
    """
    Uniform fetcher for one external content source.

    Usage:
        adapter = GoogleNewsAdapter(timeout=10.0)
        items = await adapter.fetch("CarryMinati")   # [] on any failure
    """

    name: str = "base"
    kind: str = "Source"
    default_timeout: float = 10.0

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_items: int = 20,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.timeout = timeout if timeout is not None else self.default_timeout
        self.max_items = max_items
        self._transport = transport
        self._clock = clock
        self.health = SourceHealth(source_name=self.name)

    async def fetch(self, term: str) -> List[CandidateItem]:
        """Fetch candidates for a term. Never raises; failures become []."""
        items, _ = await self.fetch_outcome(term)
        return items

    async def fetch_outcome(self, term: str) -> Tuple[List[CandidateItem], Optional[str]]:
        """Like fetch(), plus the error message (None on success)."""
        subject = f"'{term}'" if term else "full feed"
        try:
            items = await asyncio.wait_for(self._fetch(term), timeout=self.timeout)
        except asyncio.TimeoutError:
            error = f"timeout after {self.timeout}s"
            logger.warning(f"[TIMEOUT] {self.name}: {subject} exceeded {self.timeout:.0f}s, skipping")
            self.health.record_failure(error)
            return [], error
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            logger.warning(f"[FAIL] {self.name}: {subject}: {error}")
            self.health.record_failure(error)
            return [], error

        items = list(items or [])
        self.health.record_success(len(items))
        logger.debug(f"[OK] {self.name}: {len(items)} items for {subject}")
        return items, None

    @abstractmethod
    async def _fetch(self, term: str) -> List[CandidateItem]:
        """Source-specific fetch + parse. May raise."""

    def label(self, sub_source: Optional[str] = None) -> str:
        """Provenance string: "<Kind>" or "<Kind> - <SubSource>"."""
        sub = (sub_source or "").strip()
        return f"{self.kind} - {sub}" if sub else self.kind

    def _client(self, **kwargs) -> httpx.AsyncClient:
        headers = {"User-Agent": USER_AGENT, **kwargs.pop("headers", {})}
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers=headers,
            follow_redirects=True,
            transport=self._transport,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} timeout={self.timeout}>"
