"""
Content Fetchers

Fetch raw metadata bytes from a content-addressed store.

PRINCIPLES:
===========
1. A fetch never raises: every failure degrades to "absent"
2. Every attempt is recorded as a FetchResult; only the most recent
   history_limit results are kept
3. The fetcher does not parse; bytes go back exactly as received
"""

from __future__ import annotations
from collections import deque
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional, Tuple
import logging

import httpx

from .contracts import FetchResult, FetchStatus

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 1000


class ContentFetcher:
    """
    Fetch capability consumed by the metadata resolver.

    Subclasses implement _fetch(); fetch() records the attempt.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._results: Deque[FetchResult] = deque(maxlen=history_limit)
        self._fetch_count = 0

    def fetch(self, cid: str) -> Optional[bytes]:
        """Return raw bytes for cid, or None when unavailable."""
        result, content = self._fetch(cid)
        self._results.append(result)
        self._fetch_count += 1
        if not result.is_success:
            logger.warning(
                "Metadata fetch for %s degraded: %s %s",
                cid, result.status.value, result.error_message or ""
            )
        return content

    def _fetch(self, cid: str) -> Tuple[FetchResult, Optional[bytes]]:
        raise NotImplementedError

    @property
    def results(self) -> List[FetchResult]:
        """Copy of the retained fetch attempts, oldest first."""
        return list(self._results)

    @property
    def history_limit(self) -> int:
        return self._results.maxlen

    @property
    def fetch_count(self) -> int:
        """Attempts made over the fetcher's lifetime, retained or not."""
        return self._fetch_count

    def failed_results(self) -> List[FetchResult]:
        return [r for r in self._results if not r.is_success]


class GatewayContentFetcher(ContentFetcher):
    """
    Fetches content through an IPFS HTTP gateway.

    GUARANTEES:
    ===========
    1. Timeout is always applied; a timeout is reported, never raised
    2. Non-200 responses return None with the status recorded
    3. Network errors return None
    """

    def __init__(
        self,
        gateway_url: str = "https://ipfs.io",
        timeout: float = 10.0,
        user_agent: str = "CollateralAgreementProjector/1.0",
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):
        super().__init__(history_limit)
        self._gateway_url = gateway_url.rstrip('/')
        self._timeout = timeout
        self._user_agent = user_agent

    def url_for(self, cid: str) -> str:
        return f"{self._gateway_url}/ipfs/{cid.lstrip('/')}"

    def _fetch(self, cid: str) -> Tuple[FetchResult, Optional[bytes]]:
        attempted_at = datetime.now(timezone.utc)

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.get(
                    self.url_for(cid),
                    headers={'User-Agent': self._user_agent},
                    follow_redirects=True
                )

            completed_at = datetime.now(timezone.utc)

            if response.status_code == 404:
                return FetchResult(
                    cid=cid,
                    status=FetchStatus.NOT_FOUND,
                    attempted_at=attempted_at,
                    completed_at=completed_at,
                    http_status=response.status_code,
                    error_message="HTTP 404"
                ), None

            if response.status_code != 200:
                return FetchResult(
                    cid=cid,
                    status=FetchStatus.HTTP_ERROR,
                    attempted_at=attempted_at,
                    completed_at=completed_at,
                    http_status=response.status_code,
                    error_message=f"HTTP {response.status_code}"
                ), None

            return FetchResult(
                cid=cid,
                status=FetchStatus.SUCCESS,
                attempted_at=attempted_at,
                completed_at=completed_at,
                byte_count=len(response.content),
                http_status=response.status_code
            ), response.content

        except httpx.TimeoutException:
            return self._failure(cid, attempted_at, FetchStatus.TIMEOUT,
                                 f"Timeout after {self._timeout}s"), None

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._failure(cid, attempted_at, FetchStatus.NETWORK_ERROR, str(e)), None

    def _failure(
        self,
        cid: str,
        attempted_at: datetime,
        status: FetchStatus,
        message: str
    ) -> FetchResult:
        return FetchResult(
            cid=cid,
            status=status,
            attempted_at=attempted_at,
            completed_at=datetime.now(timezone.utc),
            error_message=message
        )


class StaticContentFetcher(ContentFetcher):
    """Serves documents from an in-memory mapping. Used offline and in tests."""

    def __init__(
        self,
        documents: Optional[Dict[str, bytes]] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):
        super().__init__(history_limit)
        self._documents: Dict[str, bytes] = dict(documents or {})

    def add(self, cid: str, content: bytes) -> None:
        self._documents[cid] = content

    def _fetch(self, cid: str) -> Tuple[FetchResult, Optional[bytes]]:
        now = datetime.now(timezone.utc)
        content = self._documents.get(cid)
        if content is None:
            return FetchResult(
                cid=cid,
                status=FetchStatus.NOT_FOUND,
                attempted_at=now,
                completed_at=now,
                error_message="No such document"
            ), None
        return FetchResult(
            cid=cid,
            status=FetchStatus.SUCCESS,
            attempted_at=now,
            completed_at=now,
            byte_count=len(content)
        ), content
