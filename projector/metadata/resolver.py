"""
Metadata Resolver
=================

Turns an agreement's metadataURI into ParsedMetadata.

GUARANTEES:
- resolve() never raises for data problems; it returns None
- Unknown keys are ignored, known keys are type-checked one by one
- Resolver entries keep the document's key order
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import json
import logging

from ..contracts.base import is_address, parse_uint
from .contracts import ParsedMetadata, ResolverEntry
from .fetcher import ContentFetcher, DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)

IPFS_SCHEME = "ipfs://"

# Agreement metadata is a title and a handful of resolver entries
DEFAULT_MAX_DOCUMENT_BYTES = 256 * 1024


@dataclass
class MetadataConfig:
    """Configuration for metadata enrichment."""
    enabled: bool = True
    gateway_url: str = "https://ipfs.io"
    timeout_seconds: float = 10.0
    user_agent: str = "CollateralAgreementProjector/1.0"
    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES
    fetch_history_limit: int = DEFAULT_HISTORY_LIMIT


def strip_scheme(uri: str) -> str:
    """Drop the ipfs:// prefix; other URIs pass through as bare content ids."""
    if uri.startswith(IPFS_SCHEME):
        return uri[len(IPFS_SCHEME):]
    return uri


def parse_metadata(document: object) -> ParsedMetadata:
    """
    Parse a decoded JSON document into ParsedMetadata.

    Recognized keys: "title" (string) and "resolvers" (object mapping a
    party address to an object with an optional "balance"). Anything
    else is ignored. Wrong types collapse to the field default and are
    noted in ParsedMetadata.issues.
    """
    issues: List[str] = []

    if not isinstance(document, dict):
        return ParsedMetadata(issues=("document is not an object",))

    title = document.get("title")
    if title is not None and not isinstance(title, str):
        issues.append("title is not a string")
        title = None

    entries: List[ResolverEntry] = []
    resolvers = document.get("resolvers")
    if resolvers is not None and not isinstance(resolvers, dict):
        issues.append("resolvers is not an object")
        resolvers = None

    for key, value in (resolvers or {}).items():
        if not is_address(key):
            issues.append(f"resolver key {key!r} is not an address")
            continue

        balance = None
        if isinstance(value, dict):
            raw = value.get("balance")
            if raw is not None:
                balance = parse_uint(raw)
                if balance is None:
                    issues.append(f"balance for {key} is not an unsigned integer")
        else:
            issues.append(f"resolver {key} is not an object")

        entries.append(ResolverEntry(party=key.strip().lower(), balance=balance))

    return ParsedMetadata(title=title, resolvers=tuple(entries), issues=tuple(issues))


class MetadataResolver:
    """
    Resolves metadata URIs through a ContentFetcher.

    Only the ipfs:// scheme is supported; the prefix is stripped and the
    remainder is treated as the content id. Documents larger than
    max_document_bytes, or nested too deeply to decode, are absent.
    """

    def __init__(self, fetcher: ContentFetcher, max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES):
        self._fetcher = fetcher
        self._max_document_bytes = max_document_bytes

    def resolve(self, uri: str) -> Optional[ParsedMetadata]:
        cid = strip_scheme(uri or "")
        if not cid:
            return None

        content = self._fetcher.fetch(cid)
        if content is None:
            return None

        if len(content) > self._max_document_bytes:
            logger.warning(
                "Metadata %s is %d bytes, over the %d byte limit",
                cid, len(content), self._max_document_bytes
            )
            return None

        try:
            document = json.loads(content)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            logger.warning("Metadata %s is not valid JSON: %s", cid, e)
            return None

        parsed = parse_metadata(document)
        if parsed.has_issues:
            logger.info("Metadata %s parsed with defaults: %s", cid, "; ".join(parsed.issues))
        return parsed

    @property
    def fetcher(self) -> ContentFetcher:
        return self._fetcher
