"""
Metadata Layer

RESPONSIBILITY: Fetch and parse off-chain agreement metadata
ALLOWED INPUTS: Metadata URIs from AgreementCreated events
OUTPUTS: ParsedMetadata, or None when unavailable

WHAT THIS LAYER MUST NOT DO:
============================
- Write to the entity store
- Raise on unreachable, slow or malformed documents
"""

from typing import Optional

from .contracts import FetchStatus, FetchResult, ResolverEntry, ParsedMetadata
from .fetcher import ContentFetcher, GatewayContentFetcher, StaticContentFetcher
from .resolver import MetadataConfig, MetadataResolver, parse_metadata, strip_scheme


def create_resolver(config: Optional[MetadataConfig] = None) -> Optional[MetadataResolver]:
    """Gateway-backed resolver, or None when enrichment is disabled."""
    config = config or MetadataConfig()
    if not config.enabled:
        return None
    fetcher = GatewayContentFetcher(
        gateway_url=config.gateway_url,
        timeout=config.timeout_seconds,
        user_agent=config.user_agent,
        history_limit=config.fetch_history_limit
    )
    return MetadataResolver(fetcher, max_document_bytes=config.max_document_bytes)


__all__ = [
    'FetchStatus',
    'FetchResult',
    'ResolverEntry',
    'ParsedMetadata',
    'ContentFetcher',
    'GatewayContentFetcher',
    'StaticContentFetcher',
    'MetadataConfig',
    'MetadataResolver',
    'parse_metadata',
    'strip_scheme',
    'create_resolver',
]
