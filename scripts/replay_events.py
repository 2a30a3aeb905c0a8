"""
Journal Replay
==============

Replays a JSONL event journal into a fresh entity store and prints the
resulting per-kind entity counts.

USAGE:
    python scripts/replay_events.py JOURNAL [--db PATH] [--no-metadata] [--gateway URL]
"""
import argparse
import os
import sys

# Ensure project root in path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from projector import ProjectorBackend, ProjectorConfig, configure_logging
from projector.contracts.base import ErrorCode, ProjectorError
from projector.metadata import MetadataConfig
from projector.storage import EntityStoreConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replay an event journal into an entity store.")
    parser.add_argument("journal", help="Path to a JSON-lines event journal")
    parser.add_argument("--db", help="sqlite database path (in-memory store when omitted)")
    parser.add_argument("--no-metadata", action="store_true", help="Skip off-chain metadata fetches")
    parser.add_argument("--gateway", default=MetadataConfig().gateway_url, help="IPFS gateway base URL")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "INFO"))
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if not os.path.exists(args.journal):
        print(f"[!] Journal not found: {args.journal}")
        return 1

    config = ProjectorConfig(
        store=EntityStoreConfig(
            backend_type="sqlite" if args.db else "memory",
            database_path=args.db
        ),
        metadata=MetadataConfig(enabled=not args.no_metadata, gateway_url=args.gateway),
        log_level=args.log_level,
    )
    backend = ProjectorBackend(config)

    print(f"[*] Replaying {args.journal}...")
    try:
        replayed = backend.replay_journal(args.journal)
    except ProjectorError as e:
        print(f"[!] Replay failed: {e}")
        return 1

    print(f"[*] Replayed {replayed} events")
    print("\n| Kind | Count |")
    print("| :--- | ---: |")
    for kind, count in backend.counts().items():
        print(f"| {kind} | {count} |")

    dropped = backend.audit.totals().get(ErrorCode.MISSING_REFERENCE, 0)
    if dropped:
        print(f"\n[!] {dropped} events referenced unknown entities and were dropped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
