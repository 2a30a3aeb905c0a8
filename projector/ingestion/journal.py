"""
Event Journal

Append-only JSON-lines log of raw event records, kept for
deterministic replay into a fresh store.

INVARIANTS:
- Records are appended, never rewritten
- Reading yields records in append order
- A corrupt line is an error, not something to skip
"""

from __future__ import annotations
from typing import Any, Dict, Iterator, List, Mapping, Tuple
import json
import os

from ..contracts.base import Error, ErrorCode, MalformedEventError, ProjectorError
from ..contracts.events import ChainEvent
from .decoder import decode_event, encode_event


class EventJournal:

    def __init__(self, path: str):
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def _ensure_dir(self):
        directory = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(directory, exist_ok=True)

    def append(self, record: Mapping[str, Any]) -> None:
        """Append one raw record as a single JSON line."""
        self._ensure_dir()
        with open(self._path, "a", encoding="utf-8") as f:
            f.write(json.dumps(dict(record), sort_keys=True) + "\n")

    def append_event(self, event: ChainEvent) -> None:
        self.append(encode_event(event))

    def _numbered_records(self) -> Iterator[Tuple[int, Dict[str, Any]]]:
        if not os.path.exists(self._path):
            return

        with open(self._path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except ValueError as e:
                    raise MalformedEventError(Error.create(
                        ErrorCode.MALFORMED_EVENT,
                        f"Corrupt journal line {line_number}: {e}",
                        path=self._path,
                        line=line_number,
                    )) from e
                yield line_number, record

    def records(self) -> Iterator[Dict[str, Any]]:
        """Yield raw records in append order."""
        for _, record in self._numbered_records():
            yield record

    def events(self) -> Iterator[ChainEvent]:
        """Yield decoded events in append order."""
        for line_number, record in self._numbered_records():
            try:
                event = decode_event(record)
            except ProjectorError as e:
                raise type(e)(e.error.with_context("line", str(line_number))) from e
            yield event

    def all_records(self) -> List[Dict[str, Any]]:
        return list(self.records())
