"""
Projection Audit Tests

RULES UNDER TEST:
=================
- Entries keep their recording order and never change
- Only the most recent max_entries are retained
- Per-code totals survive eviction; reset() clears everything
"""

from projector.contracts.base import ErrorCode
from projector.contracts.entities import EntityKind
from projector.contracts.events import EventKind
from projector.engine import ProjectorBackend, ProjectorConfig
from projector.metadata import MetadataConfig
from projector.projection import ProjectionAudit

from tests.fixtures import OTHER_AGREEMENT_ID, finalized


def _record_missing(audit, count):
    for number in range(1, count + 1):
        audit.record(
            event_kind=EventKind.AGREEMENT_FINALIZED,
            code=ErrorCode.MISSING_REFERENCE,
            message="agreement not indexed",
            entity_kind=EntityKind.AGREEMENT,
            entity_id=OTHER_AGREEMENT_ID,
            block_number=number,
        )


class TestProjectionAudit:

    def test_sequence_follows_recording_order(self):
        audit = ProjectionAudit()
        _record_missing(audit, 3)

        assert [e.sequence for e in audit.entries()] == [1, 2, 3]

    def test_oldest_entries_evicted_past_limit(self):
        audit = ProjectionAudit(max_entries=4)
        _record_missing(audit, 10)

        assert audit.entry_count == 4
        assert [e.block_number for e in audit.entries()] == [7, 8, 9, 10]
        assert [e.sequence for e in audit.entries()] == [7, 8, 9, 10]

    def test_totals_count_evicted_entries(self):
        audit = ProjectionAudit(max_entries=2)
        _record_missing(audit, 5)
        audit.record(EventKind.AGREEMENT_CREATED, ErrorCode.METADATA_UNAVAILABLE, "absent")

        assert audit.recorded_count == 6
        assert audit.totals() == {
            ErrorCode.MISSING_REFERENCE: 5,
            ErrorCode.METADATA_UNAVAILABLE: 1,
        }
        assert len(audit.entries(code=ErrorCode.MISSING_REFERENCE)) == 1

    def test_reset_clears_entries_and_totals(self):
        audit = ProjectionAudit(max_entries=2)
        _record_missing(audit, 5)
        audit.reset()

        assert audit.entries() == []
        assert audit.totals() == {}
        _record_missing(audit, 1)
        assert audit.entries()[0].sequence == 1

    def test_backend_applies_configured_limit(self):
        backend = ProjectorBackend(ProjectorConfig(
            metadata=MetadataConfig(enabled=False), audit_limit=3
        ))
        for number in range(1, 8):
            backend.process(finalized(id=OTHER_AGREEMENT_ID, number=number))

        assert len(backend.get_audit_log()) == 3
        assert backend.audit.totals() == {ErrorCode.MISSING_REFERENCE: 7}
