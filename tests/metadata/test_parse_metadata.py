"""
Metadata Parser Tests

Absent keys and wrong-typed keys must collapse to the same defaults.
"""

import pytest

from projector.metadata import ParsedMetadata, ResolverEntry, parse_metadata, strip_scheme

from tests.fixtures import P1, P2


class TestParseMetadata:

    def test_full_document(self):
        parsed = parse_metadata({
            "title": "Agreement Test",
            "resolvers": {P1: {"balance": "1000"}, P2: {"balance": "0x10"}},
        })

        assert parsed.title == "Agreement Test"
        assert parsed.resolvers == (ResolverEntry(P1, 1000), ResolverEntry(P2, 16))
        assert not parsed.has_issues

    def test_empty_document(self):
        assert parse_metadata({}) == ParsedMetadata()

    def test_unknown_keys_ignored(self):
        parsed = parse_metadata({"title": "T", "description": "ignored", "version": 3})

        assert parsed.title == "T"
        assert not parsed.has_issues

    @pytest.mark.parametrize("title", [42, None, ["a"], {"text": "a"}])
    def test_non_string_title_is_none(self, title):
        assert parse_metadata({"title": title}).title is None

    def test_wrong_type_matches_absent(self):
        wrong = parse_metadata({"title": 7, "resolvers": "nope"})
        absent = parse_metadata({})

        assert wrong.title == absent.title
        assert wrong.resolvers == absent.resolvers
        assert len(wrong.issues) == 2

    @pytest.mark.parametrize("document", [[], "text", 12, None])
    def test_non_object_document(self, document):
        parsed = parse_metadata(document)

        assert parsed.title is None
        assert parsed.resolvers == ()
        assert parsed.has_issues

    def test_resolver_order_follows_document(self):
        parsed = parse_metadata({"resolvers": {P2: {"balance": "1"}, P1: {"balance": "2"}}})

        assert [r.party for r in parsed.resolvers] == [P2, P1]

    def test_party_is_normalized_lowercase(self):
        mixed = "0x" + "aB" * 20
        parsed = parse_metadata({"resolvers": {mixed: {"balance": "1"}}})

        assert parsed.resolvers[0].party == mixed.lower()

    def test_non_address_key_skipped(self):
        parsed = parse_metadata({"resolvers": {"alice": {"balance": "1"}, P1: {"balance": "2"}}})

        assert [r.party for r in parsed.resolvers] == [P1]
        assert parsed.has_issues

    @pytest.mark.parametrize("entry", [
        {"balance": "lots"},
        {"balance": "-5"},
        {"balance": True},
        {"balance": 1.5},
        "1000",
        None,
    ])
    def test_bad_balance_defaults_to_none(self, entry):
        parsed = parse_metadata({"resolvers": {P1: entry}})

        assert parsed.resolvers == (ResolverEntry(P1, None),)
        assert parsed.has_issues

    def test_missing_balance_is_none_without_issue(self):
        parsed = parse_metadata({"resolvers": {P1: {}}})

        assert parsed.resolvers == (ResolverEntry(P1, None),)
        assert not parsed.has_issues

    def test_integer_balance_accepted(self):
        big = 2 ** 200
        parsed = parse_metadata({"resolvers": {P1: {"balance": big}}})

        assert parsed.resolvers[0].balance == big


class TestStripScheme:

    def test_strips_ipfs_prefix(self):
        assert strip_scheme("ipfs://QmHash") == "QmHash"

    def test_bare_cid_passes_through(self):
        assert strip_scheme("QmHash") == "QmHash"

    def test_prefix_only(self):
        assert strip_scheme("ipfs://") == ""
