"""
Shared Test Fixtures

Fixed identifiers and event builders for deterministic testing.
All fixtures are explicit - no random generation.
"""

import json
from typing import Dict, Optional

from projector.contracts.events import (
    BlockContext,
    AgreementCreated,
    AgreementJoined,
    AgreementPositionUpdated,
    AgreementFinalized,
    AgreementDisputed,
    FrameworkSetup,
    ResolutionSubmitted,
    ResolutionAppealed,
    ResolutionEndorsed,
    ResolutionExecuted,
)


# =============================================================================
# FIXED IDENTIFIERS
# =============================================================================

FRAMEWORK = "0x" + "f0" * 20
ARBITRATOR = "0x" + "a0" * 20
TOKEN = "0x" + "70" * 20
P1 = "0x" + "11" * 20
P2 = "0x" + "22" * 20
P3 = "0x" + "33" * 20

AGREEMENT_ID = "0xc8"
OTHER_AGREEMENT_ID = "0xc9"
TERMS_HASH = "0x" + "ab" * 32

DISPUTE_ID = AGREEMENT_ID
R1 = "0x" + "01" * 32
R2 = "0x" + "02" * 32
S1 = "0x" + "51" * 32
S2 = "0x" + "52" * 32

GENESIS_TIMESTAMP = 1700000000
BLOCK_TIME = 12


# =============================================================================
# METADATA DOCUMENTS (keyed by content id)
# =============================================================================

def _doc(document) -> bytes:
    return json.dumps(document).encode("utf-8")


def metadata_documents() -> Dict[str, bytes]:
    return {
        "Metadata": _doc({"title": "Agreement Test"}),
        "TwoParty": _doc({
            "title": "Two Party",
            "resolvers": {
                P1: {"balance": "1000"},
                P2: {"balance": "2500"},
            },
        }),
        "ReversedParty": _doc({
            "resolvers": {
                P2: {"balance": "1"},
                P1: {"balance": "2"},
            },
        }),
        "BadTitle": _doc({"title": 42}),
        "BadBalance": _doc({"resolvers": {P1: {"balance": "lots"}}}),
        "NoBalance": _doc({"resolvers": {P1: {}}}),
        "NotJson": b"{title: unquoted",
        "JsonList": _doc(["title", "x"]),
    }


# =============================================================================
# EVENT BUILDERS
# =============================================================================

def block(number: int = 1, address: Optional[str] = FRAMEWORK) -> BlockContext:
    return BlockContext(
        block_number=number,
        timestamp=GENESIS_TIMESTAMP + number * BLOCK_TIME,
        address=address,
    )


def timestamp_of(number: int) -> int:
    return GENESIS_TIMESTAMP + number * BLOCK_TIME


def created(
    id: str = AGREEMENT_ID,
    metadata_uri: str = "ipfs://Metadata",
    criteria: int = 1000,
    number: int = 1,
    address: Optional[str] = FRAMEWORK
) -> AgreementCreated:
    return AgreementCreated(
        context=block(number, address),
        id=id,
        terms_hash=TERMS_HASH,
        criteria=criteria,
        metadata_uri=metadata_uri,
        token=TOKEN,
    )


def joined(id: str = AGREEMENT_ID, party: str = P1, balance: int = 1050,
           number: int = 2, address: Optional[str] = FRAMEWORK) -> AgreementJoined:
    return AgreementJoined(context=block(number, address), id=id, party=party, balance=balance)


def position_updated(id: str = AGREEMENT_ID, party: str = P1, balance: int = 1050,
                     status: int = 1, number: int = 3) -> AgreementPositionUpdated:
    return AgreementPositionUpdated(
        context=block(number), id=id, party=party, balance=balance, status=status
    )


def finalized(id: str = AGREEMENT_ID, number: int = 4) -> AgreementFinalized:
    return AgreementFinalized(context=block(number), id=id)


def disputed(id: str = AGREEMENT_ID, party: str = P1, number: int = 4) -> AgreementDisputed:
    return AgreementDisputed(context=block(number), id=id, party=party)


def setup(framework: str = FRAMEWORK, arbitrator: str = ARBITRATOR,
          required_deposit: int = 5, number: int = 0) -> FrameworkSetup:
    return FrameworkSetup(
        context=block(number, framework),
        framework=framework,
        arbitrator=arbitrator,
        required_deposit=required_deposit,
        deposit_token=TOKEN,
        deposit_arbitrator=ARBITRATOR,
    )


def submitted(dispute: str = DISPUTE_ID, resolution: str = R1, settlement: str = S1,
              number: int = 5) -> ResolutionSubmitted:
    return ResolutionSubmitted(
        context=block(number, ARBITRATOR),
        framework=FRAMEWORK,
        dispute=dispute,
        resolution=resolution,
        settlement=settlement,
    )


def appealed(settlement: str = S1, resolution: str = R1, account: str = P1,
             number: int = 6) -> ResolutionAppealed:
    return ResolutionAppealed(
        context=block(number, ARBITRATOR), resolution=resolution, settlement=settlement, account=account
    )


def endorsed(settlement: str = S1, resolution: str = R1, number: int = 6) -> ResolutionEndorsed:
    return ResolutionEndorsed(context=block(number, ARBITRATOR), resolution=resolution, settlement=settlement)


def executed(settlement: str = S1, resolution: str = R1, number: int = 7) -> ResolutionExecuted:
    return ResolutionExecuted(context=block(number, ARBITRATOR), resolution=resolution, settlement=settlement)


# =============================================================================
# RAW RECORDS (decoder / journal input)
# =============================================================================

def created_record(number: int = 1) -> dict:
    return {
        "kind": "AgreementCreated",
        "block": {"number": number, "timestamp": timestamp_of(number)},
        "address": FRAMEWORK.upper().replace("0X", "0x"),
        "logIndex": 0,
        "params": {
            "id": "0xC8",
            "termsHash": TERMS_HASH,
            "criteria": "1000",
            "metadataURI": "ipfs://Metadata",
            "token": TOKEN,
        },
    }


def joined_record(party: str = P1, balance: str = "1050", number: int = 2) -> dict:
    return {
        "kind": "AgreementJoined",
        "block": {"number": number, "timestamp": timestamp_of(number)},
        "address": FRAMEWORK,
        "params": {"id": 200, "party": party, "balance": balance},
    }


def setup_record(amount: str = "5", number: int = 0) -> dict:
    return {
        "kind": "SetUp",
        "block": {"number": number, "timestamp": timestamp_of(number)},
        "to": FRAMEWORK,
        "inputs": {
            "arbitrator": ARBITRATOR,
            "deposits": {"token": TOKEN, "amount": amount, "arbitrator": ARBITRATOR},
        },
    }
