"""
Event Decoder

Turns JSON event records (as delivered by the streaming host or read
back from the journal) into typed ChainEvents, and back.

RECORD FORMAT:
==============
    {
      "kind": "AgreementJoined",
      "block": {"number": 12, "timestamp": 1700000000},
      "address": "0x...",           # emitting contract, optional
      "logIndex": 0,                 # optional
      "transactionHash": "0x...",    # optional
      "params": {"id": "0xc8", "party": "0x...", "balance": "1050"}
    }

The SetUp call trace uses "to" instead of "address" and "inputs"
instead of "params":

    {"kind": "SetUp", "block": {...}, "to": "0x...",
     "inputs": {"arbitrator": "0x...",
                "deposits": {"token": "0x...", "amount": "5", "arbitrator": "0x..."}}}

Integers may be JSON numbers or decimal / 0x-hex strings. Byte
identifiers may be integers or hex strings. Agreement and dispute ids
are uint256 values and lose leading zeros; 32-byte hashes keep their
full width. Every record needs block.timestamp.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional

from ..contracts.base import (
    Error, ErrorCode, MalformedEventError, UnsupportedEventError,
    to_hex, to_address, to_quantity_hex, parse_uint
)
from ..contracts.events import (
    EventKind, BlockContext, ChainEvent, AgreementCreated, AgreementJoined,
    AgreementPositionUpdated, AgreementFinalized, AgreementDisputed,
    FrameworkSetup, ResolutionSubmitted, ResolutionAppealed,
    ResolutionEndorsed, ResolutionExecuted
)


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _uint(params: Mapping[str, Any], key: str) -> int:
    value = parse_uint(params[key])
    if value is None:
        raise ValueError(f"{key} is not an unsigned integer: {params[key]!r}")
    return value


def _id(params: Mapping[str, Any], key: str) -> str:
    return to_quantity_hex(params[key])


def _hash(params: Mapping[str, Any], key: str) -> str:
    return to_hex(params[key])


def _address(params: Mapping[str, Any], key: str) -> str:
    return to_address(params[key])


def _text(params: Mapping[str, Any], key: str) -> str:
    value = params[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} is not a string: {value!r}")
    return value


def _optional_address(value: Any) -> Optional[str]:
    return to_address(value) if value is not None else None


# =============================================================================
# PER-KIND DECODERS
# =============================================================================

def _decode_setup(context: BlockContext, inputs: Mapping[str, Any]) -> FrameworkSetup:
    deposits = inputs["deposits"]
    if not isinstance(deposits, Mapping):
        raise TypeError("deposits is not an object")
    return FrameworkSetup(
        context=context,
        framework=context.address,
        arbitrator=_address(inputs, "arbitrator"),
        required_deposit=_uint(deposits, "amount"),
        deposit_token=_optional_address(deposits.get("token")),
        deposit_arbitrator=_optional_address(deposits.get("arbitrator")),
    )


_DECODERS: Dict[EventKind, Callable[[BlockContext, Mapping[str, Any]], ChainEvent]] = {
    EventKind.AGREEMENT_CREATED: lambda ctx, p: AgreementCreated(
        context=ctx,
        id=_id(p, "id"),
        terms_hash=_hash(p, "termsHash"),
        criteria=_uint(p, "criteria"),
        metadata_uri=_text(p, "metadataURI"),
        token=_address(p, "token"),
    ),
    EventKind.AGREEMENT_JOINED: lambda ctx, p: AgreementJoined(
        context=ctx, id=_id(p, "id"), party=_address(p, "party"), balance=_uint(p, "balance"),
    ),
    EventKind.AGREEMENT_POSITION_UPDATED: lambda ctx, p: AgreementPositionUpdated(
        context=ctx,
        id=_id(p, "id"),
        party=_address(p, "party"),
        balance=_uint(p, "balance"),
        status=_uint(p, "status"),
    ),
    EventKind.AGREEMENT_FINALIZED: lambda ctx, p: AgreementFinalized(context=ctx, id=_id(p, "id")),
    EventKind.AGREEMENT_DISPUTED: lambda ctx, p: AgreementDisputed(
        context=ctx, id=_id(p, "id"), party=_address(p, "party"),
    ),
    EventKind.FRAMEWORK_SETUP: _decode_setup,
    EventKind.RESOLUTION_SUBMITTED: lambda ctx, p: ResolutionSubmitted(
        context=ctx,
        framework=_address(p, "framework"),
        dispute=_id(p, "dispute"),
        resolution=_hash(p, "resolution"),
        settlement=_hash(p, "settlement"),
    ),
    EventKind.RESOLUTION_APPEALED: lambda ctx, p: ResolutionAppealed(
        context=ctx,
        resolution=_hash(p, "resolution"),
        settlement=_hash(p, "settlement"),
        account=_address(p, "account"),
    ),
    EventKind.RESOLUTION_ENDORSED: lambda ctx, p: ResolutionEndorsed(
        context=ctx, resolution=_hash(p, "resolution"), settlement=_hash(p, "settlement"),
    ),
    EventKind.RESOLUTION_EXECUTED: lambda ctx, p: ResolutionExecuted(
        context=ctx, resolution=_hash(p, "resolution"), settlement=_hash(p, "settlement"),
    ),
}


def _decode_context(record: Mapping[str, Any], kind: EventKind) -> BlockContext:
    block = record["block"]
    if not isinstance(block, Mapping):
        raise TypeError("block is not an object")

    address_key = "to" if kind == EventKind.FRAMEWORK_SETUP else "address"
    address = record.get(address_key)
    if kind == EventKind.FRAMEWORK_SETUP and address is None:
        raise KeyError("to")

    tx_hash = record.get("transactionHash")
    return BlockContext(
        block_number=_uint(block, "number") if "number" in block else 0,
        timestamp=_uint(block, "timestamp"),
        address=_optional_address(address),
        log_index=_uint(record, "logIndex") if "logIndex" in record else 0,
        transaction_hash=to_hex(tx_hash) if tx_hash is not None else None,
    )


def decode_event(record: Mapping[str, Any]) -> ChainEvent:
    """
    Decode one JSON record.

    Raises UnsupportedEventError for an unknown kind and
    MalformedEventError for a known kind with missing or invalid fields.
    """
    if not isinstance(record, Mapping):
        raise MalformedEventError(Error.create(
            ErrorCode.MALFORMED_EVENT, "Event record is not an object"
        ))

    kind_name = record.get("kind")
    try:
        kind = EventKind(kind_name)
    except ValueError:
        raise UnsupportedEventError(Error.create(
            ErrorCode.UNSUPPORTED_EVENT, f"Unsupported event kind: {kind_name!r}",
            kind=kind_name,
        )) from None

    params_key = "inputs" if kind == EventKind.FRAMEWORK_SETUP else "params"
    try:
        params = record[params_key]
        if not isinstance(params, Mapping):
            raise TypeError(f"{params_key} is not an object")
        context = _decode_context(record, kind)
        return _DECODERS[kind](context, params)
    except (KeyError, ValueError, TypeError) as e:
        raise MalformedEventError(Error.create(
            ErrorCode.MALFORMED_EVENT,
            f"Malformed {kind.value} record: {e}",
            kind=kind.value,
            block=record.get("block"),
        )) from e


# =============================================================================
# ENCODING (for the journal)
# =============================================================================

_PARAM_NAMES: Dict[str, str] = {
    "terms_hash": "termsHash",
    "metadata_uri": "metadataURI",
}


def encode_event(event: ChainEvent) -> Dict[str, Any]:
    """
    Render a typed event back into the record format decode_event reads.

    Integers are written as decimal strings so the record survives any
    JSON consumer without precision loss.
    """
    ctx = event.context
    record: Dict[str, Any] = {
        "kind": event.kind.value,
        "block": {"number": ctx.block_number, "timestamp": ctx.timestamp},
        "logIndex": ctx.log_index,
    }
    if ctx.transaction_hash is not None:
        record["transactionHash"] = ctx.transaction_hash

    if isinstance(event, FrameworkSetup):
        record["to"] = event.framework
        deposits = {"amount": str(event.required_deposit)}
        if event.deposit_token is not None:
            deposits["token"] = event.deposit_token
        if event.deposit_arbitrator is not None:
            deposits["arbitrator"] = event.deposit_arbitrator
        record["inputs"] = {"arbitrator": event.arbitrator, "deposits": deposits}
        return record

    if ctx.address is not None:
        record["address"] = ctx.address

    params: Dict[str, Any] = {}
    for name, value in vars(event).items():
        if name == "context":
            continue
        params[_PARAM_NAMES.get(name, name)] = str(value) if isinstance(value, int) else value
    record["params"] = params
    return record
