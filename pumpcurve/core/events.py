"""
Program Event Decoder

Anchor emits events as base64 "Program data:" log lines: an 8-byte event
discriminator followed by the borsh-encoded fields. Each known event maps to
one frozen dataclass; unknown tags come back as UnrecognizedEvent instead of
being dropped.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional, Union

from construct import Bytes, ConstructError, Flag, Int32ul, Int64sl, Int64ul, PascalString, Struct
from solders.pubkey import Pubkey

from pumpcurve.core.bonding_curve import CurveState
from pumpcurve.core.errors import MalformedAccountData
from pumpcurve.core.layouts import DISCRIMINATOR_SIZE, PUBKEY_SIZE, anchor_discriminator

PROGRAM_DATA_PREFIX = "Program data: "

_BorshString = PascalString(Int32ul, "utf8")
_Pubkey = Bytes(PUBKEY_SIZE)


@dataclass(frozen=True)
class CreateEvent:
    name: str
    symbol: str
    uri: str
    mint: Pubkey
    bonding_curve: Pubkey
    user: Pubkey


@dataclass(frozen=True)
class TradeEvent:
    mint: Pubkey
    sol_amount: int
    token_amount: int
    is_buy: bool
    user: Pubkey
    timestamp: int
    virtual_sol_reserves: int
    virtual_token_reserves: int
    real_sol_reserves: int
    real_token_reserves: int

    def to_curve_state(self, token_total_supply: int) -> CurveState:
        """Curve snapshot as of right after this trade"""
        return CurveState(
            virtual_token_reserves=self.virtual_token_reserves,
            virtual_sol_reserves=self.virtual_sol_reserves,
            real_token_reserves=self.real_token_reserves,
            real_sol_reserves=self.real_sol_reserves,
            token_total_supply=token_total_supply,
            complete=False,
        )


@dataclass(frozen=True)
class CompleteEvent:
    user: Pubkey
    mint: Pubkey
    bonding_curve: Pubkey
    timestamp: int


@dataclass(frozen=True)
class SetParamsEvent:
    fee_recipient: Pubkey
    initial_virtual_token_reserves: int
    initial_virtual_sol_reserves: int
    initial_real_token_reserves: int
    token_total_supply: int
    fee_basis_points: int


@dataclass(frozen=True)
class UnrecognizedEvent:
    discriminator: bytes
    data: bytes


ProgramEvent = Union[CreateEvent, TradeEvent, CompleteEvent, SetParamsEvent, UnrecognizedEvent]


_CREATE_LAYOUT = Struct(
    "name" / _BorshString,
    "symbol" / _BorshString,
    "uri" / _BorshString,
    "mint" / _Pubkey,
    "bonding_curve" / _Pubkey,
    "user" / _Pubkey,
)

_TRADE_LAYOUT = Struct(
    "mint" / _Pubkey,
    "sol_amount" / Int64ul,
    "token_amount" / Int64ul,
    "is_buy" / Flag,
    "user" / _Pubkey,
    "timestamp" / Int64sl,
    "virtual_sol_reserves" / Int64ul,
    "virtual_token_reserves" / Int64ul,
    "real_sol_reserves" / Int64ul,
    "real_token_reserves" / Int64ul,
)

_COMPLETE_LAYOUT = Struct(
    "user" / _Pubkey,
    "mint" / _Pubkey,
    "bonding_curve" / _Pubkey,
    "timestamp" / Int64sl,
)

_SET_PARAMS_LAYOUT = Struct(
    "fee_recipient" / _Pubkey,
    "initial_virtual_token_reserves" / Int64ul,
    "initial_virtual_sol_reserves" / Int64ul,
    "initial_real_token_reserves" / Int64ul,
    "token_total_supply" / Int64ul,
    "fee_basis_points" / Int64ul,
)

# event class -> (layout, pubkey fields)
_EVENT_LAYOUTS = {
    CreateEvent: (_CREATE_LAYOUT, ("mint", "bonding_curve", "user")),
    TradeEvent: (_TRADE_LAYOUT, ("mint", "user")),
    CompleteEvent: (_COMPLETE_LAYOUT, ("user", "mint", "bonding_curve")),
    SetParamsEvent: (_SET_PARAMS_LAYOUT, ("fee_recipient",)),
}


def _field_names(layout: Struct) -> list:
    return [subcon.name for subcon in layout.subcons]


EVENT_DISCRIMINATORS = {
    anchor_discriminator("event", event_cls.__name__): event_cls for event_cls in _EVENT_LAYOUTS
}


def event_discriminator(event_cls: type) -> bytes:
    """Anchor tag for a known event class"""
    if event_cls not in _EVENT_LAYOUTS:
        raise KeyError(f"Not a known event type: {event_cls.__name__}")
    return anchor_discriminator("event", event_cls.__name__)


def decode_event(data: bytes) -> ProgramEvent:
    """
    Decode one event payload

    Args:
        data: Discriminator followed by the borsh body

    Returns:
        A known event variant, or UnrecognizedEvent for unknown tags

    Raises:
        MalformedAccountData: if data is too short or a known body is truncated
    """
    data = bytes(data)
    if len(data) < DISCRIMINATOR_SIZE:
        raise MalformedAccountData(
            f"Event data too short: {len(data)} bytes",
            expected=DISCRIMINATOR_SIZE,
            actual=len(data),
        )

    tag, body = data[:DISCRIMINATOR_SIZE], data[DISCRIMINATOR_SIZE:]
    event_cls = EVENT_DISCRIMINATORS.get(tag)
    if event_cls is None:
        return UnrecognizedEvent(discriminator=tag, data=body)

    layout, pubkey_fields = _EVENT_LAYOUTS[event_cls]
    try:
        parsed = layout.parse(body)
    except (ConstructError, UnicodeDecodeError) as e:
        raise MalformedAccountData(f"Failed to parse {event_cls.__name__}: {e}") from e

    fields = {
        name: (Pubkey.from_bytes(parsed[name]) if name in pubkey_fields else parsed[name])
        for name in _field_names(layout)
    }
    return event_cls(**fields)


def encode_event(event: ProgramEvent) -> bytes:
    """Serialize an event with its discriminator"""
    if isinstance(event, UnrecognizedEvent):
        return event.discriminator + event.data

    layout, pubkey_fields = _EVENT_LAYOUTS[type(event)]
    values = {
        name: (bytes(getattr(event, name)) if name in pubkey_fields else getattr(event, name))
        for name in _field_names(layout)
    }
    return event_discriminator(type(event)) + layout.build(values)


def decode_program_log(line: str) -> Optional[ProgramEvent]:
    """
    Decode a "Program data: <base64>" transaction log line

    Returns:
        The decoded event, or None if the line carries no event payload
    """
    if not line.startswith(PROGRAM_DATA_PREFIX):
        return None

    payload = line[len(PROGRAM_DATA_PREFIX):].strip()
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None

    return decode_event(data)
