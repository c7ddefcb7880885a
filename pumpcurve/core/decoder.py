"""
Account Decoder

Turns raw account buffers into typed records:
- Length is checked before anything else (MalformedAccountData)
- Leading 8-byte tag must match the registry (UnknownDiscriminator)
- Trailing bytes past the fixed layout are ignored (newer program
  versions append fields)

The registry is explicit: build one per deployment from EngineConfig.
"""

from typing import Dict, Mapping, Optional, Union

import structlog
from construct import ConstructError
from solders.pubkey import Pubkey

from pumpcurve.core.bonding_curve import CurveState
from pumpcurve.core.errors import MalformedAccountData, UnknownDiscriminator
from pumpcurve.core.global_params import GlobalParameters
from pumpcurve.core.intmath import as_u64
from pumpcurve.core.layouts import (
    DEFAULT_DISCRIMINATORS,
    DISCRIMINATOR_SIZE,
    LAYOUTS,
    AccountKind,
    layout_size,
)

logger = structlog.get_logger()

AccountRecord = Union[GlobalParameters, CurveState]


class AccountDecoder:
    """Decodes and encodes pump.fun account buffers"""

    def __init__(self, discriminators: Optional[Mapping[AccountKind, bytes]] = None):
        """
        Initialize decoder

        Args:
            discriminators: kind -> 8-byte tag. Missing kinds use the
                Anchor-derived defaults.
        """
        self.discriminators: Dict[AccountKind, bytes] = dict(DEFAULT_DISCRIMINATORS)
        for kind, tag in (discriminators or {}).items():
            if len(tag) != DISCRIMINATOR_SIZE:
                raise ValueError(
                    f"Discriminator for {kind.value} must be {DISCRIMINATOR_SIZE} bytes, got {len(tag)}"
                )
            self.discriminators[kind] = bytes(tag)

        self._kinds_by_tag = {tag: kind for kind, tag in self.discriminators.items()}

    @classmethod
    def from_config(cls, config) -> "AccountDecoder":
        """Build a decoder from an EngineConfig"""
        return cls(config.discriminators())

    def identify(self, data: bytes) -> AccountKind:
        """
        Find the layout kind from the leading tag

        Raises:
            MalformedAccountData: if data is shorter than a discriminator
            UnknownDiscriminator: if the tag is not registered
        """
        if len(data) < DISCRIMINATOR_SIZE:
            raise MalformedAccountData(
                f"Account data too short for discriminator: {len(data)} bytes",
                expected=DISCRIMINATOR_SIZE,
                actual=len(data),
            )

        tag = bytes(data[:DISCRIMINATOR_SIZE])
        kind = self._kinds_by_tag.get(tag)
        if kind is None:
            logger.warning("Unknown account discriminator", discriminator=tag.hex())
            raise UnknownDiscriminator(tag)
        return kind

    def decode(self, data: bytes, kind: AccountKind) -> AccountRecord:
        """
        Decode a buffer as the given layout

        Args:
            data: Raw account data (as returned by getAccountInfo)
            kind: Expected layout

        Returns:
            GlobalParameters or CurveState
        """
        data = bytes(data)
        expected = layout_size(kind)
        if len(data) < expected:
            logger.warning(
                "Account data too short",
                kind=kind.value,
                expected=expected,
                actual=len(data),
            )
            raise MalformedAccountData(
                f"{kind.value} account requires {expected} bytes, got {len(data)}",
                expected=expected,
                actual=len(data),
            )

        tag = data[:DISCRIMINATOR_SIZE]
        if tag != self.discriminators[kind]:
            logger.warning(
                "Discriminator mismatch",
                kind=kind.value,
                discriminator=tag.hex(),
            )
            raise UnknownDiscriminator(tag)

        try:
            parsed = LAYOUTS[kind].parse(data)
        except ConstructError as e:
            raise MalformedAccountData(f"Failed to parse {kind.value} account: {e}") from e

        if kind is AccountKind.GLOBAL:
            return GlobalParameters(
                initialized=parsed.initialized,
                authority=Pubkey.from_bytes(parsed.authority),
                fee_recipient=Pubkey.from_bytes(parsed.fee_recipient),
                initial_virtual_token_reserves=parsed.initial_virtual_token_reserves,
                initial_virtual_sol_reserves=parsed.initial_virtual_sol_reserves,
                initial_real_token_reserves=parsed.initial_real_token_reserves,
                token_total_supply=parsed.token_total_supply,
                fee_basis_points=parsed.fee_basis_points,
                discriminator=parsed.discriminator,
            )

        return CurveState(
            virtual_token_reserves=parsed.virtual_token_reserves,
            virtual_sol_reserves=parsed.virtual_sol_reserves,
            real_token_reserves=parsed.real_token_reserves,
            real_sol_reserves=parsed.real_sol_reserves,
            token_total_supply=parsed.token_total_supply,
            complete=parsed.complete,
            discriminator=parsed.discriminator,
        )

    def decode_global(self, data: bytes) -> GlobalParameters:
        return self.decode(data, AccountKind.GLOBAL)

    def decode_bonding_curve(self, data: bytes) -> CurveState:
        return self.decode(data, AccountKind.BONDING_CURVE)

    def decode_any(self, data: bytes) -> AccountRecord:
        """Identify the layout from the leading tag, then decode"""
        return self.decode(data, self.identify(data))

    def encode(self, record: AccountRecord) -> bytes:
        """
        Serialize a record into its fixed layout

        The record's own discriminator is written, so a decode of the
        output needs a registry that knows that tag.

        Raises:
            ValueError: if a numeric field does not fit u64
        """
        if isinstance(record, GlobalParameters):
            return LAYOUTS[AccountKind.GLOBAL].build(
                dict(
                    discriminator=record.discriminator,
                    initialized=record.initialized,
                    authority=bytes(record.authority),
                    fee_recipient=bytes(record.fee_recipient),
                    initial_virtual_token_reserves=as_u64(
                        record.initial_virtual_token_reserves, "initial_virtual_token_reserves"
                    ),
                    initial_virtual_sol_reserves=as_u64(
                        record.initial_virtual_sol_reserves, "initial_virtual_sol_reserves"
                    ),
                    initial_real_token_reserves=as_u64(
                        record.initial_real_token_reserves, "initial_real_token_reserves"
                    ),
                    token_total_supply=as_u64(record.token_total_supply, "token_total_supply"),
                    fee_basis_points=as_u64(record.fee_basis_points, "fee_basis_points"),
                )
            )

        if isinstance(record, CurveState):
            return LAYOUTS[AccountKind.BONDING_CURVE].build(
                dict(
                    discriminator=record.discriminator,
                    virtual_token_reserves=as_u64(record.virtual_token_reserves, "virtual_token_reserves"),
                    virtual_sol_reserves=as_u64(record.virtual_sol_reserves, "virtual_sol_reserves"),
                    real_token_reserves=as_u64(record.real_token_reserves, "real_token_reserves"),
                    real_sol_reserves=as_u64(record.real_sol_reserves, "real_sol_reserves"),
                    token_total_supply=as_u64(record.token_total_supply, "token_total_supply"),
                    complete=record.complete,
                )
            )

        raise TypeError(f"Cannot encode {type(record).__name__}")
