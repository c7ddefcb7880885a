"""
Account Binary Layouts

Little-endian, fixed field order, no padding:

    Global:       u64 discriminator | bool initialized | pubkey authority |
                  pubkey fee_recipient | u64 x5 (reserves, supply, fee bps)
    BondingCurve: u64 discriminator | u64 x5 (reserves, supply) | bool complete

Discriminators follow the Anchor rule: sha256("<namespace>:<Name>")[:8].
"""

import hashlib
from enum import Enum

from construct import Bytes, Flag, Int64ul, Struct

DISCRIMINATOR_SIZE = 8
PUBKEY_SIZE = 32


class AccountKind(Enum):
    """Known account layouts"""

    GLOBAL = "Global"
    BONDING_CURVE = "BondingCurve"


def anchor_discriminator(namespace: str, name: str) -> bytes:
    """
    Compute an Anchor discriminator

    Args:
        namespace: "account" or "event"
        name: Type name as declared in the program IDL

    Returns:
        First 8 bytes of sha256("<namespace>:<name>")
    """
    return hashlib.sha256(f"{namespace}:{name}".encode("utf-8")).digest()[:DISCRIMINATOR_SIZE]


GLOBAL_LAYOUT = Struct(
    "discriminator" / Bytes(DISCRIMINATOR_SIZE),
    "initialized" / Flag,
    "authority" / Bytes(PUBKEY_SIZE),
    "fee_recipient" / Bytes(PUBKEY_SIZE),
    "initial_virtual_token_reserves" / Int64ul,
    "initial_virtual_sol_reserves" / Int64ul,
    "initial_real_token_reserves" / Int64ul,
    "token_total_supply" / Int64ul,
    "fee_basis_points" / Int64ul,
)

BONDING_CURVE_LAYOUT = Struct(
    "discriminator" / Bytes(DISCRIMINATOR_SIZE),
    "virtual_token_reserves" / Int64ul,
    "virtual_sol_reserves" / Int64ul,
    "real_token_reserves" / Int64ul,
    "real_sol_reserves" / Int64ul,
    "token_total_supply" / Int64ul,
    "complete" / Flag,
)

LAYOUTS = {
    AccountKind.GLOBAL: GLOBAL_LAYOUT,
    AccountKind.BONDING_CURVE: BONDING_CURVE_LAYOUT,
}

DEFAULT_DISCRIMINATORS = {
    kind: anchor_discriminator("account", kind.value) for kind in AccountKind
}


def layout_size(kind: AccountKind) -> int:
    """Fixed byte width of a layout (113 for Global, 49 for BondingCurve)"""
    return LAYOUTS[kind].sizeof()
