"""Shared fixtures: mainnet launch parameters and a fresh curve."""

import pytest
from solders.pubkey import Pubkey

from pumpcurve.core.bonding_curve import CurveState
from pumpcurve.core.decoder import AccountDecoder
from pumpcurve.core.global_params import GlobalParameters
from pumpcurve.utils.config import EngineConfig

VIRTUAL_SOL = 30_000_000_000
VIRTUAL_TOKEN = 1_073_000_000_000_000
REAL_TOKEN = 793_100_000_000_000
TOTAL_SUPPLY = 1_000_000_000_000_000

AUTHORITY = Pubkey.from_string("Ce6TQqeHC9p8KetsN6JsjHK7UTZk7nasjjnr7XxXp9F1")
FEE_RECIPIENT = Pubkey.from_string("CebN5WGQ4jvEPvsVU4EoHEpgzq1VV7AbicfhtW4xC9iM")


@pytest.fixture
def config():
    """Default engine configuration"""
    return EngineConfig()


@pytest.fixture
def decoder(config):
    """Decoder with the default account tags"""
    return AccountDecoder.from_config(config)


@pytest.fixture
def global_params():
    """Mainnet launch parameters, 1% fee"""
    return GlobalParameters(
        initialized=True,
        authority=AUTHORITY,
        fee_recipient=FEE_RECIPIENT,
        initial_virtual_token_reserves=VIRTUAL_TOKEN,
        initial_virtual_sol_reserves=VIRTUAL_SOL,
        initial_real_token_reserves=REAL_TOKEN,
        token_total_supply=TOTAL_SUPPLY,
        fee_basis_points=100,
    )


@pytest.fixture
def curve():
    """Freshly launched, still trading curve"""
    return CurveState(
        virtual_token_reserves=VIRTUAL_TOKEN,
        virtual_sol_reserves=VIRTUAL_SOL,
        real_token_reserves=REAL_TOKEN,
        real_sol_reserves=0,
        token_total_supply=TOTAL_SUPPLY,
        complete=False,
    )
