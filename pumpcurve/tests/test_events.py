"""
Tests for program event decoding

Run with: pytest pumpcurve/tests/test_events.py -v
"""

import base64

import pytest
from solders.pubkey import Pubkey

from pumpcurve.core.errors import MalformedAccountData
from pumpcurve.core.events import (
    CompleteEvent,
    CreateEvent,
    SetParamsEvent,
    TradeEvent,
    UnrecognizedEvent,
    decode_event,
    decode_program_log,
    encode_event,
    event_discriminator,
)

from conftest import AUTHORITY, FEE_RECIPIENT

MINT = Pubkey.from_string("6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P")


@pytest.fixture
def trade_event():
    """A 1 SOL buy on a fresh curve"""
    return TradeEvent(
        mint=MINT,
        sol_amount=1_000_000_000,
        token_amount=34_612_903_225_806,
        is_buy=True,
        user=AUTHORITY,
        timestamp=1_717_000_000,
        virtual_sol_reserves=31_000_000_000,
        virtual_token_reserves=1_038_387_096_774_194,
        real_sol_reserves=1_000_000_000,
        real_token_reserves=758_487_096_774_194,
    )


class TestDiscriminators:
    """Test event tags"""

    def test_trade_event_tag(self):
        """Should use the Anchor event tag seen in pump.fun logs"""
        assert event_discriminator(TradeEvent).hex() == "bddb7fd34ee661ee"

    def test_unknown_class(self):
        """Should refuse classes that are not events"""
        with pytest.raises(KeyError):
            event_discriminator(UnrecognizedEvent)


class TestDecodeEvent:
    """Test event dispatch"""

    def test_trade_event(self, trade_event):
        """Should decode a TradeEvent"""
        decoded = decode_event(encode_event(trade_event))

        assert isinstance(decoded, TradeEvent)
        assert decoded == trade_event

    def test_create_event(self):
        """Should decode borsh strings and pubkeys"""
        event = CreateEvent(
            name="Test Token",
            symbol="TEST",
            uri="https://example.com/meta.json",
            mint=MINT,
            bonding_curve=FEE_RECIPIENT,
            user=AUTHORITY,
        )
        assert decode_event(encode_event(event)) == event

    def test_complete_event(self):
        """Should decode a CompleteEvent"""
        event = CompleteEvent(user=AUTHORITY, mint=MINT, bonding_curve=FEE_RECIPIENT, timestamp=42)
        assert decode_event(encode_event(event)) == event

    def test_set_params_event(self):
        """Should decode a SetParamsEvent"""
        event = SetParamsEvent(
            fee_recipient=FEE_RECIPIENT,
            initial_virtual_token_reserves=1_073_000_000_000_000,
            initial_virtual_sol_reserves=30_000_000_000,
            initial_real_token_reserves=793_100_000_000_000,
            token_total_supply=1_000_000_000_000_000,
            fee_basis_points=100,
        )
        assert decode_event(encode_event(event)) == event

    def test_unrecognized(self):
        """Should return UnrecognizedEvent instead of dropping unknown tags"""
        decoded = decode_event(b"\x01" * 8 + b"payload")

        assert decoded == UnrecognizedEvent(discriminator=b"\x01" * 8, data=b"payload")

    def test_truncated_body(self, trade_event):
        """Should raise MalformedAccountData for a cut-off known event"""
        data = encode_event(trade_event)[:40]
        with pytest.raises(MalformedAccountData):
            decode_event(data)

    def test_too_short(self):
        """Should raise MalformedAccountData without a full tag"""
        with pytest.raises(MalformedAccountData):
            decode_event(b"\x00\x01")


class TestProgramLog:
    """Test log line decoding"""

    def test_program_data_line(self, trade_event):
        """Should decode a base64 Program data line"""
        line = "Program data: " + base64.b64encode(encode_event(trade_event)).decode()
        assert decode_program_log(line) == trade_event

    def test_other_log_line(self):
        """Should ignore lines without event payload"""
        assert decode_program_log("Program log: Instruction: Buy") is None

    def test_invalid_base64(self):
        """Should ignore undecodable payloads"""
        assert decode_program_log("Program data: not*base64!") is None


class TestTradeEventCurve:
    """Test curve snapshots from trade events"""

    def test_to_curve_state(self, trade_event):
        """Should carry post-trade reserves into a tradable snapshot"""
        curve = trade_event.to_curve_state(1_000_000_000_000_000)

        assert curve.virtual_sol_reserves == 31_000_000_000
        assert curve.real_token_reserves == 758_487_096_774_194
        assert curve.complete is False
        assert curve.get_buy_price(100_000) > 0
