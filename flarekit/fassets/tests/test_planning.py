"""Tests for lot arithmetic and agent selection."""
import pytest

from flarekit.chain.errors import UsageError, ValidationError
from flarekit.contracts.types import AgentInfo
from flarekit.fassets.planning import (
    format_free_lots,
    has_capacity,
    lots_from_args,
    select_agent,
)

LOT = 10_000_000


def _agent(vault="0x" + "ab" * 20, free_lots=10, fee_bips=25):
    return AgentInfo(vault, "0x" + "cd" * 20, fee_bips, 16000, 20000, free_lots, 0)


class TestLotsFromArgs:

    def test_explicit_lots(self):
        assert lots_from_args(3, None, LOT) == 3

    def test_amount_in_whole_lots(self):
        assert lots_from_args(None, 2 * LOT, LOT) == 2

    def test_neither(self):
        with pytest.raises(UsageError, match="--lots N or --amount X"):
            lots_from_args(None, None, LOT)

    def test_both(self):
        with pytest.raises(UsageError):
            lots_from_args(1, LOT, LOT)

    def test_partial_lot(self):
        with pytest.raises(ValidationError, match="multiple of the lot size"):
            lots_from_args(None, LOT + 1, LOT)

    @pytest.mark.parametrize("lots", [0, -1])
    def test_lots_below_one(self, lots):
        with pytest.raises(ValidationError, match="--lots must be >= 1"):
            lots_from_args(lots, None, LOT)

    def test_zero_amount(self):
        with pytest.raises(ValidationError):
            lots_from_args(None, 0, LOT)


class TestAgents:

    def test_zero_vault_has_no_capacity(self):
        assert not has_capacity(_agent(vault="0x" + "00" * 20))

    def test_capacity(self):
        assert has_capacity(_agent(free_lots=5), lots=5)
        assert not has_capacity(_agent(free_lots=5), lots=6)

    def test_first_fitting_agent(self):
        agents = [_agent("0x" + "01" * 20, free_lots=1), _agent("0x" + "02" * 20, free_lots=9)]
        assert select_agent(agents, 2).agent_vault == "0x" + "02" * 20

    def test_fee_cap(self):
        agents = [_agent("0x" + "01" * 20, fee_bips=3000), _agent("0x" + "02" * 20, fee_bips=100)]
        assert select_agent(agents, 1, max_fee_bips=2500).agent_vault == "0x" + "02" * 20

    def test_no_agent(self):
        with pytest.raises(ValidationError, match="No agent with 5 free lot"):
            select_agent([_agent(free_lots=1)], 5)

    def test_unbounded_lots(self):
        assert format_free_lots(2_000_000) == "∞"
        assert format_free_lots(12) == "12"
