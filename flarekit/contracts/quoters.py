"""
Quoter bindings for Uniswap V3 QuoterV2 and the Algebra Integral quoter.

Quoters simulate swaps through eth_call and revert internally, so they
are only ever called, never sent.
"""

from web3 import Web3

from ..amm.quoting import Quote
from ..chain.client import ZERO_ADDRESS
from .base import ContractBinding


class V3Quoter(ContractBinding):
    ABI_NAMES = ("v3_quoter",)

    def quote_exact_input_single(
        self, token_in: str, token_out: str, amount_in: int, fee: int
    ) -> Quote:
        params = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            amount_in,
            fee,
            0,
        )
        amount_out, sqrt_price_after, ticks_crossed, gas_estimate = self._call(
            "quoteExactInputSingle", params, label="Quote"
        )
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            fee=fee,
            gas_estimate=gas_estimate,
            ticks_crossed=ticks_crossed,
            sqrt_price_after=sqrt_price_after,
        )

    def quote_exact_input(self, path: bytes, amount_in: int) -> Quote:
        amount_out, _, ticks_crossed_list, gas_estimate = self._call(
            "quoteExactInput", path, amount_in, label="Multi-hop quote"
        )
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            gas_estimate=gas_estimate,
            ticks_crossed=sum(ticks_crossed_list),
        )


class AlgebraQuoter(ContractBinding):
    ABI_NAMES = ("algebra_quoter",)

    def quote_exact_input_single(
        self,
        token_in: str,
        token_out: str,
        amount_in: int,
        deployer: str = ZERO_ADDRESS,
    ) -> Quote:
        """Quote a single hop. The returned fee is the pool's current dynamic fee."""
        params = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            Web3.to_checksum_address(deployer),
            amount_in,
            0,
        )
        amount_out, fee, sqrt_price_after, ticks_crossed, gas_estimate = self._call(
            "quoteExactInputSingle", params, label="Quote"
        )
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            fee=fee,
            gas_estimate=gas_estimate,
            ticks_crossed=ticks_crossed,
            sqrt_price_after=sqrt_price_after,
        )

    def quote_exact_input(self, path: bytes, amount_in: int) -> Quote:
        amount_out, _, ticks_crossed_list, gas_estimate = self._call(
            "quoteExactInput", path, amount_in, label="Multi-hop quote"
        )
        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            gas_estimate=gas_estimate,
            ticks_crossed=sum(ticks_crossed_list),
        )
