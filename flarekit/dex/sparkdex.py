"""
SparkDex V4 service: quotes and swaps on an Algebra Integral deployment.

Algebra pools have one pool per pair with a dynamic fee, so there are no
fee tiers to choose from. Quoter failures are terminal.
"""

from typing import Optional, Sequence

from eth_account.signers.local import LocalAccount

from ..amm.path import encode_algebra_path
from ..amm.quoting import Quote, high_impact_warning, min_amount_out
from ..chain.client import ChainClient
from ..chain.errors import FlareKitError
from ..config.tokens import TokenInfo
from ..contracts.pools import AlgebraFactory, AlgebraPool
from ..contracts.quoters import AlgebraQuoter
from ..contracts.routers import AlgebraRouter
from .base import DexService, PoolInfo, SwapResult

PROTOCOL = "sparkdex_v4"


class SparkDexV4Service(DexService):
    """Algebra Integral operations against the SparkDex deployment."""

    def __init__(
        self,
        client: ChainClient,
        profile,
        factory: Optional[AlgebraFactory] = None,
        quoter: Optional[AlgebraQuoter] = None,
        router: Optional[AlgebraRouter] = None,
    ):
        super().__init__(client, profile)
        self.high_impact_ticks = profile.protocols.HIGH_IMPACT_TICKS
        self.deadline_seconds = profile.protocols.DEADLINE_SECONDS
        self.factory = factory or AlgebraFactory(client, profile.contract(PROTOCOL, "factory"))
        self.quoter = quoter or AlgebraQuoter(client, profile.contract(PROTOCOL, "quoter"))
        self.router = router or AlgebraRouter(client, profile.contract(PROTOCOL, "swap_router"))

    def pool(self, address: str) -> AlgebraPool:
        return AlgebraPool(self.client, address)

    async def quote(
        self,
        token_in: TokenInfo,
        token_out: TokenInfo,
        amount_in: int,
        via: Optional[Sequence[TokenInfo]] = None,
    ) -> Quote:
        """
        Quote a swap, single hop or through intermediate `via` tokens.

        Single-hop quotes report the pool's current dynamic fee; multi-hop
        quotes carry no fee.
        """
        if via:
            tokens = [token_in.address, *[t.address for t in via], token_out.address]
            quote = await self.client.run(
                self.quoter.quote_exact_input, encode_algebra_path(tokens), amount_in
            )
        else:
            quote = await self.client.run(
                self.quoter.quote_exact_input_single, token_in.address, token_out.address, amount_in
            )
            try:
                quote.pool_address = await self.client.run(
                    self.factory.pool_by_pair, token_in.address, token_out.address
                )
            except FlareKitError as e:
                self.logger.debug(f"Pool lookup failed: {e}")

        quote.warning = high_impact_warning(quote, self.high_impact_ticks)
        return quote

    async def pool_info(self, token_a: TokenInfo, token_b: TokenInfo) -> Optional[PoolInfo]:
        """Pool state for a pair, None if there is no pool."""
        address = await self.client.run(self.factory.pool_by_pair, token_a.address, token_b.address)
        if not address:
            return None

        pool = self.pool(address)
        state, liquidity, spacing = await self.client.gather(
            pool.global_state, pool.liquidity, pool.tick_spacing
        )
        return PoolInfo(
            address=address,
            fee=state.last_fee,
            tick=state.tick,
            sqrt_price_x96=state.price,
            liquidity=liquidity,
            tick_spacing=spacing,
        )

    async def swap(
        self,
        signer: LocalAccount,
        token_in: TokenInfo,
        token_out: TokenInfo,
        amount_in: int,
        slippage_bips: int,
        via: Optional[Sequence[TokenInfo]] = None,
    ) -> SwapResult:
        """
        Quote, check balance and allowance, then swap single or multi-hop.

        Raises:
            ContractError: If the quote or the swap reverts
            InsufficientFundsError: If the input balance is too low
        """
        quote = await self.quote(token_in, token_out, amount_in, via)
        minimum = min_amount_out(quote.amount_out, slippage_bips)

        await self.client.run(self.require_balance, signer, token_in, amount_in)
        approved = await self.client.run(
            self.ensure_allowance, signer, token_in, self.router.address, amount_in
        )

        deadline = self.deadline(self.deadline_seconds)
        if via:
            tokens = [token_in.address, *[t.address for t in via], token_out.address]
            tx = await self.client.run(
                self.router.exact_input, signer, encode_algebra_path(tokens), amount_in, minimum, deadline
            )
        else:
            tx = await self.client.run(
                self.router.exact_input_single,
                signer, token_in.address, token_out.address, amount_in, minimum, deadline,
            )
        return SwapResult(tx=tx, quote=quote, min_amount_out=minimum, approved=approved)
