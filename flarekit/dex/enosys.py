"""
Enosys V3 service: positions, quotes, swaps and liquidity management on
a Uniswap V3 deployment.

Quotes come from QuoterV2. When the quoter call itself fails, a spot-price
estimate from the pool's slot0 is returned instead, flagged as a naive
fallback and carrying a warning; swaps refuse to execute against such an
estimate.
"""

import asyncio
import math
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Sequence, Tuple

from eth_account.signers.local import LocalAccount

from ..amm.path import encode_v3_path
from ..amm.quoting import Quote, high_impact_warning, min_amount_out, naive_quote
from ..amm.tick_math import align_ticks, range_to_ticks
from ..chain.client import ChainClient, TxResult
from ..chain.errors import ContractError, FlareKitError, ValidationError
from ..config.tokens import TokenInfo
from ..contracts.pools import V3Factory, V3Pool
from ..contracts.position_manager import PositionManager
from ..contracts.quoters import V3Quoter
from ..contracts.routers import V3Router
from ..contracts.types import MintParams, Position, PositionData
from .base import DexService, PoolInfo, SwapResult

PROTOCOL = "enosys_v3"


@dataclass
class MintResult:
    tx: TxResult
    token_id: Optional[int]
    token0: TokenInfo
    token1: TokenInfo
    tick_lower: int
    tick_upper: int
    current_tick: int


@dataclass
class RemoveResult:
    decrease_tx: TxResult
    collect_tx: TxResult
    liquidity_removed: int
    burned: bool = False


class EnosysV3Service(DexService):
    """Uniswap V3 operations against the Enosys deployment."""

    def __init__(
        self,
        client: ChainClient,
        profile,
        position_manager: Optional[PositionManager] = None,
        factory: Optional[V3Factory] = None,
        quoter: Optional[V3Quoter] = None,
        router: Optional[V3Router] = None,
    ):
        super().__init__(client, profile)
        contracts = profile.protocols
        self.fee_tiers = list(contracts.V3_FEE_TIERS)
        self.fallback_tick_spacing = contracts.FALLBACK_TICK_SPACING
        self.high_impact_ticks = contracts.HIGH_IMPACT_TICKS
        self.deadline_seconds = contracts.DEADLINE_SECONDS

        self.position_manager = position_manager or PositionManager(
            client, profile.contract(PROTOCOL, "position_manager")
        )
        self.factory = factory or V3Factory(client, profile.contract(PROTOCOL, "factory"))
        self.quoter = quoter or V3Quoter(client, profile.contract(PROTOCOL, "quoter"))
        self.router = router or V3Router(client, profile.contract(PROTOCOL, "swap_router"))

    def pool(self, address: str) -> V3Pool:
        return V3Pool(self.client, address)

    # ── Positions ───────────────────────────────────────────────────────────

    async def get_position(self, token_id: int) -> PositionData:
        return await self.client.run(self.position_manager.positions, token_id)

    async def fetch_positions(self, owner: str) -> List[Position]:
        """
        All positions owned by an address, joined with their pool state.

        A position whose pool can't be found is returned with no current
        tick and the fallback tick spacing.
        """
        pm = self.position_manager
        count = await self.client.run(pm.balance_of, owner)
        if count == 0:
            return []

        token_ids = await self.client.gather(
            *[partial(pm.token_of_owner_by_index, owner, i) for i in range(count)]
        )
        raw_positions = await self.client.gather(
            *[partial(pm.positions, token_id) for token_id in token_ids]
        )
        pool_addresses = await self.client.gather(
            *[partial(self.factory.get_pool, d.token0, d.token1, d.fee) for d in raw_positions]
        )

        positions = []
        for token_id, data, pool_address in zip(token_ids, raw_positions, pool_addresses):
            current_tick = None
            sqrt_price = None
            spacing = self.fallback_tick_spacing
            if pool_address:
                pool = self.pool(pool_address)
                slot0, spacing = await self.client.gather(pool.slot0, pool.tick_spacing)
                current_tick = slot0.tick
                sqrt_price = slot0.sqrt_price_x96
            else:
                self.logger.warning(
                    f"No pool for position #{token_id}; using tick spacing {spacing}"
                )

            positions.append(
                Position(
                    token_id=token_id,
                    token0=data.token0,
                    token1=data.token1,
                    fee=data.fee,
                    tick_lower=data.tick_lower,
                    tick_upper=data.tick_upper,
                    liquidity=data.liquidity,
                    tokens_owed0=data.tokens_owed0,
                    tokens_owed1=data.tokens_owed1,
                    pool_address=pool_address,
                    current_tick=current_tick,
                    tick_spacing=spacing,
                    sqrt_price_x96=sqrt_price,
                )
            )
        return positions

    # ── Quotes ──────────────────────────────────────────────────────────────

    async def quote(self, token_in: TokenInfo, token_out: TokenInfo, amount_in: int,
                    fee: int) -> Optional[Quote]:
        """
        Quote an exact-input single-hop swap through one fee tier.

        Returns:
            Quote from QuoterV2, a naive fallback Quote if the quoter call
            fails, or None if there is no pool for the tier
        """
        try:
            quote = await self.client.run(
                self.quoter.quote_exact_input_single,
                token_in.address, token_out.address, amount_in, fee,
            )
        except FlareKitError as e:
            self.logger.warning(f"⚠️ QuoterV2 call failed for fee={fee}: {e}")
            self.logger.warning("Falling back to naive price estimate, results may be inaccurate")
            return await self._naive_quote(token_in, token_out, amount_in, fee)

        # Display only; the quote stands without it
        try:
            quote.pool_address = await self.client.run(
                self.factory.get_pool, token_in.address, token_out.address, fee
            )
        except FlareKitError as e:
            self.logger.debug(f"Pool lookup failed for fee={fee}: {e}")
        quote.warning = high_impact_warning(quote, self.high_impact_ticks)
        return quote

    async def _naive_quote(self, token_in: TokenInfo, token_out: TokenInfo, amount_in: int,
                           fee: int) -> Optional[Quote]:
        pool_address = await self.client.run(
            self.factory.get_pool, token_in.address, token_out.address, fee
        )
        if not pool_address:
            return None

        pool = self.pool(pool_address)
        slot0, token0, liquidity = await self.client.gather(
            pool.slot0, pool.token0, pool.liquidity
        )
        return naive_quote(
            amount_in,
            slot0.sqrt_price_x96,
            fee,
            token_in_is_token0=token_in.address.lower() == token0.lower(),
            liquidity=liquidity,
            pool_address=pool_address,
        )

    async def _tier_quote(self, token_in: TokenInfo, token_out: TokenInfo, amount_in: int,
                          fee: int) -> Optional[Quote]:
        try:
            return await self.quote(token_in, token_out, amount_in, fee)
        except FlareKitError as e:
            self.logger.debug(f"Skipping fee tier {fee}: {e}")
            return None

    async def best_quote(self, token_in: TokenInfo, token_out: TokenInfo,
                         amount_in: int) -> Tuple[Optional[Quote], List[Quote]]:
        """
        Best quote across all fee tiers, quoted concurrently.

        Tiers without a pool, with zero output, or whose quote fails
        entirely are skipped.

        Returns:
            (best quote or None, all usable quotes)
        """
        quotes = await asyncio.gather(
            *[self._tier_quote(token_in, token_out, amount_in, fee) for fee in self.fee_tiers]
        )
        candidates = [q for q in quotes if q is not None and q.amount_out > 0]
        best = max(candidates, key=lambda q: q.amount_out, default=None)
        return best, candidates

    async def quote_path(self, tokens: Sequence[TokenInfo], fees: Sequence[int],
                         amount_in: int) -> Quote:
        """Multi-hop quote. No fallback: quoter errors propagate."""
        path = encode_v3_path([t.address for t in tokens], list(fees))
        quote = await self.client.run(self.quoter.quote_exact_input, path, amount_in)
        quote.warning = high_impact_warning(quote, self.high_impact_ticks)
        return quote

    async def pool_info(self, token_a: TokenInfo, token_b: TokenInfo,
                        fees: Optional[Sequence[int]] = None) -> List[PoolInfo]:
        """State of every existing pool for a pair across the given fee tiers."""
        fees = list(fees or self.fee_tiers)
        addresses = await self.client.gather(
            *[partial(self.factory.get_pool, token_a.address, token_b.address, fee) for fee in fees]
        )

        pools = []
        for fee, address in zip(fees, addresses):
            if not address:
                continue
            pool = self.pool(address)
            slot0, liquidity, spacing = await self.client.gather(
                pool.slot0, pool.liquidity, pool.tick_spacing
            )
            pools.append(
                PoolInfo(
                    address=address,
                    fee=fee,
                    tick=slot0.tick,
                    sqrt_price_x96=slot0.sqrt_price_x96,
                    liquidity=liquidity,
                    tick_spacing=spacing,
                )
            )
        return pools

    # ── Swaps ───────────────────────────────────────────────────────────────

    async def swap(
        self,
        signer: LocalAccount,
        token_in: TokenInfo,
        token_out: TokenInfo,
        amount_in: int,
        slippage_bips: int,
        fee: Optional[int] = None,
        via: Optional[Sequence[TokenInfo]] = None,
        fees: Optional[Sequence[int]] = None,
    ) -> SwapResult:
        """
        Quote, check balance and allowance, then swap.

        Single hop through `fee` (default tier when None), or multi-hop
        through `via` tokens with one fee per hop.

        Raises:
            ContractError: If there is no pool, or only a naive estimate is available
            InsufficientFundsError: If the input balance is too low
        """
        if via:
            tokens = [token_in, *via, token_out]
            hop_fees = list(fees) if fees else [fee or self.profile.protocols.DEFAULT_FEE] * (len(tokens) - 1)
            path = encode_v3_path([t.address for t in tokens], hop_fees)
            quote = await self.quote_path(tokens, hop_fees, amount_in)
        else:
            path = None
            fee = fee or self.profile.protocols.DEFAULT_FEE
            quote = await self.quote(token_in, token_out, amount_in, fee)
            if quote is None:
                raise ContractError(
                    f"No pool for {token_in.symbol}/{token_out.symbol} at fee {fee}"
                )
            if quote.is_naive_fallback:
                raise ContractError(
                    "QuoterV2 is unavailable for this pool; refusing to swap on a naive estimate"
                )

        minimum = min_amount_out(quote.amount_out, slippage_bips)
        await self.client.run(self.require_balance, signer, token_in, amount_in)
        approved = await self.client.run(
            self.ensure_allowance, signer, token_in, self.router.address, amount_in
        )

        deadline = self.deadline(self.deadline_seconds)
        if path is not None:
            tx = await self.client.run(
                self.router.exact_input, signer, path, amount_in, minimum, deadline
            )
        else:
            tx = await self.client.run(
                self.router.exact_input_single,
                signer, token_in.address, token_out.address, fee, amount_in, minimum, deadline,
            )
        return SwapResult(tx=tx, quote=quote, min_amount_out=minimum, approved=approved)

    # ── Liquidity ───────────────────────────────────────────────────────────

    async def mint_position(
        self,
        signer: LocalAccount,
        token_a: TokenInfo,
        token_b: TokenInfo,
        amount_a: int,
        amount_b: int,
        fee: int,
        range_pct: float = 10.0,
        tick_lower: Optional[int] = None,
        tick_upper: Optional[int] = None,
    ) -> MintResult:
        """
        Mint a new position around the current price.

        Tokens are sorted by address; explicit ticks override range_pct and
        are aligned outward to the pool's tick spacing.

        Raises:
            ContractError: If the pool doesn't exist
            ValidationError: If the resulting tick range is empty
            InsufficientFundsError: If either token balance is too low
        """
        if token_a.address.lower() < token_b.address.lower():
            token0, token1, amount0, amount1 = token_a, token_b, amount_a, amount_b
        else:
            token0, token1, amount0, amount1 = token_b, token_a, amount_b, amount_a

        pool_address = await self.client.run(
            self.factory.get_pool, token0.address, token1.address, fee
        )
        if not pool_address:
            raise ContractError(
                f"Pool does not exist for {token0.symbol}/{token1.symbol} at fee {fee}"
            )
        pool = self.pool(pool_address)
        slot0, spacing = await self.client.gather(pool.slot0, pool.tick_spacing)

        if tick_lower is not None and tick_upper is not None:
            lower, upper = align_ticks(tick_lower, tick_upper, spacing)
        elif tick_lower is not None or tick_upper is not None:
            raise ValidationError("Pass both --tick-lower and --tick-upper, or neither")
        else:
            lower, upper = range_to_ticks(slot0.tick, range_pct, spacing)

        await self.client.gather(
            partial(self.require_balance, signer, token0, amount0),
            partial(self.require_balance, signer, token1, amount1),
        )
        for token, amount in ((token0, amount0), (token1, amount1)):
            await self.client.run(
                self.ensure_allowance, signer, token, self.position_manager.address, amount
            )

        params = MintParams(
            token0=token0.address,
            token1=token1.address,
            fee=fee,
            tick_lower=lower,
            tick_upper=upper,
            amount0_desired=amount0,
            amount1_desired=amount1,
            amount0_min=0,
            amount1_min=0,
            recipient=signer.address,
            deadline=self.deadline(self.deadline_seconds),
        )
        tx = await self.client.run(self.position_manager.mint, signer, params)
        return MintResult(
            tx=tx,
            token_id=self.position_manager.minted_token_id(tx),
            token0=token0,
            token1=token1,
            tick_lower=lower,
            tick_upper=upper,
            current_tick=slot0.tick,
        )

    async def add_liquidity(self, signer: LocalAccount, token_id: int,
                            amount0: int, amount1: int) -> TxResult:
        if amount0 == 0 and amount1 == 0:
            raise ValidationError("Nothing to add: both amounts are zero")

        data = await self.get_position(token_id)
        tokens = self.profile.tokens
        for address, amount in ((data.token0, amount0), (data.token1, amount1)):
            if amount > 0:
                token = tokens.token_by_address(address) or TokenInfo(address, address, None)
                await self.client.run(self.require_balance, signer, token, amount)
                await self.client.run(
                    self.ensure_allowance, signer, token, self.position_manager.address, amount
                )

        return await self.client.run(
            self.position_manager.increase_liquidity,
            signer, token_id, amount0, amount1, self.deadline(self.deadline_seconds),
        )

    async def remove_liquidity(self, signer: LocalAccount, token_id: int,
                               percent: float = 100.0) -> Optional[RemoveResult]:
        """
        Withdraw a share of a position's liquidity and collect the tokens.

        At 100% the position NFT is burned afterwards; a failed burn is
        logged and does not fail the removal.

        Returns:
            RemoveResult, or None if the position has no liquidity
        """
        if not 0 < percent <= 100:
            raise ValidationError(f"Percent must be in (0, 100], got {percent}")

        data = await self.get_position(token_id)
        if data.liquidity == 0:
            return None

        pm = self.position_manager
        liquidity = data.liquidity * math.floor(percent * 100) // 10_000
        decrease_tx = await self.client.run(
            pm.decrease_liquidity, signer, token_id, liquidity, self.deadline(self.deadline_seconds)
        )
        collect_tx = await self.client.run(pm.collect, signer, token_id, signer.address)
        result = RemoveResult(
            decrease_tx=decrease_tx, collect_tx=collect_tx, liquidity_removed=liquidity
        )

        if percent >= 100:
            try:
                await self.client.run(pm.burn, signer, token_id)
                result.burned = True
            except FlareKitError as e:
                self.logger.warning(f"⚠ Could not burn position #{token_id}: {e}")
        return result

    async def collect_fees(self, signer: LocalAccount, token_id: int) -> TxResult:
        return await self.client.run(
            self.position_manager.collect, signer, token_id, signer.address
        )
