"""Tests for SparkDex V4 (Algebra) quoting and swaps."""
import pytest

from flarekit.amm.quoting import Quote
from flarekit.chain.errors import ContractError, NetworkError
from flarekit.contracts.types import GlobalState

POOL = "0x" + "44" * 20


@pytest.mark.asyncio
async def test_single_hop_quote(sparkdex, wflr, fxrp):
    sparkdex.quoter.quote_exact_input_single.return_value = Quote(
        amount_in=10**18, amount_out=12_345, fee=250
    )
    sparkdex.factory.pool_by_pair.return_value = POOL

    quote = await sparkdex.quote(wflr, fxrp, 10**18)

    assert quote.fee == 250
    assert quote.pool_address == POOL


@pytest.mark.asyncio
async def test_multi_hop_quote_path(sparkdex, profile, wflr, fxrp):
    usdt0 = profile.tokens.resolve_token("USDT0")
    sparkdex.quoter.quote_exact_input.return_value = Quote(amount_in=10**18, amount_out=9)

    await sparkdex.quote(wflr, usdt0, 10**18, via=[fxrp])

    path = sparkdex.quoter.quote_exact_input.call_args[0][0]
    assert len(path) == 100


@pytest.mark.asyncio
async def test_quoter_failure_is_terminal(sparkdex, wflr, fxrp):
    sparkdex.quoter.quote_exact_input_single.side_effect = ContractError("Quote failed: reverted")

    with pytest.raises(ContractError):
        await sparkdex.swap(object(), wflr, fxrp, 10**18, 50)
    sparkdex.router.exact_input_single.assert_not_called()


@pytest.mark.asyncio
async def test_swap(sparkdex, signer, wflr, fxrp):
    sparkdex.quoter.quote_exact_input_single.return_value = Quote(
        amount_in=10**18, amount_out=20_000, fee=250
    )
    sparkdex.factory.pool_by_pair.return_value = POOL

    result = await sparkdex.swap(signer, wflr, fxrp, 10**18, 100)

    assert result.min_amount_out == 19_800
    args = sparkdex.router.exact_input_single.call_args[0]
    assert args[1:5] == (wflr.address, fxrp.address, 10**18, 19_800)


@pytest.mark.asyncio
async def test_pool_info(sparkdex, pool_contract, wflr, fxrp):
    sparkdex.factory.pool_by_pair.return_value = POOL
    pool_contract.global_state.return_value = GlobalState(price=2**96, tick=0, last_fee=500)
    pool_contract.liquidity.return_value = 10**20
    pool_contract.tick_spacing.return_value = 60

    info = await sparkdex.pool_info(wflr, fxrp)

    assert info.fee == 500
    assert info.tick_spacing == 60


@pytest.mark.asyncio
async def test_pool_info_missing(sparkdex, wflr, fxrp):
    sparkdex.factory.pool_by_pair.return_value = None
    assert await sparkdex.pool_info(wflr, fxrp) is None


@pytest.mark.asyncio
async def test_pool_lookup_failure_keeps_quote(sparkdex, wflr, fxrp):
    sparkdex.quoter.quote_exact_input_single.return_value = Quote(
        amount_in=10**18, amount_out=12_345, fee=250
    )
    sparkdex.factory.pool_by_pair.side_effect = NetworkError("poolByPair failed: timed out")

    quote = await sparkdex.quote(wflr, fxrp, 10**18)

    assert quote.amount_out == 12_345
    assert quote.pool_address is None
