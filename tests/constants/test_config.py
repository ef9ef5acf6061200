import pytest

from vammpy.constants.config import configs, get_spot_market_config
from vammpy.constants.numeric_constants import LAMPORTS_PRECISION, QUOTE_PRECISION
from vammpy.constants.spot_markets import WRAPPED_SOL_MINT
from vammpy.types import is_variant


def test_spot_market_lookup():
    usdc = get_spot_market_config("mainnet", 0)
    assert usdc.symbol == "USDC"
    assert usdc.mint == configs["mainnet"].usdc_mint_address
    assert usdc.precision == QUOTE_PRECISION
    assert usdc.serum_market is None
    assert is_variant(usdc.oracle_source, "QuoteAsset")

    sol = get_spot_market_config("devnet", 1)
    assert sol.mint == WRAPPED_SOL_MINT
    assert sol.precision == LAMPORTS_PRECISION
    assert sol.precision == 10**sol.precision_exp
    assert sol.serum_market is not None
    assert is_variant(sol.oracle_source, "Pyth")


def test_market_indexes_are_unique():
    for config in configs.values():
        indexes = [market.market_index for market in config.spot_markets]
        assert len(indexes) == len(set(indexes))


def test_spot_market_lookup_errors():
    with pytest.raises(ValueError):
        get_spot_market_config("mainnet", 99)

    with pytest.raises(ValueError):
        get_spot_market_config("localnet", 0)  # type: ignore
