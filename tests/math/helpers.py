from vammpy.constants.numeric_constants import (
    AMM_RESERVE_PRECISION,
    PEG_PRECISION,
    QUOTE_PRECISION,
)
from vammpy.math.amm import calculate_price, calculate_reserves_after_closing
from vammpy.types import AMM, MarketAccount, OraclePriceData

# 1_000 base / 1_000 quote at a $100 peg
MOCK_RESERVE = 1_000 * AMM_RESERVE_PRECISION
MOCK_PEG = 100 * PEG_PRECISION


def mock_amm(**overrides) -> AMM:
    amm_fields = dict(
        base_asset_reserve=MOCK_RESERVE,
        quote_asset_reserve=MOCK_RESERVE,
        sqrt_k=MOCK_RESERVE,
        peg_multiplier=MOCK_PEG,
        net_base_asset_amount=0,
        terminal_quote_asset_reserve=MOCK_RESERVE,
        total_exchange_fee=0,
        total_fee_minus_distributions=1_000 * QUOTE_PRECISION,
        base_spread=1_000,
        curve_update_intensity=100,
        quote_asset_amount_long=0,
        quote_asset_amount_short=0,
    )
    amm_fields.update(overrides)
    return AMM(**amm_fields)


def mock_users_long_amm(
    net_base_asset_amount: int = 10 * AMM_RESERVE_PRECISION, **overrides
) -> AMM:
    """Balanced curve after traders bought net_base_asset_amount out of it."""
    base_asset_reserve = MOCK_RESERVE - net_base_asset_amount
    amm = mock_amm(
        base_asset_reserve=base_asset_reserve,
        quote_asset_reserve=MOCK_RESERVE * MOCK_RESERVE // base_asset_reserve,
        net_base_asset_amount=net_base_asset_amount,
        **overrides,
    )
    amm.terminal_quote_asset_reserve, _ = calculate_reserves_after_closing(amm)
    return amm


def mock_market(amm: AMM, market_index: int = 0) -> MarketAccount:
    return MarketAccount(market_index=market_index, amm=amm)


def mark_price(amm: AMM) -> int:
    return calculate_price(
        amm.base_asset_reserve, amm.quote_asset_reserve, amm.peg_multiplier
    )


def oracle_at(price: int, confidence: int = 0) -> OraclePriceData:
    return OraclePriceData.from_price(price, confidence)


def oracle_at_mark(amm: AMM, confidence: int = 0) -> OraclePriceData:
    return oracle_at(mark_price(amm), confidence)
