from typing import Optional

from vammpy.types import (
    MarketAccount,
    OraclePriceData,
    PositionDirection,
    SpreadPolicy,
)


def calculate_mark_price(market: MarketAccount) -> int:
    from vammpy.math.amm import calculate_price

    return calculate_price(
        market.amm.base_asset_reserve,
        market.amm.quote_asset_reserve,
        market.amm.peg_multiplier,
    )


def calculate_bid_price(
    market: MarketAccount,
    oracle_price_data: OraclePriceData,
    policy: Optional[SpreadPolicy] = None,
) -> int:
    from vammpy.math.amm import calculate_updated_amm_spread_reserves, calculate_price

    (
        base_asset_reserve,
        quote_asset_reserve,
        _,
        new_peg,
    ) = calculate_updated_amm_spread_reserves(
        market.amm, PositionDirection.Short(), oracle_price_data, policy
    )

    return calculate_price(base_asset_reserve, quote_asset_reserve, new_peg)


def calculate_ask_price(
    market: MarketAccount,
    oracle_price_data: OraclePriceData,
    policy: Optional[SpreadPolicy] = None,
) -> int:
    from vammpy.math.amm import calculate_updated_amm_spread_reserves, calculate_price

    (
        base_asset_reserve,
        quote_asset_reserve,
        _,
        new_peg,
    ) = calculate_updated_amm_spread_reserves(
        market.amm, PositionDirection.Long(), oracle_price_data, policy
    )

    return calculate_price(base_asset_reserve, quote_asset_reserve, new_peg)
