import logging

from vammpy.constants.numeric_constants import (
    AMM_RESERVE_PRECISION,
    PEG_PRECISION,
    PRICE_PRECISION,
    QUOTE_PRECISION,
)
from vammpy.math.amm import (
    calculate_bid_ask_price,
    calculate_max_base_asset_amount_to_trade,
    calculate_reserves_after_closing,
    calculate_updated_amm,
)
from vammpy.math.conversion import convert_to_number
from vammpy.math.market import calculate_mark_price
from vammpy.types import AMM, MarketAccount, OraclePriceData, PositionDirection


def build_market() -> MarketAccount:
    reserve = 1_000 * AMM_RESERVE_PRECISION
    base = reserve - 10 * AMM_RESERVE_PRECISION
    amm = AMM(
        base_asset_reserve=base,
        quote_asset_reserve=reserve * reserve // base,
        sqrt_k=reserve,
        peg_multiplier=100 * PEG_PRECISION,
        net_base_asset_amount=10 * AMM_RESERVE_PRECISION,
        total_exchange_fee=20_000 * QUOTE_PRECISION,
        total_fee_minus_distributions=15_000 * QUOTE_PRECISION,
        base_spread=1_000,
        curve_update_intensity=100,
    )
    amm.terminal_quote_asset_reserve = calculate_reserves_after_closing(amm)[0]
    return MarketAccount(market_index=0, amm=amm)


def main():
    logging.basicConfig(level=logging.DEBUG)

    market = build_market()
    mark_price = calculate_mark_price(market)
    oracle = OraclePriceData.from_price(
        mark_price * 105 // 100, confidence=PRICE_PRECISION // 100
    )

    print(f"Mark Price: ${convert_to_number(mark_price):.4f}")
    print(f"Oracle Price: ${convert_to_number(oracle.price):.4f}")

    bid, ask = calculate_bid_ask_price(market.amm, oracle)
    print(f"Bid: ${convert_to_number(bid):.4f}  Ask: ${convert_to_number(ask):.4f}")

    updated = calculate_updated_amm(market.amm, oracle)
    print(f"Peg: {market.amm.peg_multiplier} -> {updated.peg_multiplier}")
    print(
        "Fee Pool: "
        f"${convert_to_number(updated.total_fee_minus_distributions, QUOTE_PRECISION):.2f}"
    )

    size, direction = calculate_max_base_asset_amount_to_trade(
        market.amm, oracle.price, PositionDirection.Long(), oracle
    )
    print(
        f"Max {direction.__class__.__name__} to oracle: "
        f"{convert_to_number(size, AMM_RESERVE_PRECISION):.4f}"
    )


if __name__ == "__main__":
    main()
