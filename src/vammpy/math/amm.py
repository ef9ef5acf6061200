import logging
import math
from copy import deepcopy
from dataclasses import fields
from typing import Any, Callable, Optional, Tuple

from vammpy.constants.numeric_constants import (
    AMM_TIMES_PEG_TO_QUOTE_PRECISION_RATIO,
    AMM_TO_QUOTE_PRECISION_RATIO,
    BID_ASK_SPREAD_PRECISION,
    K_SHRINK_DENOMINATOR,
    K_SHRINK_NUMERATOR,
    MAX_INVENTORY_SKEW,
    MAX_TARGET_SPREAD,
    MIN_SPREAD_SCALE,
    PEG_PRECISION,
    PRICE_DIV_PEG,
    PRICE_PRECISION,
    QUOTE_PRECISION,
)
from vammpy.errors import DeficitNotMadeUpError, InvalidSwapAmountError
from vammpy.math.repeg import (
    calculate_adjust_k_cost,
    calculate_budgeted_peg,
    calculate_repeg_cost,
)
from vammpy.math.utils import square_root
from vammpy.types import (
    AMM,
    AssetType,
    MarketAccount,
    OraclePriceData,
    PositionDirection,
    SpreadPolicy,
    SpreadTrace,
    SwapDirection,
    is_variant,
)

logger = logging.getLogger(__name__)


def deepcopy_amm(amm: AMM) -> AMM:
    field_values = {}
    for field in fields(AMM):
        field_values[field.name] = deepcopy(getattr(amm, field.name))
    return AMM(**field_values)


def _emit_spread_terms(
    trace: Optional[SpreadTrace], stage: str, terms: dict[str, Any]
) -> None:
    logger.debug("spread %s: %s", stage, terms)
    if trace is not None:
        trace(stage, terms)


def calculate_price(
    base_asset_amount: int, quote_asset_amount: int, peg_multiplier: int
) -> int:
    """
    Calculates a price given an arbitrary base and quote amount (they must have the same precision)

    :return: price, precision PRICE_PRECISION
    """
    if base_asset_amount <= 0:
        return 0
    else:
        return (
            quote_asset_amount
            * PRICE_PRECISION
            * peg_multiplier
            // PEG_PRECISION
            // base_asset_amount
        )


def calculate_peg_from_target_price(
    target_price: int, base_asset_reserves: int, quote_asset_reserves: int
) -> int:
    peg_maybe = (
        ((target_price * base_asset_reserves) // quote_asset_reserves)
        + (PRICE_DIV_PEG // 2)
    ) // PRICE_DIV_PEG
    return max(peg_maybe, 1)


def calculate_swap_output(
    input_asset_reserve: int,
    swap_amount: int,
    swap_direction: SwapDirection,
    invariant: int,
) -> Tuple[int, int]:
    """
    Constant product curve output, agnostic to whether the input asset is quote or base.

    The output reserve is floor divided, so it always rounds in the pool's favour.
    """
    if swap_amount < 0:
        raise InvalidSwapAmountError(swap_amount)

    if is_variant(swap_direction, "Add"):
        new_input_asset_reserve = input_asset_reserve + swap_amount
    else:
        new_input_asset_reserve = input_asset_reserve - swap_amount

    new_output_asset_reserve = invariant // new_input_asset_reserve

    return (new_input_asset_reserve, new_output_asset_reserve)


def calculate_amm_reserves_after_swap(
    amm: AMM,
    input_asset_type: AssetType,
    swap_amount: int,
    swap_direction: SwapDirection,
) -> Tuple[int, int]:
    """
    Returns (quote_asset_reserve, base_asset_reserve) after swapping a quote or base amount.
    """
    invariant = amm.sqrt_k * amm.sqrt_k

    if is_variant(input_asset_type, "QUOTE"):
        swap_amount = (
            swap_amount * AMM_TIMES_PEG_TO_QUOTE_PRECISION_RATIO
        ) // amm.peg_multiplier

        (new_quote_asset_reserve, new_base_asset_reserve) = calculate_swap_output(
            amm.quote_asset_reserve,
            swap_amount,
            swap_direction,
            invariant,
        )
    else:
        (new_base_asset_reserve, new_quote_asset_reserve) = calculate_swap_output(
            amm.base_asset_reserve, swap_amount, swap_direction, invariant
        )

    return (new_quote_asset_reserve, new_base_asset_reserve)


def get_swap_direction(
    input_asset_type: AssetType, position_direction: PositionDirection
) -> SwapDirection:
    if is_variant(position_direction, "Long") and is_variant(input_asset_type, "BASE"):
        return SwapDirection.Remove()

    if is_variant(position_direction, "Short") and is_variant(
        input_asset_type, "QUOTE"
    ):
        return SwapDirection.Remove()

    return SwapDirection.Add()


def calculate_reserves_after_closing(amm: AMM) -> Tuple[int, int]:
    """
    Reserves the curve would reach if the net base asset amount were fully closed.
    """
    direction_to_close = (
        PositionDirection.Short()
        if amm.net_base_asset_amount > 0
        else PositionDirection.Long()
    )

    return calculate_amm_reserves_after_swap(
        amm,
        AssetType.BASE(),
        abs(amm.net_base_asset_amount),
        get_swap_direction(AssetType.BASE(), direction_to_close),
    )


def scale_amm_depth(amm: AMM, numerator: int, denominator: int) -> AMM:
    new_amm = deepcopy_amm(amm)

    new_amm.base_asset_reserve = (new_amm.base_asset_reserve * numerator) // denominator
    new_amm.sqrt_k = (new_amm.sqrt_k * numerator) // denominator

    invariant = new_amm.sqrt_k * new_amm.sqrt_k
    new_amm.quote_asset_reserve = invariant // new_amm.base_asset_reserve

    return new_amm


def calculate_new_amm(
    amm: AMM,
    oracle_price_data: OraclePriceData,
    repeg_cost: Callable[[AMM, int], int] = calculate_repeg_cost,
    adjust_k_cost: Callable[[AMM, int, int], int] = calculate_adjust_k_cost,
    budgeted_peg: Callable[[AMM, int, int], int] = calculate_budgeted_peg,
) -> Tuple[int, int, int, int]:
    """
    Decides the peg to move to and whether the curve depth has to shrink to afford it.

    :return: (pre_peg_cost, k_numerator, k_denominator, new_peg)
    """
    p_k_numer = 1
    p_k_denom = 1

    target_price = oracle_price_data.price
    new_peg = calculate_peg_from_target_price(
        target_price, amm.base_asset_reserve, amm.quote_asset_reserve
    )
    pre_peg_cost = repeg_cost(amm, new_peg)

    total_fee_lb = amm.total_exchange_fee // 2
    budget = max(0, amm.total_fee_minus_distributions - total_fee_lb)

    logger.debug(
        "repeg to %s costs %s against budget %s", new_peg, pre_peg_cost, budget
    )

    if pre_peg_cost > budget:
        p_k_numer = K_SHRINK_NUMERATOR
        p_k_denom = K_SHRINK_DENOMINATOR

        deficit_makeup = adjust_k_cost(amm, p_k_numer, p_k_denom)

        if deficit_makeup > 0:
            raise DeficitNotMadeUpError(deficit_makeup, p_k_numer, p_k_denom)

        new_budget = budget + abs(deficit_makeup)

        new_amm = scale_amm_depth(amm, p_k_numer, p_k_denom)
        new_amm.terminal_quote_asset_reserve, _ = calculate_reserves_after_closing(
            new_amm
        )

        new_peg = budgeted_peg(new_amm, new_budget, target_price)
        pre_peg_cost = repeg_cost(new_amm, new_peg)

        logger.debug(
            "shrinking k by %s/%s freed %s, budgeted peg %s costs %s",
            p_k_numer,
            p_k_denom,
            abs(deficit_makeup),
            new_peg,
            pre_peg_cost,
        )

    return (pre_peg_cost, p_k_numer, p_k_denom, new_peg)


def calculate_updated_amm(
    amm: AMM,
    oracle_price_data: Optional[OraclePriceData],
    repeg_cost: Callable[[AMM, int], int] = calculate_repeg_cost,
    adjust_k_cost: Callable[[AMM, int, int], int] = calculate_adjust_k_cost,
    budgeted_peg: Callable[[AMM, int, int], int] = calculate_budgeted_peg,
) -> AMM:
    if amm.curve_update_intensity == 0 or oracle_price_data is None:
        return amm

    (prepeg_cost, p_k_numer, p_k_denom, new_peg) = calculate_new_amm(
        amm,
        oracle_price_data,
        repeg_cost=repeg_cost,
        adjust_k_cost=adjust_k_cost,
        budgeted_peg=budgeted_peg,
    )

    new_amm = scale_amm_depth(amm, p_k_numer, p_k_denom)
    new_amm.peg_multiplier = new_peg

    new_amm.terminal_quote_asset_reserve, _ = calculate_reserves_after_closing(
        new_amm
    )
    new_amm.total_fee_minus_distributions = (
        new_amm.total_fee_minus_distributions - prepeg_cost
    )

    return new_amm


def calculate_target_mark_spread_pct(reserve_price: int, target_price: int) -> int:
    if reserve_price == 0:
        return 0

    return ((reserve_price - target_price) * BID_ASK_SPREAD_PRECISION) // reserve_price


def calculate_net_base_asset_value(
    quote_asset_reserve: int, terminal_quote_asset_reserve: int, peg_multiplier: int
) -> int:
    return (
        (quote_asset_reserve - terminal_quote_asset_reserve) * peg_multiplier
    ) // AMM_TIMES_PEG_TO_QUOTE_PRECISION_RATIO


def calculate_local_base_asset_value(
    net_base_asset_amount: int, reserve_price: int
) -> int:
    return (net_base_asset_amount * reserve_price) // (
        AMM_TO_QUOTE_PRECISION_RATIO * PRICE_PRECISION
    )


def calculate_spread_bn(
    base_spread: int,
    last_oracle_mark_spread_pct: int,
    last_oracle_conf_pct: int,
    quote_asset_reserve: int,
    terminal_quote_asset_reserve: int,
    peg_multiplier: int,
    net_base_asset_amount: int,
    mark_price: int,
    total_fee_minus_distributions: int,
    return_terms: bool = False,
):
    """
    Long and short half spreads computed together.

    Oracle retreat is widened by the oracle confidence and the inventory skew
    is measured on position value alone, without the cost basis.
    """
    spread_terms = {
        "long_spread_w_ps": 0,
        "short_spread_w_ps": 0,
        "net_base_asset_value": 0,
        "local_base_asset_value": 0,
        "effective_leverage": 0,
        "spread_scale": 0,
        "long_spread": 0,
        "short_spread": 0,
    }

    long_spread = base_spread // 2
    short_spread = base_spread // 2

    if last_oracle_mark_spread_pct > 0:
        short_spread = max(
            short_spread, abs(last_oracle_mark_spread_pct) + last_oracle_conf_pct
        )
    elif last_oracle_mark_spread_pct < 0:
        long_spread = max(
            long_spread, abs(last_oracle_mark_spread_pct) + last_oracle_conf_pct
        )

    spread_terms["long_spread_w_ps"] = long_spread
    spread_terms["short_spread_w_ps"] = short_spread

    # inventory skew
    net_base_asset_value = calculate_net_base_asset_value(
        quote_asset_reserve, terminal_quote_asset_reserve, peg_multiplier
    )
    local_base_asset_value = calculate_local_base_asset_value(
        net_base_asset_amount, mark_price
    )

    spread_terms["net_base_asset_value"] = net_base_asset_value
    spread_terms["local_base_asset_value"] = local_base_asset_value

    effective_leverage = MAX_INVENTORY_SKEW
    spread_scale = MAX_INVENTORY_SKEW

    if total_fee_minus_distributions > 0:
        effective_leverage = (
            max(0, local_base_asset_value - net_base_asset_value)
            / (total_fee_minus_distributions + 1)
            + 1 / QUOTE_PRECISION
        )
        spread_scale = min(MAX_INVENTORY_SKEW, 1 + effective_leverage)

        # cap the scale to attempt to only scale up to MAX_TARGET_SPREAD
        # always let the oracle retreat methods go through 100%
        if net_base_asset_amount > 0:
            if spread_scale * long_spread > MAX_TARGET_SPREAD:
                spread_scale = max(MIN_SPREAD_SCALE, MAX_TARGET_SPREAD / long_spread)
            long_spread *= spread_scale
        else:
            if spread_scale * short_spread > MAX_TARGET_SPREAD:
                spread_scale = max(MIN_SPREAD_SCALE, MAX_TARGET_SPREAD / short_spread)
            short_spread *= spread_scale
    else:
        long_spread *= MAX_INVENTORY_SKEW
        short_spread *= MAX_INVENTORY_SKEW

    long_spread = math.floor(long_spread)
    short_spread = math.floor(short_spread)

    spread_terms["effective_leverage"] = effective_leverage
    spread_terms["spread_scale"] = spread_scale
    spread_terms["long_spread"] = long_spread
    spread_terms["short_spread"] = short_spread

    if return_terms:
        return spread_terms
    return long_spread, short_spread


def calculate_bilateral_spread(
    amm: AMM,
    oracle_price_data: Optional[OraclePriceData],
    trace: Optional[SpreadTrace] = None,
) -> Tuple[int, int]:
    if amm.base_spread == 0 or amm.curve_update_intensity == 0:
        return amm.base_spread // 2, amm.base_spread // 2

    reserve_price = calculate_price(
        amm.base_asset_reserve, amm.quote_asset_reserve, amm.peg_multiplier
    )

    target_price = (oracle_price_data and oracle_price_data.price) or reserve_price
    conf_interval = (oracle_price_data and oracle_price_data.confidence) or 0

    target_mark_spread_pct = calculate_target_mark_spread_pct(
        reserve_price, target_price
    )
    conf_interval_pct = (
        (conf_interval * BID_ASK_SPREAD_PRECISION) // reserve_price
        if reserve_price
        else 0
    )

    spread_terms = calculate_spread_bn(
        amm.base_spread,
        target_mark_spread_pct,
        conf_interval_pct,
        amm.quote_asset_reserve,
        amm.terminal_quote_asset_reserve,
        amm.peg_multiplier,
        amm.net_base_asset_amount,
        reserve_price,
        amm.total_fee_minus_distributions,
        return_terms=True,
    )
    _emit_spread_terms(trace, "bilateral", spread_terms)

    return spread_terms["long_spread"], spread_terms["short_spread"]


def calculate_spread(
    amm: AMM,
    direction: PositionDirection,
    oracle_price_data: Optional[OraclePriceData],
    policy: Optional[SpreadPolicy] = None,
    trace: Optional[SpreadTrace] = None,
) -> int:
    """
    Half spread quoted on one side of the curve, precision BID_ASK_SPREAD_PRECISION.

    The default Directional policy widens the side that would let traders
    arbitrage the mark/oracle gap, then scales the side the AMM is already
    exposed on by how far its inventory pnl has eaten into the fee pool.
    """
    if policy is not None and is_variant(policy, "Bilateral"):
        long_spread, short_spread = calculate_bilateral_spread(
            amm, oracle_price_data, trace
        )
        return long_spread if is_variant(direction, "Long") else short_spread

    spread = amm.base_spread // 2

    if amm.base_spread == 0 or amm.curve_update_intensity == 0:
        return spread

    reserve_price = calculate_price(
        amm.base_asset_reserve, amm.quote_asset_reserve, amm.peg_multiplier
    )

    target_price = (oracle_price_data and oracle_price_data.price) or reserve_price

    target_mark_spread_pct = calculate_target_mark_spread_pct(
        reserve_price, target_price
    )

    is_long = is_variant(direction, "Long")

    # oracle retreat
    if (is_long and target_mark_spread_pct < 0) or (
        not is_long and target_mark_spread_pct > 0
    ):
        spread = max(spread, abs(target_mark_spread_pct))

    _emit_spread_terms(
        trace,
        "oracle_retreat",
        {"target_mark_spread_pct": target_mark_spread_pct, "spread": spread},
    )

    # inventory skew
    net_base_asset_amount = amm.net_base_asset_amount
    total_fee_minus_distributions = amm.total_fee_minus_distributions

    if (
        (net_base_asset_amount > 0 and is_long)
        or (net_base_asset_amount < 0 and not is_long)
        or total_fee_minus_distributions == 0
    ):
        net_cost_basis = amm.quote_asset_amount_long - amm.quote_asset_amount_short
        net_base_asset_value = calculate_net_base_asset_value(
            amm.quote_asset_reserve,
            amm.terminal_quote_asset_reserve,
            amm.peg_multiplier,
        )
        local_base_asset_value = calculate_local_base_asset_value(
            net_base_asset_amount, reserve_price
        )
        net_pnl = net_base_asset_value - net_cost_basis
        local_pnl = local_base_asset_value - net_cost_basis

        effective_leverage = MAX_INVENTORY_SKEW
        if total_fee_minus_distributions > 0:
            effective_leverage = max(0, local_pnl - net_pnl) / (
                total_fee_minus_distributions + 1
            )

        spread_scale = min(MAX_INVENTORY_SKEW, 1 + effective_leverage)

        # cap the scale to attempt to only scale up to MAX_TARGET_SPREAD
        # always let the oracle retreat methods go through 100%
        if spread_scale * spread > MAX_TARGET_SPREAD:
            spread_scale = max(MIN_SPREAD_SCALE, MAX_TARGET_SPREAD / spread)

        spread *= spread_scale

        _emit_spread_terms(
            trace,
            "inventory_skew",
            {
                "net_pnl": net_pnl,
                "local_pnl": local_pnl,
                "effective_leverage": effective_leverage,
                "spread_scale": spread_scale,
                "spread": spread,
            },
        )
    elif total_fee_minus_distributions < 0:
        # no fee buffer left, quote both sides at the full skew
        spread *= MAX_INVENTORY_SKEW

        _emit_spread_terms(
            trace,
            "inventory_skew",
            {"spread_scale": MAX_INVENTORY_SKEW, "spread": spread},
        )

    return math.floor(spread)


def calculate_spread_reserves(
    amm: AMM,
    direction: PositionDirection,
    oracle_price_data: Optional[OraclePriceData],
    policy: Optional[SpreadPolicy] = None,
    trace: Optional[SpreadTrace] = None,
) -> Tuple[int, int]:
    """
    Reserves shifted by the half spread for quoting one side.

    :return: (base_asset_reserve, quote_asset_reserve), never written back to the amm
    """
    spread = calculate_spread(amm, direction, oracle_price_data, policy, trace)

    if spread == 0:
        return (amm.base_asset_reserve, amm.quote_asset_reserve)

    spread_fraction = spread // 2

    # make non-zero
    if spread_fraction == 0:
        spread_fraction = 1

    quote_asset_reserve_delta = (
        amm.quote_asset_reserve * spread_fraction // BID_ASK_SPREAD_PRECISION
    )

    if is_variant(direction, "Long"):
        quote_asset_reserve = amm.quote_asset_reserve + quote_asset_reserve_delta
    else:
        # a half spread of 100% or more still leaves one unit of quote reserve
        quote_asset_reserve_delta = min(
            quote_asset_reserve_delta, amm.quote_asset_reserve - 1
        )
        quote_asset_reserve = amm.quote_asset_reserve - quote_asset_reserve_delta

    base_asset_reserve = (amm.sqrt_k * amm.sqrt_k) // quote_asset_reserve

    return (base_asset_reserve, quote_asset_reserve)


def calculate_updated_amm_spread_reserves(
    amm: AMM,
    direction: PositionDirection,
    oracle_price_data: Optional[OraclePriceData],
    policy: Optional[SpreadPolicy] = None,
) -> Tuple[int, int, int, int]:
    new_amm = calculate_updated_amm(amm, oracle_price_data)
    (base_asset_reserve, quote_asset_reserve) = calculate_spread_reserves(
        new_amm, direction, oracle_price_data, policy
    )

    return (
        base_asset_reserve,
        quote_asset_reserve,
        new_amm.sqrt_k,
        new_amm.peg_multiplier,
    )


def calculate_bid_ask_price(
    amm: AMM,
    oracle_price_data: Optional[OraclePriceData],
    with_update: bool = True,
    policy: Optional[SpreadPolicy] = None,
) -> Tuple[int, int]:
    if with_update:
        new_amm = calculate_updated_amm(amm, oracle_price_data)
    else:
        new_amm = amm

    ask_reserves = calculate_spread_reserves(
        new_amm, PositionDirection.Long(), oracle_price_data, policy
    )
    bid_reserves = calculate_spread_reserves(
        new_amm, PositionDirection.Short(), oracle_price_data, policy
    )

    bid_price = calculate_price(
        bid_reserves[0], bid_reserves[1], new_amm.peg_multiplier
    )

    ask_price = calculate_price(
        ask_reserves[0], ask_reserves[1], new_amm.peg_multiplier
    )

    return bid_price, ask_price


def calculate_terminal_price(market: MarketAccount) -> int:
    """
    Price the curve would show once the net base asset amount is fully closed.

    :return: terminal price, precision PRICE_PRECISION
    """
    (new_quote_asset_reserve, new_base_asset_reserve) = calculate_reserves_after_closing(
        market.amm
    )

    return calculate_price(
        new_base_asset_reserve, new_quote_asset_reserve, market.amm.peg_multiplier
    )


def calculate_max_base_asset_amount_to_trade(
    amm: AMM,
    limit_price: int,
    direction: PositionDirection,
    oracle_price_data: Optional[OraclePriceData] = None,
    policy: Optional[SpreadPolicy] = None,
) -> Tuple[int, PositionDirection]:
    """
    Largest base amount that can trade against the curve before its price crosses limit_price.

    A zero amount means nothing is tradable; the direction returned with it carries no meaning.
    """
    if limit_price <= 0:
        return (0, PositionDirection.Long())

    invariant = amm.sqrt_k * amm.sqrt_k

    new_base_asset_reserve_squared = (
        ((invariant * PRICE_PRECISION) * amm.peg_multiplier) // limit_price
    ) // PEG_PRECISION

    new_base_asset_reserve = square_root(new_base_asset_reserve_squared)

    (base_asset_reserve_before, _) = calculate_spread_reserves(
        amm, direction, oracle_price_data, policy
    )

    if new_base_asset_reserve > base_asset_reserve_before:
        return (
            new_base_asset_reserve - base_asset_reserve_before,
            PositionDirection.Short(),
        )
    elif new_base_asset_reserve < base_asset_reserve_before:
        return (
            base_asset_reserve_before - new_base_asset_reserve,
            PositionDirection.Long(),
        )
    else:
        logger.info(
            "trade too small @ calculate_max_base_asset_amount_to_trade, limit price %s",
            limit_price,
        )
        return (0, PositionDirection.Long())


def calculate_quote_asset_amount_swapped(
    quote_asset_reserves: int, peg_multiplier: int, swap_direction: SwapDirection
) -> int:
    quote_asset_amount = (
        quote_asset_reserves * peg_multiplier // AMM_TIMES_PEG_TO_QUOTE_PRECISION_RATIO
    )

    if is_variant(swap_direction, "Remove"):
        quote_asset_amount += 1

    return quote_asset_amount
