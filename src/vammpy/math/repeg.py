from vammpy.constants.numeric_constants import (
    AMM_TO_QUOTE_PRECISION_RATIO,
    PEG_PRECISION,
    PRICE_DIV_PEG,
    PRICE_PRECISION,
)
from vammpy.math.utils import clamp_num, sig_num
from vammpy.types import AMM


def calculate_repeg_cost(amm: AMM, new_peg: int) -> int:
    """
    Cost to the protocol of moving the peg while the reserves stay put.

    Positive is an expense paid out of fees, negative is a surplus.
    Precision QUOTE_PRECISION.
    """
    dqar = amm.quote_asset_reserve - amm.terminal_quote_asset_reserve
    cost = (
        dqar * (new_peg - amm.peg_multiplier) // AMM_TO_QUOTE_PRECISION_RATIO
    ) // PEG_PRECISION
    return cost


def calculate_adjust_k_cost(amm: AMM, numerator: int, denominator: int) -> int:
    """
    Cost of scaling the curve depth by numerator / denominator.

    Solves (1/(x+d) - p/(x*p+d)) * y*d*Q for the current net inventory d,
    negated so that shrinking the curve (p < 1) comes out as a surplus.
    """
    x = amm.base_asset_reserve
    y = amm.quote_asset_reserve

    d = amm.net_base_asset_amount
    Q = amm.peg_multiplier

    quote_scale = y * d * Q

    p = numerator * PRICE_PRECISION // denominator

    cost_numer = (quote_scale // (x + d)) - (
        quote_scale * p // PRICE_PRECISION // (x * p // PRICE_PRECISION + d)
    )

    # truncate toward zero so floor rounding cannot flip a tiny surplus into a cost
    cost = sig_num(cost_numer) * (
        abs(cost_numer) // AMM_TO_QUOTE_PRECISION_RATIO // PEG_PRECISION
    )

    return cost * -1


def calculate_budgeted_peg(amm: AMM, budget: int, target_price: int) -> int:
    per_peg_cost = (
        amm.quote_asset_reserve - amm.terminal_quote_asset_reserve
    ) // AMM_TO_QUOTE_PRECISION_RATIO

    if per_peg_cost > 0:
        per_peg_cost += 1
    elif per_peg_cost < 0:
        per_peg_cost -= 1

    target_peg = (
        target_price
        * amm.base_asset_reserve
        // amm.quote_asset_reserve
        // PRICE_DIV_PEG
    )
    peg_change_direction = target_peg - amm.peg_multiplier

    use_target_peg = (per_peg_cost < 0 and peg_change_direction > 0) or (
        per_peg_cost > 0 and peg_change_direction < 0
    )

    if per_peg_cost == 0 or peg_change_direction == 0 or use_target_peg:
        return target_peg

    budget_delta_peg = sig_num(per_peg_cost) * (
        max(0, budget) * PEG_PRECISION // abs(per_peg_cost)
    )
    new_peg = max(1, amm.peg_multiplier + budget_delta_peg)

    # the budget only ever buys progress toward the target, never past it
    return clamp_num(
        new_peg,
        min(amm.peg_multiplier, target_peg),
        max(amm.peg_multiplier, target_peg),
    )
