import pytest

from tests.math.helpers import (
    MOCK_PEG,
    MOCK_RESERVE,
    mark_price,
    mock_amm,
    mock_market,
    mock_users_long_amm,
)
from vammpy.constants.numeric_constants import (
    AMM_RESERVE_PRECISION,
    PEG_PRECISION,
    PRICE_PRECISION,
    QUOTE_PRECISION,
)
from vammpy.errors import InvalidSwapAmountError, VammError
from vammpy.math.amm import (
    calculate_amm_reserves_after_swap,
    calculate_price,
    calculate_quote_asset_amount_swapped,
    calculate_swap_output,
    calculate_terminal_price,
    get_swap_direction,
)
from vammpy.types import AssetType, PositionDirection, SwapDirection, is_variant


def test_calculate_price():
    assert calculate_price(MOCK_RESERVE, MOCK_RESERVE, MOCK_PEG) == 100 * PRICE_PRECISION
    assert calculate_price(MOCK_RESERVE, 2 * MOCK_RESERVE, MOCK_PEG) == (
        200 * PRICE_PRECISION
    )

    base, quote, peg = 7_919, 104_729, 1_234
    assert calculate_price(base, quote, peg) == (
        quote * PRICE_PRECISION * peg // (PEG_PRECISION * base)
    )


def test_calculate_price_degenerate_base():
    assert calculate_price(0, MOCK_RESERVE, MOCK_PEG) == 0
    assert calculate_price(-MOCK_RESERVE, MOCK_RESERVE, MOCK_PEG) == 0


@pytest.mark.parametrize(
    "input_reserve,swap_amount,direction",
    [
        (MOCK_RESERVE, 3 * AMM_RESERVE_PRECISION, SwapDirection.Add()),
        (MOCK_RESERVE, 3 * AMM_RESERVE_PRECISION, SwapDirection.Remove()),
        (1_000_003, 17, SwapDirection.Add()),
        (1_000_003, 17, SwapDirection.Remove()),
    ],
)
def test_swap_output_rounds_down(input_reserve, swap_amount, direction):
    invariant = input_reserve * (input_reserve + 11)

    new_input, new_output = calculate_swap_output(
        input_reserve, swap_amount, direction, invariant
    )

    if is_variant(direction, "Add"):
        assert new_input == input_reserve + swap_amount
    else:
        assert new_input == input_reserve - swap_amount

    assert new_input * new_output <= invariant
    # at most one output unit of slack
    assert new_input * (new_output + 1) > invariant


def test_swap_add_then_remove_round_trip():
    input_reserve = 1_000_003
    invariant = input_reserve * 999_983
    output_reserve = invariant // input_reserve

    after_add = calculate_swap_output(
        input_reserve, 12_345, SwapDirection.Add(), invariant
    )
    after_remove = calculate_swap_output(
        after_add[0], 12_345, SwapDirection.Remove(), invariant
    )

    assert after_remove[0] == input_reserve
    assert abs(after_remove[1] - output_reserve) <= 1


def test_swap_zero_amount_is_identity():
    invariant = MOCK_RESERVE * MOCK_RESERVE
    assert calculate_swap_output(
        MOCK_RESERVE, 0, SwapDirection.Remove(), invariant
    ) == (MOCK_RESERVE, MOCK_RESERVE)


def test_negative_swap_amount_is_fatal():
    with pytest.raises(InvalidSwapAmountError) as e:
        calculate_swap_output(MOCK_RESERVE, -1, SwapDirection.Add(), MOCK_RESERVE**2)

    assert e.value.swap_amount == -1
    assert isinstance(e.value, ValueError)
    assert isinstance(e.value, VammError)

    with pytest.raises(InvalidSwapAmountError):
        calculate_amm_reserves_after_swap(
            mock_amm(), AssetType.QUOTE(), -QUOTE_PRECISION, SwapDirection.Add()
        )


@pytest.mark.parametrize(
    "asset_type,position_direction,expected",
    [
        (AssetType.BASE(), PositionDirection.Long(), "Remove"),
        (AssetType.QUOTE(), PositionDirection.Short(), "Remove"),
        (AssetType.BASE(), PositionDirection.Short(), "Add"),
        (AssetType.QUOTE(), PositionDirection.Long(), "Add"),
    ],
)
def test_get_swap_direction(asset_type, position_direction, expected):
    assert is_variant(get_swap_direction(asset_type, position_direction), expected)


def test_reserves_after_base_swap():
    amm = mock_amm()

    new_quote, new_base = calculate_amm_reserves_after_swap(
        amm, AssetType.BASE(), AMM_RESERVE_PRECISION, SwapDirection.Remove()
    )

    assert new_base == MOCK_RESERVE - AMM_RESERVE_PRECISION
    assert new_quote == MOCK_RESERVE * MOCK_RESERVE // new_base


def test_reserves_after_quote_swap_rescales_by_peg():
    amm = mock_amm()

    # $100 at a $100 peg is one unit of base reserve
    new_quote, new_base = calculate_amm_reserves_after_swap(
        amm, AssetType.QUOTE(), 100 * QUOTE_PRECISION, SwapDirection.Add()
    )

    assert new_quote == MOCK_RESERVE + AMM_RESERVE_PRECISION
    assert new_base == MOCK_RESERVE * MOCK_RESERVE // new_quote

    # input amm untouched
    assert amm.quote_asset_reserve == MOCK_RESERVE


def test_quote_asset_amount_swapped():
    assert (
        calculate_quote_asset_amount_swapped(
            AMM_RESERVE_PRECISION, MOCK_PEG, SwapDirection.Add()
        )
        == 100 * QUOTE_PRECISION
    )
    assert (
        calculate_quote_asset_amount_swapped(
            AMM_RESERVE_PRECISION, MOCK_PEG, SwapDirection.Remove()
        )
        == 100 * QUOTE_PRECISION + 1
    )


def test_terminal_price_without_inventory_is_mark():
    amm = mock_amm()
    assert calculate_terminal_price(mock_market(amm)) == mark_price(amm)


def test_terminal_price_after_full_delever():
    amm = mock_users_long_amm()

    # closing the long hands the base back and returns to the balanced curve
    assert calculate_terminal_price(mock_market(amm)) == 100 * PRICE_PRECISION
    assert mark_price(amm) > 100 * PRICE_PRECISION
