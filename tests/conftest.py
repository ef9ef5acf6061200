from pytest import fixture

from tests.math.helpers import mock_amm, mock_users_long_amm, oracle_at_mark
from vammpy.types import AMM, OraclePriceData


@fixture
def balanced_amm() -> AMM:
    return mock_amm()


@fixture
def users_long_amm() -> AMM:
    return mock_users_long_amm()


@fixture
def balanced_oracle(balanced_amm: AMM) -> OraclePriceData:
    return oracle_at_mark(balanced_amm)
