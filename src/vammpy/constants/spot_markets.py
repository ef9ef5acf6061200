"""
Market registry for the spot markets quoting the vAMM's collateral.

Static configuration only: addresses, oracle sources and token precisions.
"""

from dataclasses import dataclass
from typing import Optional

from solders.pubkey import Pubkey  # type: ignore

from vammpy.constants.numeric_constants import (
    LAMPORTS_EXP,
    LAMPORTS_PRECISION,
    QUOTE_PRECISION,
    QUOTE_PRECISION_EXP,
    SIX,
)
from vammpy.types import OracleSource


@dataclass
class SpotMarketConfig:
    symbol: str
    market_index: int
    oracle: Pubkey
    oracle_source: OracleSource
    mint: Pubkey
    precision: int
    precision_exp: int
    serum_market: Optional[Pubkey] = None


WRAPPED_SOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")

devnet_spot_market_configs: list[SpotMarketConfig] = [
    SpotMarketConfig(
        symbol="USDC",
        market_index=0,
        oracle=Pubkey.default(),
        oracle_source=OracleSource.QuoteAsset(),  # type: ignore
        mint=Pubkey.from_string("8zGuJQqwhZafTah7Uc7Z4tXRnguqkn5KLFAP8oV6PHe2"),
        precision=10**SIX,
        precision_exp=SIX,
    ),
    SpotMarketConfig(
        symbol="SOL",
        market_index=1,
        oracle=Pubkey.from_string("J83w4HKfqxwcq3BEMMkPFSppX3gqekLyLJBexebFVkix"),
        oracle_source=OracleSource.Pyth(),  # type: ignore
        mint=WRAPPED_SOL_MINT,
        precision=LAMPORTS_PRECISION,
        precision_exp=LAMPORTS_EXP,
        serum_market=Pubkey.from_string(
            "8N37SsnTu8RYxtjrV9SStjkkwVhmU8aCWhLvwduAPEKW"
        ),
    ),
    SpotMarketConfig(
        symbol="mSOL",
        market_index=2,
        oracle=Pubkey.from_string("9a6RNx3tCu1TSs6TBSfV2XRXEPEZXQ6WB7jRojZRvyeZ"),
        oracle_source=OracleSource.Pyth(),  # type: ignore
        mint=Pubkey.from_string("3BZPwbcqB5kKScF3TEXxwNfx5ipV13kbRVDvfVp5c6fv"),
        precision=10**SIX,
        precision_exp=SIX,
        serum_market=Pubkey.from_string(
            "AGsmbVu3MS9u68GEYABWosQQCZwmLcBHu4pWEuBYH7Za"
        ),
    ),
]

mainnet_spot_market_configs: list[SpotMarketConfig] = [
    SpotMarketConfig(
        symbol="USDC",
        market_index=0,
        oracle=Pubkey.default(),
        oracle_source=OracleSource.QuoteAsset(),  # type: ignore
        mint=Pubkey.from_string("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"),
        precision=QUOTE_PRECISION,
        precision_exp=QUOTE_PRECISION_EXP,
    ),
    SpotMarketConfig(
        symbol="SOL",
        market_index=1,
        oracle=Pubkey.from_string("H6ARHf6YXhGYeQfUzQNGk6rDNnLBQKrenN712K4AQJEG"),
        oracle_source=OracleSource.Pyth(),  # type: ignore
        mint=WRAPPED_SOL_MINT,
        precision=LAMPORTS_PRECISION,
        precision_exp=LAMPORTS_EXP,
        serum_market=Pubkey.from_string(
            "8BnEgHoWFysVcuFFX7QztDmzuH8r5ZFvyP3sYwn1XTh6"
        ),
    ),
]
