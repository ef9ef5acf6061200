from dataclasses import dataclass
from typing import Literal

from solders.pubkey import Pubkey

from vammpy.constants.spot_markets import (
    SpotMarketConfig,
    devnet_spot_market_configs,
    mainnet_spot_market_configs,
)

VammEnv = Literal["devnet", "mainnet"]


@dataclass
class Config:
    env: VammEnv
    usdc_mint_address: Pubkey
    spot_markets: list[SpotMarketConfig]


configs = {
    "devnet": Config(
        env="devnet",
        usdc_mint_address=Pubkey.from_string(
            "8zGuJQqwhZafTah7Uc7Z4tXRnguqkn5KLFAP8oV6PHe2"
        ),
        spot_markets=devnet_spot_market_configs,
    ),
    "mainnet": Config(
        env="mainnet",
        usdc_mint_address=Pubkey.from_string(
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
        ),
        spot_markets=mainnet_spot_market_configs,
    ),
}


def get_spot_market_config(env: VammEnv, market_index: int) -> SpotMarketConfig:
    if env not in configs:
        raise ValueError(f"Unknown env: {env}")

    for spot_market in configs[env].spot_markets:
        if spot_market.market_index == market_index:
            return spot_market

    raise ValueError(f"No spot market {market_index} configured for {env}")
