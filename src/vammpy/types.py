from dataclasses import dataclass
from typing import Any, Callable

from borsh_construct.enum import _rust_enum
from sumtypes import constructor


def is_variant(enum, type: str) -> bool:
    return type == enum.__class__.__name__


@_rust_enum
class SwapDirection:
    Add = constructor()
    Remove = constructor()


@_rust_enum
class PositionDirection:
    Long = constructor()
    Short = constructor()


@_rust_enum
class AssetType:
    QUOTE = constructor()
    BASE = constructor()


@_rust_enum
class OracleSource:
    Pyth = constructor()
    Switchboard = constructor()
    QuoteAsset = constructor()


@_rust_enum
class SpreadPolicy:
    # per side, inventory pnl measured against the cost basis
    Directional = constructor()
    # both sides at once, confidence-widened retreat, no cost basis
    Bilateral = constructor()


# (stage, terms) callback invoked while a spread is being computed
SpreadTrace = Callable[[str, dict[str, Any]], None]


@dataclass
class AMM:
    base_asset_reserve: int
    quote_asset_reserve: int
    sqrt_k: int
    peg_multiplier: int
    net_base_asset_amount: int = 0
    terminal_quote_asset_reserve: int = 0
    total_exchange_fee: int = 0
    total_fee_minus_distributions: int = 0
    base_spread: int = 0
    curve_update_intensity: int = 0
    quote_asset_amount_long: int = 0
    quote_asset_amount_short: int = 0


@dataclass
class MarketAccount:
    market_index: int
    amm: AMM


@dataclass
class OraclePriceData:
    price: int
    slot: int
    confidence: int
    twap: int
    twap_confidence: int
    has_sufficient_number_of_data_points: bool

    @staticmethod
    def default():
        return OraclePriceData(
            price=0,
            slot=0,
            confidence=0,
            twap=0,
            twap_confidence=0,
            has_sufficient_number_of_data_points=False,
        )

    @staticmethod
    def from_price(price: int, confidence: int = 0) -> "OraclePriceData":
        return OraclePriceData(
            price=price,
            slot=0,
            confidence=confidence,
            twap=price,
            twap_confidence=confidence,
            has_sufficient_number_of_data_points=True,
        )
