from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from poolsnap.domain.entities.token import TokenIdentity


@dataclass(frozen=True)
class PoolIdentifier:
    pool_alias: str
    pool_hash: str


@dataclass(frozen=True)
class PoolRecord:
    key0: str
    key1: str
    key2: str
    key3: str
    token0: str
    token1: str
    token0_class_key: TokenIdentity
    token1_class_key: TokenIdentity
    fee: int
    sqrt_price: Decimal
    liquidity: Decimal
    gross_pool_liquidity: Decimal
    fee_growth_global0: Decimal
    fee_growth_global1: Decimal
    protocol_fees: Decimal
    protocol_fees_token0: Decimal
    protocol_fees_token1: Decimal
    tick_spacing: int
    max_liquidity_per_tick: Decimal
    bitmap: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TickRecord:
    pool_hash: str
    tick: int
    initialised: bool
    liquidity_net: Decimal
    liquidity_gross: Decimal
    fee_growth_outside0: Decimal
    fee_growth_outside1: Decimal


@dataclass(frozen=True)
class BalanceRecord:
    owner: str
    token: TokenIdentity
    quantity: Decimal
    locked_holds: tuple[Mapping, ...] = ()
    in_use_holds: tuple[Mapping, ...] = ()
    instance_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompositePoolSnapshot:
    pool: PoolRecord
    ticks: Mapping[int, TickRecord]
    token0_balance: BalanceRecord
    token1_balance: BalanceRecord
    token0_decimals: int
    token1_decimals: int
