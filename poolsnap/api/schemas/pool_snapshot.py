from __future__ import annotations

from pydantic import BaseModel, Field


class TokenIdentityResponse(BaseModel):
    collection: str
    category: str
    type: str
    additional_key: str
    key: str = Field(..., description="'$'-joined token key.")


class PoolRecordResponse(BaseModel):
    key0: str
    key1: str
    key2: str
    key3: str
    token0: TokenIdentityResponse
    token1: TokenIdentityResponse
    fee: int
    sqrt_price: str
    liquidity: str
    gross_pool_liquidity: str
    fee_growth_global0: str
    fee_growth_global1: str
    protocol_fees: str
    protocol_fees_token0: str
    protocol_fees_token1: str
    tick_spacing: int
    max_liquidity_per_tick: str
    bitmap: dict[str, str]


class TickRecordResponse(BaseModel):
    tick: int
    initialised: bool
    liquidity_net: str
    liquidity_gross: str
    fee_growth_outside0: str
    fee_growth_outside1: str


class BalanceRecordResponse(BaseModel):
    owner: str
    token: TokenIdentityResponse
    quantity: str


class PoolSnapshotResponse(BaseModel):
    pool_hash: str = Field(..., description="Keccak-256 of 'token0,token1,fee'.")
    pool_alias: str
    pool: PoolRecordResponse
    ticks: list[TickRecordResponse] = Field(..., description="Initialized ticks ordered by index.")
    token0_balance: BalanceRecordResponse
    token1_balance: BalanceRecordResponse
    token0_decimals: int
    token1_decimals: int
