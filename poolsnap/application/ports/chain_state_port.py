from __future__ import annotations

from typing import Protocol

from poolsnap.domain.entities.chain_object import ChainObjectRow
from poolsnap.domain.entities.pool import BalanceRecord, PoolRecord


class ChainStatePort(Protocol):
    async def fetch_pool(self, *, token0_key: str, token1_key: str, fee_tier: str) -> PoolRecord:
        ...

    async def fetch_balances(self, *, owner_alias: str) -> list[BalanceRecord]:
        ...

    async def fetch_ticks(self, *, pool_hash: str) -> list[ChainObjectRow]:
        ...

    async def fetch_decimals(self, *, token_key: str) -> int:
        ...
