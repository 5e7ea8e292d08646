from __future__ import annotations

from typing import Protocol

from poolsnap.domain.entities.pool import CompositePoolSnapshot


class PoolSnapshotSource(Protocol):
    async def get_snapshot(
        self,
        *,
        token0_key: str,
        token1_key: str,
        fee_tier: str,
    ) -> CompositePoolSnapshot:
        ...
