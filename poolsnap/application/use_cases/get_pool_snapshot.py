from __future__ import annotations

from poolsnap.application.dto.pool_snapshot import GetPoolSnapshotInput
from poolsnap.application.ports.pool_snapshot_port import PoolSnapshotSource
from poolsnap.domain.entities.pool import CompositePoolSnapshot
from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import InvalidArgumentError


class GetPoolSnapshotUseCase:
    def __init__(self, *, snapshot_source: PoolSnapshotSource):
        self._snapshot_source = snapshot_source

    async def execute(self, command: GetPoolSnapshotInput) -> CompositePoolSnapshot:
        token0 = TokenIdentity.from_key(command.token0)
        token1 = TokenIdentity.from_key(command.token1)
        fee_tier = normalize_fee_tier(command.fee_tier)

        return await self._snapshot_source.get_snapshot(
            token0_key=token0.to_key(),
            token1_key=token1.to_key(),
            fee_tier=fee_tier,
        )


def normalize_fee_tier(value: str | int) -> str:
    fee_tier = str(value).strip()
    if not fee_tier.isdigit():
        raise InvalidArgumentError(f"fee_tier must be a non-negative integer: {value!r}")
    return fee_tier
