from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GetPoolSnapshotInput:
    token0: str
    token1: str
    fee_tier: str
