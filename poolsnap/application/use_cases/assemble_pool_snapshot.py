from __future__ import annotations

import asyncio
from decimal import Decimal
import logging
from types import MappingProxyType

from poolsnap.application.ports.chain_state_port import ChainStatePort
from poolsnap.domain.entities.pool import BalanceRecord, CompositePoolSnapshot, TickRecord
from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.services.pool_identifier import derive_pool_identifier
from poolsnap.domain.services.record_decoders import decode_tick_record


logger = logging.getLogger(__name__)


class AssemblePoolSnapshotUseCase:
    """Builds a CompositePoolSnapshot from indexing API reads.

    The pool lookup runs first; balances, ticks and both token decimals are
    then fetched concurrently. Any failure aborts the assembly.
    """

    def __init__(self, *, chain_state_port: ChainStatePort):
        self._chain_state_port = chain_state_port

    async def get_snapshot(
        self,
        *,
        token0_key: str,
        token1_key: str,
        fee_tier: str,
    ) -> CompositePoolSnapshot:
        pool = await self._chain_state_port.fetch_pool(
            token0_key=token0_key,
            token1_key=token1_key,
            fee_tier=fee_tier,
        )
        identifier = derive_pool_identifier(pool.key1, pool.key2, pool.key3)

        fetches = [
            asyncio.ensure_future(self._chain_state_port.fetch_balances(owner_alias=identifier.pool_alias)),
            asyncio.ensure_future(self._chain_state_port.fetch_ticks(pool_hash=identifier.pool_hash)),
            asyncio.ensure_future(self._chain_state_port.fetch_decimals(token_key=pool.key1)),
            asyncio.ensure_future(self._chain_state_port.fetch_decimals(token_key=pool.key2)),
        ]
        try:
            balances, tick_rows, token0_decimals, token1_decimals = await asyncio.gather(*fetches)
        except Exception:
            # Drop reads still in flight.
            for fetch in fetches:
                fetch.cancel()
            raise

        ticks: dict[int, TickRecord] = {}
        for row in tick_rows:
            tick = decode_tick_record(row)
            ticks[tick.tick] = tick

        snapshot = CompositePoolSnapshot(
            pool=pool,
            ticks=MappingProxyType(ticks),
            token0_balance=match_balance(
                balances,
                token=pool.token0_class_key,
                owner=identifier.pool_alias,
            ),
            token1_balance=match_balance(
                balances,
                token=pool.token1_class_key,
                owner=identifier.pool_alias,
            ),
            token0_decimals=token0_decimals,
            token1_decimals=token1_decimals,
        )
        logger.info(
            "assemble_pool_snapshot: assembled pool_hash=%s token0=%s token1=%s fee=%s ticks=%s balances=%s decimals=%s/%s",
            identifier.pool_hash,
            pool.key1,
            pool.key2,
            pool.key3,
            len(ticks),
            len(balances),
            token0_decimals,
            token1_decimals,
        )
        return snapshot


def match_balance(
    balances: list[BalanceRecord],
    *,
    token: TokenIdentity,
    owner: str,
) -> BalanceRecord:
    for balance in balances:
        if balance.token == token:
            return balance
    # An absent ledger entry is an empty balance.
    return BalanceRecord(owner=owner, token=token, quantity=Decimal("0"))
