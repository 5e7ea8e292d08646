from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from poolsnap.api.deps import get_pool_snapshot_use_case
from poolsnap.api.schemas.pool_snapshot import (
    BalanceRecordResponse,
    PoolRecordResponse,
    PoolSnapshotResponse,
    TickRecordResponse,
    TokenIdentityResponse,
)
from poolsnap.application.dto.pool_snapshot import GetPoolSnapshotInput
from poolsnap.application.use_cases.get_pool_snapshot import GetPoolSnapshotUseCase
from poolsnap.domain.entities.pool import BalanceRecord
from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import (
    DecimalsNotFoundError,
    InvalidArgumentError,
    MalformedResponseError,
    PoolNotFoundError,
)
from poolsnap.domain.services.pool_identifier import derive_pool_identifier

router = APIRouter()


def _token_response(token: TokenIdentity) -> TokenIdentityResponse:
    return TokenIdentityResponse(
        collection=token.collection,
        category=token.category,
        type=token.type,
        additional_key=token.additional_key,
        key=token.to_key(),
    )


def _balance_response(balance: BalanceRecord) -> BalanceRecordResponse:
    return BalanceRecordResponse(
        owner=balance.owner,
        token=_token_response(balance.token),
        quantity=str(balance.quantity),
    )


@router.get("/v1/pools/snapshot", response_model=PoolSnapshotResponse)
async def get_pool_snapshot(
    token0: str,
    token1: str,
    fee: str,
    use_case: GetPoolSnapshotUseCase = Depends(get_pool_snapshot_use_case),
):
    try:
        snapshot = await use_case.execute(
            GetPoolSnapshotInput(token0=token0, token1=token1, fee_tier=fee)
        )
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DecimalsNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except MalformedResponseError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    pool = snapshot.pool
    identifier = derive_pool_identifier(pool.key1, pool.key2, pool.key3)
    return PoolSnapshotResponse(
        pool_hash=identifier.pool_hash,
        pool_alias=identifier.pool_alias,
        pool=PoolRecordResponse(
            key0=pool.key0,
            key1=pool.key1,
            key2=pool.key2,
            key3=pool.key3,
            token0=_token_response(pool.token0_class_key),
            token1=_token_response(pool.token1_class_key),
            fee=pool.fee,
            sqrt_price=str(pool.sqrt_price),
            liquidity=str(pool.liquidity),
            gross_pool_liquidity=str(pool.gross_pool_liquidity),
            fee_growth_global0=str(pool.fee_growth_global0),
            fee_growth_global1=str(pool.fee_growth_global1),
            protocol_fees=str(pool.protocol_fees),
            protocol_fees_token0=str(pool.protocol_fees_token0),
            protocol_fees_token1=str(pool.protocol_fees_token1),
            tick_spacing=pool.tick_spacing,
            max_liquidity_per_tick=str(pool.max_liquidity_per_tick),
            bitmap=dict(pool.bitmap),
        ),
        ticks=[
            TickRecordResponse(
                tick=tick.tick,
                initialised=tick.initialised,
                liquidity_net=str(tick.liquidity_net),
                liquidity_gross=str(tick.liquidity_gross),
                fee_growth_outside0=str(tick.fee_growth_outside0),
                fee_growth_outside1=str(tick.fee_growth_outside1),
            )
            for _, tick in sorted(snapshot.ticks.items())
        ],
        token0_balance=_balance_response(snapshot.token0_balance),
        token1_balance=_balance_response(snapshot.token1_balance),
        token0_decimals=snapshot.token0_decimals,
        token1_decimals=snapshot.token1_decimals,
    )
