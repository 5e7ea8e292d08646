from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest

from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import MalformedResponseError, PoolNotFoundError
from poolsnap.infrastructure.clients.gateway_composite_pool_client import (
    GatewayClientSettings,
    GatewayCompositePoolClient,
)


GALA = "GALA$Unit$none$none"
GUSDC = "GUSDC$Unit$none$none"


def _make_client(handler) -> GatewayCompositePoolClient:
    return GatewayCompositePoolClient(
        GatewayClientSettings(gateway_api_base="https://gateway.example", timeout_seconds=5),
        transport=httpx.MockTransport(handler),
    )


def _composite_data() -> dict:
    return {
        "pool": {
            "token0": GALA,
            "token1": GUSDC,
            "token0ClassKey": {"collection": "GALA", "category": "Unit", "type": "none", "additionalKey": "none"},
            "token1ClassKey": {"collection": "GUSDC", "category": "Unit", "type": "none", "additionalKey": "none"},
            "fee": 10000,
            "sqrtPrice": "0.13",
            "liquidity": "5000",
            "grossPoolLiquidity": "5000",
            "feeGrowthGlobal0": "0",
            "feeGrowthGlobal1": "0",
            "protocolFees": 0.1,
            "protocolFeesToken0": "0",
            "protocolFeesToken1": "0",
            "tickSpacing": 200,
            "maxLiquidityPerTick": "1917565579412846627735051215301243.08",
            "bitmap": {"0": "1"},
        },
        "tickDataMap": {
            "-200": {"poolHash": "h", "tick": -200, "initialised": True, "liquidityNet": "5000", "liquidityGross": "5000", "feeGrowthOutside0": "0", "feeGrowthOutside1": "0"},
            "200": {"poolHash": "h", "tick": 200, "initialised": True, "liquidityNet": "-5000", "liquidityGross": "5000", "feeGrowthOutside0": "0", "feeGrowthOutside1": "0"},
        },
        "token0Balance": {"owner": "service|pool_h", "collection": "GALA", "category": "Unit", "type": "none", "additionalKey": "none", "quantity": "100", "lockedHolds": [], "inUseHolds": [], "instanceIds": []},
        "token1Balance": {"owner": "service|pool_h", "collection": "GUSDC", "category": "Unit", "type": "none", "additionalKey": "none", "quantity": "7.5", "lockedHolds": [], "inUseHolds": [], "instanceIds": []},
        "token0Decimals": 8,
        "token1Decimals": 6,
    }


@pytest.mark.asyncio
async def test_get_snapshot_decodes_composite_pool():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        assert request.url.path == "/api/asset/dexv3-contract/GetCompositePool"
        return httpx.Response(200, json={"Status": 1, "Data": _composite_data()})

    snapshot = await _make_client(handler).get_snapshot(token0_key=GALA, token1_key=GUSDC, fee_tier="10000")

    assert bodies[0] == {
        "token0": {"collection": "GALA", "category": "Unit", "type": "none", "additionalKey": "none"},
        "token1": {"collection": "GUSDC", "category": "Unit", "type": "none", "additionalKey": "none"},
        "fee": 10000,
    }
    assert (snapshot.pool.key0, snapshot.pool.key1, snapshot.pool.key2, snapshot.pool.key3) == (
        "GCDXCHLPL",
        GALA,
        GUSDC,
        "10000",
    )
    assert set(snapshot.ticks) == {-200, 200}
    assert snapshot.token1_balance.token == TokenIdentity.from_key(GUSDC)
    assert snapshot.token1_balance.quantity == Decimal("7.5")
    assert (snapshot.token0_decimals, snapshot.token1_decimals) == (8, 6)


@pytest.mark.asyncio
async def test_get_snapshot_not_found_error():
    client = _make_client(
        lambda request: httpx.Response(
            400,
            json={"Status": 0, "Message": "Pool for tokens GALA/GUSDC not found", "ErrorKey": "NOT_FOUND"},
        )
    )

    with pytest.raises(PoolNotFoundError):
        await client.get_snapshot(token0_key=GALA, token1_key=GUSDC, fee_tier="10000")


@pytest.mark.asyncio
async def test_get_snapshot_missing_data_is_malformed():
    client = _make_client(lambda request: httpx.Response(200, json={"Status": 1}))

    with pytest.raises(MalformedResponseError):
        await client.get_snapshot(token0_key=GALA, token1_key=GUSDC, fee_tier="10000")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "tick_data_map",
    [
        [{"tick": -200}],
        {"-200": None},
        {"-200": "not-a-tick"},
    ],
)
async def test_get_snapshot_bad_tick_data_map_is_malformed(tick_data_map):
    data = _composite_data()
    data["tickDataMap"] = tick_data_map
    client = _make_client(lambda request: httpx.Response(200, json={"Status": 1, "Data": data}))

    with pytest.raises(MalformedResponseError):
        await client.get_snapshot(token0_key=GALA, token1_key=GUSDC, fee_tier="10000")


@pytest.mark.asyncio
async def test_get_snapshot_missing_tick_data_map_has_no_ticks():
    data = _composite_data()
    del data["tickDataMap"]
    client = _make_client(lambda request: httpx.Response(200, json={"Status": 1, "Data": data}))

    snapshot = await client.get_snapshot(token0_key=GALA, token1_key=GUSDC, fee_tier="10000")

    assert dict(snapshot.ticks) == {}
