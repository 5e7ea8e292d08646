from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from poolsnap.domain.exceptions import RemoteQuoteFailureError
from poolsnap.infrastructure.clients.dex_quote_client import DexQuoteClient, DexQuoteClientSettings


def _make_client(handler) -> DexQuoteClient:
    return DexQuoteClient(
        DexQuoteClientSettings(dex_api_base="https://dex.example/", timeout_seconds=5),
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_quote_sends_params_and_unwraps_data():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "status": 200,
                "data": {
                    "data": {
                        "currentSqrtPrice": "0.1298",
                        "newSqrtPrice": "0.1297",
                        "fee": 10000,
                        "amountIn": "1000",
                        "amountOut": "16.71",
                    }
                },
            },
        )

    result = await _make_client(handler).fetch_quote(
        token_in_key="GALA$Unit$none$none",
        token_out_key="GUSDC$Unit$none$none",
        amount_in=Decimal("1000"),
        fee_tier="10000",
    )

    assert result.source == "remote"
    assert result.amount_out == Decimal("16.71")
    assert result.current_sqrt_price == Decimal("0.1298")
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/v1/trade/quote"
    assert dict(request.url.params) == {
        "tokenIn": "GALA$Unit$none$none",
        "tokenOut": "GUSDC$Unit$none$none",
        "amountIn": "1000",
        "fee": "10000",
    }


@pytest.mark.asyncio
async def test_fetch_quote_http_error_is_remote_failure():
    client = _make_client(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(RemoteQuoteFailureError, match="GALA"):
        await client.fetch_quote(
            token_in_key="GALA$Unit$none$none",
            token_out_key="GUSDC$Unit$none$none",
            amount_in=Decimal("1"),
            fee_tier="10000",
        )


@pytest.mark.asyncio
async def test_fetch_quote_missing_envelope_is_remote_failure():
    client = _make_client(lambda request: httpx.Response(200, json={"data": {}}))

    with pytest.raises(RemoteQuoteFailureError):
        await client.fetch_quote(
            token_in_key="GALA$Unit$none$none",
            token_out_key="GUSDC$Unit$none$none",
            amount_in=Decimal("1"),
            fee_tier="10000",
        )


@pytest.mark.asyncio
async def test_fetch_quote_non_json_is_remote_failure():
    client = _make_client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(RemoteQuoteFailureError):
        await client.fetch_quote(
            token_in_key="GALA$Unit$none$none",
            token_out_key="GUSDC$Unit$none$none",
            amount_in=Decimal("1"),
            fee_tier="10000",
        )


@pytest.mark.asyncio
async def test_fetch_quote_unparseable_amount_is_remote_failure():
    client = _make_client(
        lambda request: httpx.Response(200, json={"data": {"data": {"amountIn": "1", "amountOut": "n/a"}}})
    )

    with pytest.raises(RemoteQuoteFailureError):
        await client.fetch_quote(
            token_in_key="GALA$Unit$none$none",
            token_out_key="GUSDC$Unit$none$none",
            amount_in=Decimal("1"),
            fee_tier="10000",
        )
