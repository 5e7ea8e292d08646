from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Any

import httpx

from poolsnap.domain.entities.chain_object import ChainObjectRow
from poolsnap.domain.entities.pool import CompositePoolSnapshot, TickRecord
from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import (
    InvalidArgumentError,
    MalformedResponseError,
    PoolNotFoundError,
)
from poolsnap.domain.services.record_decoders import (
    decode_balance_record,
    decode_pool_record,
    decode_tick_record,
)
from poolsnap.infrastructure.clients.chain_state_client import POOL_DISCRIMINATOR


logger = logging.getLogger(__name__)


GET_COMPOSITE_POOL_PATH = "/api/asset/dexv3-contract/GetCompositePool"


@dataclass(frozen=True)
class GatewayClientSettings:
    gateway_api_base: str
    timeout_seconds: float


class GatewayCompositePoolClient:
    """Snapshot source backed by the on-chain gateway's GetCompositePool call."""

    def __init__(
        self,
        settings: GatewayClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    async def get_snapshot(
        self,
        *,
        token0_key: str,
        token1_key: str,
        fee_tier: str,
    ) -> CompositePoolSnapshot:
        token0 = TokenIdentity.from_key(token0_key)
        token1 = TokenIdentity.from_key(token1_key)
        try:
            fee = int(str(fee_tier))
        except ValueError as exc:
            raise InvalidArgumentError(f"fee_tier must be an integer: {fee_tier!r}") from exc

        context = f"pool {token0_key}/{token1_key} fee={fee_tier}"
        data = await self._post(
            body={"token0": token0.to_wire(), "token1": token1.to_wire(), "fee": fee},
            context=context,
        )

        pool = decode_pool_record(
            _mapping(data, "pool", context=context),
            envelope=ChainObjectRow(
                key0=POOL_DISCRIMINATOR,
                key1=token0_key,
                key2=token1_key,
                key3=str(fee_tier),
                value="",
            ),
        )
        tick_data_map = data.get("tickDataMap")
        if tick_data_map is None:
            tick_data_map = {}
        elif not isinstance(tick_data_map, Mapping):
            raise MalformedResponseError(
                f"Invalid response format for {context}: Data.tickDataMap is not an object."
            )
        ticks: dict[int, TickRecord] = {}
        for name in tick_data_map:
            tick = decode_tick_record(_mapping(tick_data_map, name, context=f"{context} tickDataMap"))
            ticks[tick.tick] = tick

        snapshot = CompositePoolSnapshot(
            pool=pool,
            ticks=MappingProxyType(ticks),
            token0_balance=decode_balance_record(_mapping(data, "token0Balance", context=context)),
            token1_balance=decode_balance_record(_mapping(data, "token1Balance", context=context)),
            token0_decimals=_decimals(data, "token0Decimals", context=context),
            token1_decimals=_decimals(data, "token1Decimals", context=context),
        )
        logger.info(
            "gateway_composite_pool_client: fetched_composite_pool token0=%s token1=%s fee=%s ticks=%s",
            token0_key,
            token1_key,
            fee_tier,
            len(ticks),
        )
        return snapshot

    async def _post(self, *, body: dict, context: str) -> Mapping[str, Any]:
        url = f"{self._settings.gateway_api_base.rstrip('/')}{GET_COMPOSITE_POOL_PATH}"
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json=body)
                payload = response.json()
        except httpx.HTTPError as exc:
            raise MalformedResponseError(f"Gateway request failed for {context}: {exc}") from exc
        except ValueError as exc:
            raise MalformedResponseError(f"Gateway returned a non-JSON body for {context}") from exc

        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Gateway returned a non-object body for {context}")
        if response.is_error or payload.get("Status") not in (None, 1):
            message = str(payload.get("Message") or payload.get("message") or response.reason_phrase)
            error_key = str(payload.get("ErrorKey") or "")
            if error_key == "NOT_FOUND" or "not found" in message.lower():
                raise PoolNotFoundError(f"Pool not found for {context}: {message}")
            raise MalformedResponseError(
                f"Gateway error status={response.status_code} for {context}: {message}"
            )

        data = payload.get("Data")
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Invalid response format for {context}: missing Data.")
        return data


def _mapping(data: Mapping[str, Any], name: str, *, context: str) -> Mapping[str, Any]:
    value = data.get(name)
    if not isinstance(value, Mapping):
        raise MalformedResponseError(f"Invalid response format for {context}: missing Data.{name}.")
    return value


def _decimals(data: Mapping[str, Any], name: str, *, context: str) -> int:
    value = data.get(name)
    if value is None or isinstance(value, bool):
        raise MalformedResponseError(f"Invalid response format for {context}: missing Data.{name}.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"{context}: Data.{name} is not an integer: {value!r}") from exc
