from __future__ import annotations

import json
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from poolsnap.domain.entities.chain_object import ChainObjectRow
from poolsnap.domain.entities.pool import BalanceRecord, PoolRecord, TickRecord
from poolsnap.domain.entities.quote import QuoteResult
from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import (
    DecimalsNotFoundError,
    InvalidArgumentError,
    MalformedResponseError,
)


def load_json_object(value: Any, *, context: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"{context}: payload is not valid JSON.") from exc
    if not isinstance(decoded, Mapping):
        raise MalformedResponseError(f"{context}: payload is not a JSON object.")
    return decoded


def _decimal(
    payload: Mapping[str, Any],
    name: str,
    *,
    context: str,
    default: str | None = None,
    non_negative: bool = False,
) -> Decimal:
    raw = payload.get(name)
    if raw is None:
        if default is None:
            raise MalformedResponseError(f"{context}: missing field '{name}'.")
        raw = default
    try:
        value = Decimal(str(raw))
    except InvalidOperation as exc:
        raise MalformedResponseError(f"{context}: field '{name}' is not numeric: {raw!r}") from exc
    if not value.is_finite():
        raise MalformedResponseError(f"{context}: field '{name}' is not finite: {raw!r}")
    if non_negative and value < 0:
        raise MalformedResponseError(f"{context}: field '{name}' must be non-negative: {raw!r}")
    return value


def _optional_decimal(payload: Mapping[str, Any], name: str, *, context: str) -> Decimal | None:
    if payload.get(name) is None:
        return None
    return _decimal(payload, name, context=context)


def _int(payload: Mapping[str, Any], name: str, *, context: str, fallback: Any = None) -> int:
    raw = payload.get(name, fallback)
    if raw is None or isinstance(raw, bool):
        raise MalformedResponseError(f"{context}: missing field '{name}'.")
    try:
        return int(str(raw))
    except ValueError as exc:
        raise MalformedResponseError(f"{context}: field '{name}' is not an integer: {raw!r}") from exc


def _token_identity(
    payload: Mapping[str, Any],
    *,
    class_key_field: str,
    key_field: str,
    fallback_key: str | None,
    context: str,
) -> TokenIdentity:
    try:
        class_key = payload.get(class_key_field)
        if isinstance(class_key, Mapping):
            return TokenIdentity.from_mapping(class_key)
        key = payload.get(key_field) or fallback_key
        if key:
            return TokenIdentity.from_key(str(key))
    except InvalidArgumentError as exc:
        raise MalformedResponseError(f"{context}: {exc}") from exc
    raise MalformedResponseError(f"{context}: missing field '{class_key_field}'.")


def decode_pool_record(
    payload: Mapping[str, Any] | str,
    *,
    envelope: ChainObjectRow | None = None,
) -> PoolRecord:
    """Decode a pool payload, overlaying the envelope keys when given.

    ``envelope`` carries key0..key3 of the ``allChainObjects`` node the payload
    was read from; the stored keys take precedence over anything in the
    payload so the record stays traceable to its ledger entry.
    """
    context = "pool"
    data = load_json_object(payload, context=context)
    key1 = envelope.key1 if envelope is not None else data.get("key1")
    key2 = envelope.key2 if envelope is not None else data.get("key2")
    key3 = envelope.key3 if envelope is not None else data.get("key3")
    token0 = _token_identity(
        data,
        class_key_field="token0ClassKey",
        key_field="token0",
        fallback_key=key1,
        context=context,
    )
    token1 = _token_identity(
        data,
        class_key_field="token1ClassKey",
        key_field="token1",
        fallback_key=key2,
        context=context,
    )
    fee = _int(data, "fee", context=context, fallback=key3)
    bitmap = data.get("bitmap") or {}
    if not isinstance(bitmap, Mapping):
        raise MalformedResponseError(f"{context}: field 'bitmap' is not an object.")

    return PoolRecord(
        key0=(envelope.key0 if envelope is not None else str(data.get("key0") or "")),
        key1=str(key1 or token0.to_key()),
        key2=str(key2 or token1.to_key()),
        key3=str(key3 if key3 is not None else fee),
        token0=str(data.get("token0") or token0.to_key()),
        token1=str(data.get("token1") or token1.to_key()),
        token0_class_key=token0,
        token1_class_key=token1,
        fee=fee,
        sqrt_price=_decimal(data, "sqrtPrice", context=context, non_negative=True),
        liquidity=_decimal(data, "liquidity", context=context, non_negative=True),
        gross_pool_liquidity=_decimal(data, "grossPoolLiquidity", context=context, default="0"),
        fee_growth_global0=_decimal(data, "feeGrowthGlobal0", context=context, non_negative=True),
        fee_growth_global1=_decimal(data, "feeGrowthGlobal1", context=context, non_negative=True),
        protocol_fees=_decimal(data, "protocolFees", context=context, default="0"),
        protocol_fees_token0=_decimal(data, "protocolFeesToken0", context=context, default="0"),
        protocol_fees_token1=_decimal(data, "protocolFeesToken1", context=context, default="0"),
        tick_spacing=_int(data, "tickSpacing", context=context),
        max_liquidity_per_tick=_decimal(data, "maxLiquidityPerTick", context=context),
        bitmap={str(key): str(value) for key, value in bitmap.items()},
    )


def decode_tick_record(row: ChainObjectRow | Mapping[str, Any]) -> TickRecord:
    if isinstance(row, ChainObjectRow):
        context = f"tick {row.key1}/{row.key2}"
        data = load_json_object(row.value, context=context)
        fallback_tick = row.key2
        fallback_hash = row.key1
    else:
        context = "tick"
        data = row
        fallback_tick = None
        fallback_hash = None

    return TickRecord(
        pool_hash=str(data.get("poolHash") or fallback_hash or ""),
        tick=_int(data, "tick", context=context, fallback=fallback_tick),
        initialised=bool(data.get("initialised", False)),
        liquidity_net=_decimal(data, "liquidityNet", context=context),
        liquidity_gross=_decimal(data, "liquidityGross", context=context),
        fee_growth_outside0=_decimal(data, "feeGrowthOutside0", context=context, default="0"),
        fee_growth_outside1=_decimal(data, "feeGrowthOutside1", context=context, default="0"),
    )


def decode_balance_record(node: Mapping[str, Any], *, owner: str | None = None) -> BalanceRecord:
    context = f"balance {owner or node.get('owner') or ''}".rstrip()
    try:
        token = TokenIdentity.from_mapping(node)
    except InvalidArgumentError as exc:
        raise MalformedResponseError(f"{context}: {exc}") from exc
    return BalanceRecord(
        owner=str(node.get("owner") or owner or ""),
        token=token,
        quantity=_decimal(node, "quantity", context=context, default="0"),
        locked_holds=tuple(node.get("lockedHolds") or ()),
        in_use_holds=tuple(node.get("inUseHolds") or ()),
        instance_ids=tuple(str(value) for value in node.get("instanceIds") or ()),
    )


def decode_token_decimals(payload: Mapping[str, Any] | str, *, token_key: str) -> int:
    context = f"token class {token_key}"
    data = load_json_object(payload, context=context)
    if data.get("decimals") is None:
        raise DecimalsNotFoundError(f"Decimals not found for token {token_key}.")
    return _int(data, "decimals", context=context)


def decode_quote_result(payload: Mapping[str, Any] | str, *, source: str) -> QuoteResult:
    """Normalize a quote payload into a QuoteResult.

    Dex API payloads carry ``amountIn``/``amountOut``; contract-style payloads
    carry signed ``amount0``/``amount1`` where the positive side is paid into
    the pool and the negative side is paid out.
    """
    context = f"{source} quote"
    data = load_json_object(payload, context=context)
    amount_in = _optional_decimal(data, "amountIn", context=context)
    amount_out = _optional_decimal(data, "amountOut", context=context)
    if amount_in is None and amount_out is None:
        amount0 = _optional_decimal(data, "amount0", context=context)
        amount1 = _optional_decimal(data, "amount1", context=context)
        signed = [value for value in (amount0, amount1) if value is not None]
        amount_in = next((value for value in signed if value > 0), None)
        amount_out = next((-value for value in signed if value < 0), None)
    if amount_in is None and amount_out is None:
        raise MalformedResponseError(f"{context}: payload has no amount fields.")

    return QuoteResult(
        source=source,
        amount_in=amount_in,
        amount_out=amount_out,
        current_sqrt_price=_optional_decimal(data, "currentSqrtPrice", context=context),
        new_sqrt_price=_optional_decimal(data, "newSqrtPrice", context=context),
        fields=dict(data),
    )
