from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

import httpx

from poolsnap.domain.entities.chain_object import ChainObjectRow
from poolsnap.domain.entities.pool import BalanceRecord, PoolRecord
from poolsnap.domain.entities.token import TOKEN_KEY_SEPARATOR
from poolsnap.domain.exceptions import (
    DecimalsNotFoundError,
    InvalidArgumentError,
    MalformedResponseError,
    PoolNotFoundError,
)
from poolsnap.domain.services.record_decoders import (
    decode_balance_record,
    decode_pool_record,
    decode_token_decimals,
)


logger = logging.getLogger(__name__)


POOL_DISCRIMINATOR = "GCDXCHLPL"
TICK_DISCRIMINATOR = "GCDXCHLTDA"
TOKEN_CLASS_DISCRIMINATOR = "GCTI"


POOL_QUERY = """
query GetSpecificPool($token0Key: String!, $token1Key: String!, $fee: String!) {
  allChainObjects(
    condition: { key0: "%s", key1: $token0Key, key2: $token1Key, key3: $fee }
  ) {
    edges { node { id key0 key1 key2 key3 value } }
  }
}
""" % POOL_DISCRIMINATOR

BALANCES_QUERY = """
query GetTokenBalance($owner: String!) {
  allBalances(condition: { owner: $owner }) {
    edges { node { quantity collection category additionalKey type } }
  }
}
"""

TICKS_QUERY = """
query GetPoolTicks($poolHash: String!) {
  allChainObjects(condition: { key0: "%s", key1: $poolHash }) {
    edges { node { id key0 key1 key2 value } }
  }
}
""" % TICK_DISCRIMINATOR

TOKEN_DECIMALS_QUERY = """
query GetTokenDecimals($collection: String!) {
  allChainObjects(condition: { key0: "%s", key1: $collection }) {
    edges { node { id key0 key1 key2 value } }
  }
}
""" % TOKEN_CLASS_DISCRIMINATOR


@dataclass(frozen=True)
class ChainStateClientSettings:
    indexing_api_url: str
    timeout_seconds: float


class IndexingApiChainStateClient:
    """Read-only client for the chain indexing GraphQL API.

    Every call is a single POST round trip; nothing is retried. Transport and
    protocol failures surface as ``MalformedResponseError``.
    """

    def __init__(
        self,
        settings: ChainStateClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    async def fetch_pool(self, *, token0_key: str, token1_key: str, fee_tier: str) -> PoolRecord:
        payload = await self._post_graphql(
            query=POOL_QUERY,
            variables={"token0Key": token0_key, "token1Key": token1_key, "fee": str(fee_tier)},
        )
        edges = _require_edges(
            payload,
            container="allChainObjects",
            context=f"pool {token0_key}/{token1_key} fee={fee_tier}",
        )
        if not edges:
            raise PoolNotFoundError(
                f"Pool not found for tokens {token0_key}/{token1_key} with fee {fee_tier}"
            )

        row = _chain_object_row(edges[0])
        pool = decode_pool_record(row.value, envelope=row)
        logger.info(
            "chain_state_client: fetched_pool token0=%s token1=%s fee=%s matches=%s",
            token0_key,
            token1_key,
            fee_tier,
            len(edges),
        )
        return pool

    async def fetch_balances(self, *, owner_alias: str) -> list[BalanceRecord]:
        payload = await self._post_graphql(query=BALANCES_QUERY, variables={"owner": owner_alias})
        edges = _require_edges(payload, container="allBalances", context=f"balances owner={owner_alias}")

        balances = [
            decode_balance_record(_node(edge), owner=owner_alias)
            for edge in edges
        ]
        logger.info(
            "chain_state_client: fetched_balances owner=%s fetched=%s",
            owner_alias,
            len(balances),
        )
        return balances

    async def fetch_ticks(self, *, pool_hash: str) -> list[ChainObjectRow]:
        payload = await self._post_graphql(query=TICKS_QUERY, variables={"poolHash": pool_hash})
        edges = _require_edges(payload, container="allChainObjects", context=f"ticks pool_hash={pool_hash}")

        rows = [_chain_object_row(edge) for edge in edges]
        logger.info(
            "chain_state_client: fetched_ticks pool_hash=%s fetched=%s",
            pool_hash,
            len(rows),
        )
        return rows

    async def fetch_decimals(self, *, token_key: str) -> int:
        collection = token_collection(token_key)
        payload = await self._post_graphql(
            query=TOKEN_DECIMALS_QUERY,
            variables={"collection": collection},
        )
        edges = _require_edges(
            payload,
            container="allChainObjects",
            context=f"token class {token_key}",
        )
        if not edges:
            raise DecimalsNotFoundError(
                f"Token class not found for {token_key} (collection={collection})."
            )

        row = _chain_object_row(edges[0])
        decimals = decode_token_decimals(row.value, token_key=token_key)
        logger.info(
            "chain_state_client: fetched_decimals token=%s collection=%s decimals=%s",
            token_key,
            collection,
            decimals,
        )
        return decimals

    async def _post_graphql(self, *, query: str, variables: dict) -> dict:
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._settings.indexing_api_url,
                    json={"query": query, "variables": variables},
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise MalformedResponseError(
                f"Indexing API request failed variables={variables}: {exc}"
            ) from exc
        except ValueError as exc:
            raise MalformedResponseError(
                f"Indexing API returned a non-JSON body variables={variables}"
            ) from exc

        if not isinstance(payload, dict):
            raise MalformedResponseError("Indexing API returned a non-object body.")
        errors = payload.get("errors") or []
        if errors:
            message = " | ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise MalformedResponseError(f"Indexing API error variables={variables}: {message}")
        return payload


def token_collection(token_key: str) -> str:
    if not isinstance(token_key, str) or not token_key.strip():
        raise InvalidArgumentError("token_key must be a non-empty string.")
    collection = token_key.split(TOKEN_KEY_SEPARATOR)[0]
    if not collection:
        raise InvalidArgumentError(f"token_key has an empty collection segment: {token_key!r}")
    return collection


def _require_edges(payload: dict, *, container: str, context: str) -> list:
    data = payload.get("data")
    result = data.get(container) if isinstance(data, dict) else None
    edges = result.get("edges") if isinstance(result, dict) else None
    if not isinstance(edges, list):
        raise MalformedResponseError(f"Invalid response format for {context}: missing {container}.edges.")
    return edges


def _node(edge: Any) -> dict:
    node = edge.get("node") if isinstance(edge, dict) else None
    if not isinstance(node, dict):
        raise MalformedResponseError("Invalid response format: edge without node.")
    return node


def _chain_object_row(edge: Any) -> ChainObjectRow:
    node = _node(edge)
    value = node.get("value")
    if node.get("key0") is None or node.get("key1") is None or value is None:
        raise MalformedResponseError(f"Invalid chain object node id={node.get('id')}.")
    return ChainObjectRow(
        key0=str(node["key0"]),
        key1=str(node["key1"]),
        key2=str(node["key2"]) if node.get("key2") is not None else None,
        key3=str(node["key3"]) if node.get("key3") is not None else None,
        value=value,
    )
