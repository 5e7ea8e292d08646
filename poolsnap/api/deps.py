from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from poolsnap.application.ports.pool_snapshot_port import PoolSnapshotSource
from poolsnap.application.ports.quote_port import OfflineQuoter
from poolsnap.application.use_cases.assemble_pool_snapshot import AssemblePoolSnapshotUseCase
from poolsnap.application.use_cases.compare_quotes import CompareQuotesUseCase
from poolsnap.application.use_cases.get_pool_snapshot import GetPoolSnapshotUseCase
from poolsnap.infrastructure.clients.chain_state_client import (
    ChainStateClientSettings,
    IndexingApiChainStateClient,
)
from poolsnap.infrastructure.clients.dex_quote_client import DexQuoteClient, DexQuoteClientSettings
from poolsnap.infrastructure.clients.gateway_composite_pool_client import (
    GatewayClientSettings,
    GatewayCompositePoolClient,
)
from poolsnap.infrastructure.quoting.offline_quoter_loader import (
    OfflineQuoterConfigError,
    load_offline_quoter,
)
from poolsnap.shared.config import SNAPSHOT_SOURCE_GATEWAY, get_settings


@lru_cache(maxsize=1)
def _get_snapshot_source() -> PoolSnapshotSource:
    settings = get_settings()
    if settings.snapshot_source == SNAPSHOT_SOURCE_GATEWAY:
        return GatewayCompositePoolClient(
            GatewayClientSettings(
                gateway_api_base=settings.gateway_api_base,
                timeout_seconds=settings.http_timeout_seconds,
            )
        )
    chain_state_client = IndexingApiChainStateClient(
        ChainStateClientSettings(
            indexing_api_url=settings.indexing_api_url,
            timeout_seconds=settings.http_timeout_seconds,
        )
    )
    return AssemblePoolSnapshotUseCase(chain_state_port=chain_state_client)


@lru_cache(maxsize=1)
def _get_dex_quote_client() -> DexQuoteClient:
    settings = get_settings()
    return DexQuoteClient(
        DexQuoteClientSettings(
            dex_api_base=settings.dex_api_base,
            timeout_seconds=settings.http_timeout_seconds,
        )
    )


def _get_offline_quoter() -> OfflineQuoter:
    settings = get_settings()
    if not settings.offline_quoter:
        raise HTTPException(status_code=503, detail="OFFLINE_QUOTER is required.")
    try:
        return load_offline_quoter(settings.offline_quoter)
    except OfflineQuoterConfigError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def get_pool_snapshot_use_case() -> GetPoolSnapshotUseCase:
    return GetPoolSnapshotUseCase(snapshot_source=_get_snapshot_source())


def get_compare_quotes_use_case() -> CompareQuotesUseCase:
    return CompareQuotesUseCase(
        snapshot_source=_get_snapshot_source(),
        offline_quoter=_get_offline_quoter(),
        remote_quote_port=_get_dex_quote_client(),
    )
