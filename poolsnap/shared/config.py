from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


SNAPSHOT_SOURCE_INDEXING = "indexing"
SNAPSHOT_SOURCE_GATEWAY = "gateway"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    indexing_api_url: str
    gateway_api_base: str
    dex_api_base: str
    http_timeout_seconds: float
    snapshot_source: str
    offline_quoter: str


def get_settings() -> Settings:
    snapshot_source = (_env("SNAPSHOT_SOURCE", SNAPSHOT_SOURCE_INDEXING) or "").strip().lower()
    if snapshot_source not in (SNAPSHOT_SOURCE_INDEXING, SNAPSHOT_SOURCE_GATEWAY):
        raise ValueError(
            f"SNAPSHOT_SOURCE must be '{SNAPSHOT_SOURCE_INDEXING}' or "
            f"'{SNAPSHOT_SOURCE_GATEWAY}', got {snapshot_source!r}."
        )
    return Settings(
        indexing_api_url=_env(
            "INDEXING_API_URL",
            "https://int-query-api-chain-platform-prod-chain-platform-eks.prod.galachain.com/graphql",
        ),
        gateway_api_base=_env("GATEWAY_API_BASE", "https://gateway-mainnet.galachain.com"),
        dex_api_base=_env("DEX_API_BASE", "https://dex-backend-prod1.defi.gala.com"),
        http_timeout_seconds=float(_env("HTTP_TIMEOUT_SECONDS", "30")),
        snapshot_source=snapshot_source,
        offline_quoter=(_env("OFFLINE_QUOTER", "") or "").strip(),
    )
