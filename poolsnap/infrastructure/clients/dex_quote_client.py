from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging

import httpx

from poolsnap.domain.entities.quote import QuoteResult
from poolsnap.domain.exceptions import MalformedResponseError, RemoteQuoteFailureError
from poolsnap.domain.services.record_decoders import decode_quote_result


logger = logging.getLogger(__name__)


QUOTE_PATH = "/v1/trade/quote"


@dataclass(frozen=True)
class DexQuoteClientSettings:
    dex_api_base: str
    timeout_seconds: float


class DexQuoteClient:
    def __init__(
        self,
        settings: DexQuoteClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    async def fetch_quote(
        self,
        *,
        token_in_key: str,
        token_out_key: str,
        amount_in: Decimal,
        fee_tier: str,
    ) -> QuoteResult:
        url = f"{self._settings.dex_api_base.rstrip('/')}{QUOTE_PATH}"
        params = {
            "tokenIn": token_in_key,
            "tokenOut": token_out_key,
            "amountIn": str(amount_in),
            "fee": str(fee_tier),
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise RemoteQuoteFailureError(
                f"Quote request failed for {token_in_key}->{token_out_key} fee={fee_tier}: {exc}"
            ) from exc
        except ValueError as exc:
            raise RemoteQuoteFailureError(
                f"Quote response is not JSON for {token_in_key}->{token_out_key} fee={fee_tier}"
            ) from exc

        outer = payload.get("data") if isinstance(payload, dict) else None
        quote_payload = outer.get("data") if isinstance(outer, dict) else None
        if not isinstance(quote_payload, dict):
            raise RemoteQuoteFailureError(
                f"Quote response missing data.data for {token_in_key}->{token_out_key} fee={fee_tier}"
            )
        try:
            result = decode_quote_result(quote_payload, source="remote")
        except MalformedResponseError as exc:
            raise RemoteQuoteFailureError(str(exc)) from exc

        logger.info(
            "dex_quote_client: fetched_quote token_in=%s token_out=%s amount_in=%s fee=%s amount_out=%s",
            token_in_key,
            token_out_key,
            amount_in,
            fee_tier,
            result.amount_out,
        )
        return result
