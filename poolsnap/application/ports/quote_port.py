from __future__ import annotations

from collections.abc import Awaitable, Mapping
from decimal import Decimal
from typing import Any, Protocol

from poolsnap.domain.entities.pool import CompositePoolSnapshot
from poolsnap.domain.entities.quote import QuoteRequest, QuoteResult


class OfflineQuoter(Protocol):
    def __call__(
        self,
        snapshot: CompositePoolSnapshot,
        request: QuoteRequest,
    ) -> QuoteResult | Mapping[str, Any] | Awaitable[QuoteResult | Mapping[str, Any]]:
        ...


class RemoteQuotePort(Protocol):
    async def fetch_quote(
        self,
        *,
        token_in_key: str,
        token_out_key: str,
        amount_in: Decimal,
        fee_tier: str,
    ) -> QuoteResult:
        ...
