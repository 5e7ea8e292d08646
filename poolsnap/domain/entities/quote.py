from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from poolsnap.domain.entities.token import TokenIdentity


@dataclass(frozen=True)
class QuoteRequest:
    token_in: TokenIdentity
    token_out: TokenIdentity
    amount_in: Decimal
    fee_tier: str
    zero_for_one: bool = True


@dataclass(frozen=True)
class QuoteResult:
    source: str
    amount_in: Decimal | None
    amount_out: Decimal | None
    current_sqrt_price: Decimal | None = None
    new_sqrt_price: Decimal | None = None
    fields: Mapping = field(default_factory=dict)


@dataclass(frozen=True)
class QuoteComparison:
    request: QuoteRequest
    local: QuoteResult | None
    local_error: str | None
    remote: QuoteResult | None
    remote_error: str | None

    @property
    def amount_out_delta(self) -> Decimal | None:
        if self.local is None or self.remote is None:
            return None
        if self.local.amount_out is None or self.remote.amount_out is None:
            return None
        return self.remote.amount_out - self.local.amount_out
