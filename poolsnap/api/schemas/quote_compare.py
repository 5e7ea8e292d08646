from __future__ import annotations

from pydantic import BaseModel, Field


class QuoteResultResponse(BaseModel):
    source: str
    amount_in: str | None = None
    amount_out: str | None = None
    current_sqrt_price: str | None = None
    new_sqrt_price: str | None = None
    fields: dict = Field(default_factory=dict, description="Raw quote payload.")


class QuoteComparisonResponse(BaseModel):
    token_in: str
    token_out: str
    amount_in: str
    fee: str
    zero_for_one: bool
    local: QuoteResultResponse | None = None
    local_error: str | None = None
    remote: QuoteResultResponse | None = None
    remote_error: str | None = None
    amount_out_delta: str | None = Field(None, description="remote.amount_out - local.amount_out")
