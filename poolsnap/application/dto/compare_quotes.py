from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompareQuotesInput:
    token_in: str
    token_out: str
    amount_in: str
    fee_tier: str
    zero_for_one: bool = True
