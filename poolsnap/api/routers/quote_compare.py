from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from poolsnap.api.deps import get_compare_quotes_use_case
from poolsnap.api.schemas.quote_compare import QuoteComparisonResponse, QuoteResultResponse
from poolsnap.application.dto.compare_quotes import CompareQuotesInput
from poolsnap.application.use_cases.compare_quotes import CompareQuotesUseCase
from poolsnap.domain.entities.quote import QuoteResult
from poolsnap.domain.exceptions import InvalidArgumentError

router = APIRouter()


def _dec_to_str_or_none(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _quote_response(result: QuoteResult | None) -> QuoteResultResponse | None:
    if result is None:
        return None
    return QuoteResultResponse(
        source=result.source,
        amount_in=_dec_to_str_or_none(result.amount_in),
        amount_out=_dec_to_str_or_none(result.amount_out),
        current_sqrt_price=_dec_to_str_or_none(result.current_sqrt_price),
        new_sqrt_price=_dec_to_str_or_none(result.new_sqrt_price),
        fields=dict(result.fields),
    )


@router.get("/v1/quotes/compare", response_model=QuoteComparisonResponse)
async def compare_quotes(
    token_in: str,
    token_out: str,
    amount_in: str,
    fee: str,
    zero_for_one: bool = True,
    use_case: CompareQuotesUseCase = Depends(get_compare_quotes_use_case),
):
    try:
        result = await use_case.execute(
            CompareQuotesInput(
                token_in=token_in,
                token_out=token_out,
                amount_in=amount_in,
                fee_tier=fee,
                zero_for_one=zero_for_one,
            )
        )
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return QuoteComparisonResponse(
        token_in=result.request.token_in.to_key(),
        token_out=result.request.token_out.to_key(),
        amount_in=str(result.request.amount_in),
        fee=result.request.fee_tier,
        zero_for_one=result.request.zero_for_one,
        local=_quote_response(result.local),
        local_error=result.local_error,
        remote=_quote_response(result.remote),
        remote_error=result.remote_error,
        amount_out_delta=_dec_to_str_or_none(result.amount_out_delta),
    )
