from __future__ import annotations

import asyncio
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
import inspect
import logging

from poolsnap.application.dto.compare_quotes import CompareQuotesInput
from poolsnap.application.ports.pool_snapshot_port import PoolSnapshotSource
from poolsnap.application.ports.quote_port import OfflineQuoter, RemoteQuotePort
from poolsnap.application.use_cases.get_pool_snapshot import normalize_fee_tier
from poolsnap.domain.entities.quote import QuoteComparison, QuoteRequest, QuoteResult
from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import InvalidArgumentError
from poolsnap.domain.services.record_decoders import decode_quote_result


logger = logging.getLogger(__name__)


class CompareQuotesUseCase:
    """Computes a local quote from a pool snapshot and fetches the remote one.

    A failure on either path is captured into the comparison instead of
    being raised, and the remote quote is requested either way. Disagreement
    between the two is reported, never resolved.
    """

    def __init__(
        self,
        *,
        snapshot_source: PoolSnapshotSource,
        offline_quoter: OfflineQuoter,
        remote_quote_port: RemoteQuotePort,
    ):
        self._snapshot_source = snapshot_source
        self._offline_quoter = offline_quoter
        self._remote_quote_port = remote_quote_port

    async def execute(self, command: CompareQuotesInput) -> QuoteComparison:
        request = build_quote_request(command)

        (local, local_error), (remote, remote_error) = await asyncio.gather(
            self._local_quote(request),
            self._remote_quote(request),
        )

        comparison = QuoteComparison(
            request=request,
            local=local,
            local_error=local_error,
            remote=remote,
            remote_error=remote_error,
        )
        logger.info(
            "compare_quotes: compared token_in=%s token_out=%s amount_in=%s fee=%s local_amount_out=%s remote_amount_out=%s delta=%s local_error=%s remote_error=%s",
            request.token_in,
            request.token_out,
            request.amount_in,
            request.fee_tier,
            local.amount_out if local else None,
            remote.amount_out if remote else None,
            comparison.amount_out_delta,
            local_error is not None,
            remote_error is not None,
        )
        return comparison

    async def _local_quote(self, request: QuoteRequest) -> tuple[QuoteResult | None, str | None]:
        if request.zero_for_one:
            token0, token1 = request.token_in, request.token_out
        else:
            token0, token1 = request.token_out, request.token_in

        try:
            snapshot = await self._snapshot_source.get_snapshot(
                token0_key=token0.to_key(),
                token1_key=token1.to_key(),
                fee_tier=request.fee_tier,
            )
            result = self._offline_quoter(snapshot, request)
            if inspect.isawaitable(result):
                result = await result
            if isinstance(result, Mapping):
                result = decode_quote_result(result, source="local")
            if not isinstance(result, QuoteResult):
                raise TypeError(f"Offline quoter returned {type(result).__name__}.")
        except Exception as exc:
            logger.warning(
                "compare_quotes: local_quote_failed token_in=%s token_out=%s fee=%s error=%s",
                request.token_in,
                request.token_out,
                request.fee_tier,
                exc,
            )
            return None, _describe(exc)
        return result, None

    async def _remote_quote(self, request: QuoteRequest) -> tuple[QuoteResult | None, str | None]:
        try:
            result = await self._remote_quote_port.fetch_quote(
                token_in_key=request.token_in.to_key(),
                token_out_key=request.token_out.to_key(),
                amount_in=request.amount_in,
                fee_tier=request.fee_tier,
            )
        except Exception as exc:
            logger.warning(
                "compare_quotes: remote_quote_failed token_in=%s token_out=%s fee=%s error=%s",
                request.token_in,
                request.token_out,
                request.fee_tier,
                exc,
            )
            return None, _describe(exc)
        return result, None


def build_quote_request(command: CompareQuotesInput) -> QuoteRequest:
    token_in = TokenIdentity.from_key(command.token_in)
    token_out = TokenIdentity.from_key(command.token_out)
    if token_in == token_out:
        raise InvalidArgumentError("token_in and token_out must differ.")
    try:
        amount_in = Decimal(str(command.amount_in).strip())
    except InvalidOperation as exc:
        raise InvalidArgumentError(f"amount_in is not a number: {command.amount_in!r}") from exc
    if not amount_in.is_finite() or amount_in <= 0:
        raise InvalidArgumentError(f"amount_in must be positive: {command.amount_in!r}")

    return QuoteRequest(
        token_in=token_in,
        token_out=token_out,
        amount_in=amount_in,
        fee_tier=normalize_fee_tier(command.fee_tier),
        zero_for_one=command.zero_for_one,
    )


def _describe(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"
