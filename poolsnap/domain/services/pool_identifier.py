from __future__ import annotations

from eth_utils import keccak

from poolsnap.domain.entities.pool import PoolIdentifier
from poolsnap.domain.exceptions import InvalidArgumentError


POOL_ALIAS_PREFIX = "service|pool_"


def _require_text(value: object, *, field_name: str) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{field_name} must be a string, got {type(value).__name__}.")
    if not value.strip():
        raise InvalidArgumentError(f"{field_name} must not be empty.")
    return value


def derive_pool_identifier(token0_key: str, token1_key: str, fee_tier: str) -> PoolIdentifier:
    """Derive the pool hash and alias used as ledger keys.

    The hash is Keccak-256 over ``"token0Key,token1Key,feeTier"`` in the order
    given. Token order is not canonicalized, so swapping the tokens yields a
    different identifier.
    """
    hashing_string = ",".join(
        (
            _require_text(token0_key, field_name="token0_key"),
            _require_text(token1_key, field_name="token1_key"),
            _require_text(fee_tier, field_name="fee_tier"),
        )
    )
    pool_hash = keccak(text=hashing_string).hex()
    return PoolIdentifier(pool_alias=f"{POOL_ALIAS_PREFIX}{pool_hash}", pool_hash=pool_hash)
