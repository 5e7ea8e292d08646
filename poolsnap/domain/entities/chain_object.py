from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChainObjectRow:
    """Raw ``allChainObjects`` edge node; ``value`` is the undecoded JSON payload."""

    key0: str
    key1: str
    key2: str | None
    key3: str | None
    value: str
