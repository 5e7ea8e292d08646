from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from poolsnap.domain.exceptions import InvalidArgumentError


TOKEN_KEY_SEPARATOR = "$"


@dataclass(frozen=True)
class TokenIdentity:
    collection: str
    category: str
    type: str
    additional_key: str

    def to_key(self) -> str:
        return TOKEN_KEY_SEPARATOR.join(
            (self.collection, self.category, self.type, self.additional_key)
        )

    def to_wire(self) -> dict:
        return {
            "collection": self.collection,
            "category": self.category,
            "type": self.type,
            "additionalKey": self.additional_key,
        }

    @classmethod
    def from_key(cls, value: str) -> TokenIdentity:
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgumentError("Token key must be a non-empty string.")
        parts = value.split(TOKEN_KEY_SEPARATOR)
        if len(parts) != 4 or any(not part for part in parts):
            raise InvalidArgumentError(
                f"Token key must have four non-empty '$'-separated segments: {value!r}"
            )
        return cls(
            collection=parts[0],
            category=parts[1],
            type=parts[2],
            additional_key=parts[3],
        )

    @classmethod
    def from_mapping(cls, value: Mapping) -> TokenIdentity:
        try:
            return cls(
                collection=str(value["collection"]),
                category=str(value["category"]),
                type=str(value["type"]),
                additional_key=str(value["additionalKey"]),
            )
        except (KeyError, TypeError) as exc:
            raise InvalidArgumentError(f"Token identity is missing field: {exc}") from exc

    def __str__(self) -> str:
        return self.to_key()
