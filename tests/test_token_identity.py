from __future__ import annotations

import pytest

from poolsnap.domain.entities.token import TokenIdentity
from poolsnap.domain.exceptions import InvalidArgumentError


def test_to_key_joins_segments_in_fixed_order():
    token = TokenIdentity(collection="GALA", category="Unit", type="none", additional_key="none")

    assert token.to_key() == "GALA$Unit$none$none"
    assert str(token) == "GALA$Unit$none$none"


@pytest.mark.parametrize(
    "token",
    [
        TokenIdentity(collection="GALA", category="Unit", type="none", additional_key="none"),
        TokenIdentity(collection="GUSDC", category="Unit", type="none", additional_key="none"),
        TokenIdentity(collection="Token", category="Unit", type="TEN", additional_key="client:5c806869e7fd0e2384461ce9"),
    ],
)
def test_key_round_trip_restores_all_fields(token: TokenIdentity):
    assert TokenIdentity.from_key(token.to_key()) == token


@pytest.mark.parametrize(
    "value",
    ["", "   ", "GALA$Unit$none", "GALA$Unit$none$none$extra", "GALA$$none$none", 42],
)
def test_from_key_rejects_malformed_keys(value):
    with pytest.raises(InvalidArgumentError):
        TokenIdentity.from_key(value)


def test_from_mapping_reads_wire_fields():
    token = TokenIdentity.from_mapping(
        {"collection": "GUSDC", "category": "Unit", "type": "none", "additionalKey": "none"}
    )

    assert token == TokenIdentity.from_key("GUSDC$Unit$none$none")
    assert token.to_wire() == {
        "collection": "GUSDC",
        "category": "Unit",
        "type": "none",
        "additionalKey": "none",
    }


def test_from_mapping_rejects_missing_field():
    with pytest.raises(InvalidArgumentError):
        TokenIdentity.from_mapping({"collection": "GUSDC", "category": "Unit", "type": "none"})
