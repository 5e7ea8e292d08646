from __future__ import annotations

import pytest

from poolsnap.infrastructure.quoting.offline_quoter_loader import (
    OfflineQuoterConfigError,
    load_offline_quoter,
)


def test_loads_dotted_attribute():
    quoter = load_offline_quoter("poolsnap.domain.services.record_decoders:decode_quote_result")

    assert callable(quoter)
    assert quoter.__name__ == "decode_quote_result"


@pytest.mark.parametrize(
    "path",
    [
        "no_colon_here",
        "poolsnap.domain.services.record_decoders:",
        "poolsnap.does_not_exist:quote",
        "poolsnap.domain.services.record_decoders:missing_function",
        "poolsnap.infrastructure.clients.chain_state_client:POOL_DISCRIMINATOR",
    ],
)
def test_rejects_bad_paths(path: str):
    with pytest.raises(OfflineQuoterConfigError):
        load_offline_quoter(path)
