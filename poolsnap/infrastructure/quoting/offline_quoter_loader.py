from __future__ import annotations

import importlib

from poolsnap.application.ports.quote_port import OfflineQuoter


class OfflineQuoterConfigError(RuntimeError):
    pass


def load_offline_quoter(path: str) -> OfflineQuoter:
    """Resolve an offline quoter from a ``package.module:attribute`` path."""
    module_name, _, attribute = path.strip().partition(":")
    if not module_name or not attribute:
        raise OfflineQuoterConfigError(
            f"OFFLINE_QUOTER must look like 'package.module:attribute', got {path!r}."
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise OfflineQuoterConfigError(f"Cannot import offline quoter module {module_name!r}.") from exc

    target = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise OfflineQuoterConfigError(
                f"Offline quoter {attribute!r} not found in {module_name!r}."
            ) from exc
    if not callable(target):
        raise OfflineQuoterConfigError(f"Offline quoter {path!r} is not callable.")
    return target
