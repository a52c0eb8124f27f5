"""Asset Pair Resolution — default splitter for "<base asset>/<quote asset>".

Invariants:
    - Exactly two assets; each is owner@mint[CODE.scale]
    - CODE is 1-64 chars of [A-Z0-9-]; scale is 0-24
    - Raises ValueError; validate_asset_pair owns the user-facing error

Design Decisions:
    - Satisfies the AssetResolver protocol so deployments with their own asset
      registry can substitute a resolver without touching validation
"""

import re

from settle.core.domain_types import AssetDescriptor


MAX_ASSET_SCALE: int = 24

_ASSET = r"([^@\[\]\s/]+@[^\[\]\s/]+)\[([A-Z0-9\-]{1,64})\.([0-9]{1,2})\]"
ASSET_PAIR_PATTERN = re.compile(rf"^{_ASSET}/{_ASSET}$")


def _descriptor(owner: str, code: str, scale: str) -> AssetDescriptor:
    value = int(scale)
    if value > MAX_ASSET_SCALE:
        raise ValueError(f"asset scale out of range: {scale}")
    local, host = owner.split("@", 1)
    return AssetDescriptor(owner=f"{local}@{host.lower()}", code=code, scale=value)


def resolve_asset_pair(pair: str) -> list[AssetDescriptor]:
    m = ASSET_PAIR_PATTERN.fullmatch(pair)
    if m is None:
        raise ValueError(f"malformed asset pair: {pair}")
    g = m.groups()
    return [_descriptor(*g[0:3]), _descriptor(*g[3:6])]
