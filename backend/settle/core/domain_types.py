"""Domain Types — rich types that replace bare primitives at the trust boundary.

Invariants:
    - MAX_ASSET_AMOUNT (2^128) is the exclusive upper bound for every price side and amount
    - Identifier, Price, AssetDescriptor are frozen: ephemeral values, never mutated
    - UserStatus has exactly two states; Unverified -> Verified is the only transition

Design Decisions:
    - Frozen dataclasses for parsed values: hashable, safe to share across tasks
    - str Enums: serialize to JSON and to the `status` column without custom encoders
"""

from dataclasses import dataclass
from enum import Enum


# ─── Bounds ──────────────────────────────────────────────────────

MAX_ASSET_AMOUNT: int = 2 ** 128
MAX_HOP: int = 127


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Identifier:
    """Parsed global name owner@mint[kind_token].

    `owner` is the full owner address (owner@mint, host lowercased) and
    `token` keeps its kind prefix, so `token.startswith(kind + "_")` holds.
    """
    owner: str
    token: str
    kind: str


@dataclass(frozen=True)
class Price:
    """Exchange ratio base/quote, never reduced."""
    base: int
    quote: int


@dataclass(frozen=True)
class AssetDescriptor:
    """One side of an asset pair: owner@mint[CODE.scale]."""
    owner: str
    code: str
    scale: int

    @property
    def name(self) -> str:
        return f"{self.owner}[{self.code}.{self.scale}]"


# ─── Enums ───────────────────────────────────────────────────────

class UserStatus(str, Enum):
    """User lifecycle states, mapped to the DB `status` column."""
    UNVERIFIED = "unverified"
    VERIFIED = "verified"


class Environment(str, Enum):
    """Deployment environment, embedded in credential links."""
    QA = "qa"
    PRODUCTION = "production"
