"""Identifier Normalization — parses owner@mint[kind_token] into owner and token.

Invariants:
    - Pure: no IO, no state, safe for concurrent use
    - Input longer than MAX_IDENTIFIER_LENGTH is rejected before any matching
    - Only the outer [...] and the single `_` inside it are structural;
      the mint host may itself contain `@` and `.`
    - Owner, kind and token are all non-empty; kind is alphabetic

Design Decisions:
    - Anchored regex with disjoint character classes: matching is linear,
      no backtracking blowup on attacker-controlled input
    - Mint host lowercased so the same mint always yields the same owner address
"""

import re

from settle.core.domain_types import Identifier
from settle.core.errors import IdentifierInvalidError


MAX_IDENTIFIER_LENGTH: int = 512

IDENTIFIER_PATTERN = re.compile(
    r"^([^@\[\]\s]+)@([^\[\]\s]+)\[([A-Za-z]+)_([^\[\]_\s]+)\]$",
)


def parse_identifier(raw: str) -> Identifier:
    """Parse a global identifier. Raises IdentifierInvalidError."""
    if not isinstance(raw, str) or len(raw) > MAX_IDENTIFIER_LENGTH:
        raise IdentifierInvalidError(str(raw)[:MAX_IDENTIFIER_LENGTH])

    m = IDENTIFIER_PATTERN.fullmatch(raw)
    if m is None:
        raise IdentifierInvalidError(raw)

    local, host, kind, suffix = m.groups()
    return Identifier(
        owner=f"{local}@{host.lower()}",
        token=f"{kind}_{suffix}",
        kind=kind,
    )


def normalized_owner_and_token(raw: str) -> tuple[str, str]:
    """Return (owner, token) for an identifier. Raises IdentifierInvalidError."""
    identifier = parse_identifier(raw)
    return identifier.owner, identifier.token
