"""Structural Validation — hops, secrets, offer paths, asset pairs and ids.

Invariants:
    - Pure and stateless; every function either returns the parsed value or raises
      the matching InputValidationError subclass carrying the raw input
    - validate_path stops at the first bad element and preserves order and duplicates
    - validate_secret checks shape only (exactly 16 characters, any content)
    - validate_hop accepts exactly [0, 127]: signed 8-bit parse, then non-negative

Design Decisions:
    - Path and id validators reuse parse_identifier instead of their own grammar
    - Asset pair splitting delegated to an injected AssetResolver (default:
      resolve_asset_pair); any resolver failure becomes pair_invalid
"""

import re
from collections.abc import Sequence

from settle.core.domain_types import AssetDescriptor, MAX_HOP
from settle.core.errors import (
    AssetPairInvalidError,
    HopInvalidError,
    IdInvalidError,
    IdentifierInvalidError,
    PathInvalidError,
    SecretInvalidError,
)
from settle.core.normalize_identifier import parse_identifier
from settle.core.repository_protocols import AssetResolver
from settle.core.resolve_asset_pair import resolve_asset_pair


SECRET_LENGTH: int = 16
_INT8_MIN: int = -128

_SIGNED_DECIMAL = re.compile(r"^([+-]?)([0-9]+)$")


def validate_hop(raw: str) -> int:
    """Validate a transaction hop. Raises HopInvalidError."""
    m = _SIGNED_DECIMAL.fullmatch(raw) if isinstance(raw, str) else None
    if m is None:
        raise HopInvalidError(str(raw))
    sign, digits = m.groups()
    digits = digits.lstrip("0") or "0"
    # int8 magnitudes never exceed three digits
    if len(digits) > 3 or not _INT8_MIN <= int(sign + digits, 10) <= MAX_HOP:
        raise HopInvalidError(raw, ValueError(f"{raw} out of int8 range"))
    hop = int(sign + digits, 10)
    if hop < 0:
        raise HopInvalidError(raw)
    return hop


def validate_secret(raw: str) -> str:
    """Validate a secret's shape. Raises SecretInvalidError."""
    if not isinstance(raw, str) or len(raw) != SECRET_LENGTH:
        raise SecretInvalidError(str(raw))
    return raw


def validate_path(path: Sequence[str]) -> list[str]:
    """Validate a path of offer ids. Raises PathInvalidError naming the bad element."""
    for offer in path:
        try:
            parse_identifier(offer)
        except IdentifierInvalidError as e:
            raise PathInvalidError(str(offer), e) from e
    return list(path)


def validate_id(raw: str) -> tuple[str, str, str]:
    """Validate an object id. Returns (id, owner, token). Raises IdInvalidError."""
    try:
        identifier = parse_identifier(raw)
    except IdentifierInvalidError as e:
        raise IdInvalidError(str(raw), e) from e
    return raw, identifier.owner, identifier.token


def validate_asset_pair(
    pair: str, resolver: AssetResolver = resolve_asset_pair,
) -> list[AssetDescriptor]:
    """Validate an asset pair. Raises AssetPairInvalidError."""
    try:
        return resolver(pair)
    except Exception as e:
        raise AssetPairInvalidError(str(pair), e) from e
