"""Token Generation — object tokens and random passphrases from the OS CSPRNG.

Invariants:
    - Every value comes from `secrets` (os.urandom), never from `random`
    - new_token(kind) has the form <kind>_<hex>: exactly one `_`, so it embeds
      directly into owner@mint[kind_token] identifiers
"""

import secrets


TOKEN_BYTES: int = 16
PASSPHRASE_BYTES: int = 32


def new_token(kind: str) -> str:
    return f"{kind}_{secrets.token_hex(TOKEN_BYTES)}"


def rand_str() -> str:
    """Fresh random passphrase for one key derivation."""
    return secrets.token_hex(PASSPHRASE_BYTES)
