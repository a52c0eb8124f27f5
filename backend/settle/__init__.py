"""settle — trust-boundary validation and credential issuance for mint federations.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
