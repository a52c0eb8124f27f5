"""Infrastructure Layer — database, logging, key derivation and delivery adapters.

Invariants:
    - Infrastructure never imports from services/ or api/
"""
