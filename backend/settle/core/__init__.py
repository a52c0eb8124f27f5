"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Validators are pure: return the parsed value or raise an InputValidationError

Design Decisions:
    - Functional core separated from imperative shell
"""
