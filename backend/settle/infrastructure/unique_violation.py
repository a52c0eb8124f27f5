"""Unique Violation Classifiers — one adapter per database backend.

Invariants:
    - classify() never raises; unknown error shapes classify as not-unique
    - The classified cause is the driver-level error (IntegrityError.orig) when present
    - PostgreSQL: SQLSTATE 23505 (unique_violation), read from `sqlstate` or `pgcode`
      (asyncpg adapter, psycopg and psycopg2 all expose one of them)
    - SQLite: extended code 2067 (SQLITE_CONSTRAINT_UNIQUE), falling back to the
      "UNIQUE constraint failed" message on interpreters without sqlite_errorcode

Design Decisions:
    - Selected by engine dialect name at startup, so the store depends only on
      the UniqueViolationClassifier protocol
"""

import logging

from sqlalchemy.exc import DBAPIError

from settle.core.repository_protocols import Classification, UniqueViolationClassifier

logger = logging.getLogger(__name__)

PG_UNIQUE_VIOLATION = "23505"
SQLITE_CONSTRAINT_UNIQUE = 2067


def _driver_error(error: BaseException) -> BaseException:
    if isinstance(error, DBAPIError) and error.orig is not None:
        return error.orig
    return error


class PostgresUniqueViolation:
    def classify(self, error: BaseException) -> Classification:
        cause = _driver_error(error)
        for candidate in (cause, cause.__cause__):
            code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
            if code == PG_UNIQUE_VIOLATION:
                return Classification(True, cause)
        return Classification(False, cause)


class SqliteUniqueViolation:
    def classify(self, error: BaseException) -> Classification:
        cause = _driver_error(error)
        for candidate in (cause, cause.__cause__):
            code = getattr(candidate, "sqlite_errorcode", None)
            if code is not None:
                return Classification(code == SQLITE_CONSTRAINT_UNIQUE, cause)
        return Classification("UNIQUE constraint failed" in str(cause), cause)


class NeverUniqueViolation:
    """Fallback for backends without an adapter: everything stays internal."""
    def classify(self, error: BaseException) -> Classification:
        return Classification(False, _driver_error(error))


_CLASSIFIERS: dict[str, type] = {
    "postgresql": PostgresUniqueViolation,
    "sqlite": SqliteUniqueViolation,
}


def classifier_for_dialect(dialect_name: str) -> UniqueViolationClassifier:
    cls = _CLASSIFIERS.get(dialect_name)
    if cls is None:
        logger.warning(
            "No unique-violation adapter for backend; conflicts will surface as internal errors",
            extra={"dialect": dialect_name},
        )
        return NeverUniqueViolation()
    return cls()
