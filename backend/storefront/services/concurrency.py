# Overview: Transaction scoping and retry helpers shared by the review workflows.

from __future__ import annotations

import time
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


class PersistenceError(RuntimeError):
    """
    A unit of work could not be committed and was rolled back.

    retryable is True for lock contention, deadlocks and optimistic-lock
    conflicts; those are worth re-running from the top.
    """

    def __init__(self, message: str, *, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


@contextmanager
def unit_of_work():
    """
    Scope one atomic unit on the request's session.

    Commits on normal exit and rolls back on every other exit path.
    SQLAlchemy failures surface as PersistenceError; domain exceptions
    raised inside the block propagate unchanged after the rollback.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        orig = getattr(exc, "orig", None)
        raise PersistenceError(
            str(orig or exc),
            retryable=isinstance(exc, (OperationalError, StaleDataError)),
        ) from exc
    except BaseException:
        session.rollback()
        raise


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a unit of work with retry on concurrency-related failures.

    func must open its own unit_of_work so each attempt re-reads state.
    Only retryable PersistenceErrors are retried.
    """
    for attempt in range(attempts):
        try:
            return func()
        except PersistenceError as exc:
            if not exc.retryable or attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
