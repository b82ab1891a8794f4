from contextlib import contextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from skillswap.errors import Conflict, StoreFailure


def fetch_one(session, query, params=None):
    """Run a read query and return the first row as a dict, or None."""
    try:
        row = session.execute(text(query), params or {}).mappings().fetchone()
    except SQLAlchemyError as e:
        print(f"[ERROR] Read query failed: {e}")
        raise StoreFailure('Database error') from e
    return dict(row) if row else None


def fetch_all(session, query, params=None):
    try:
        rows = session.execute(text(query), params or {}).mappings().fetchall()
    except SQLAlchemyError as e:
        print(f"[ERROR] Read query failed: {e}")
        raise StoreFailure('Database error') from e
    return [dict(row) for row in rows]


@contextmanager
def transaction(session, failure_message, conflict_message=None):
    """
    Commit everything executed inside the block once, or nothing at all.

    Integrity violations become Conflict when ``conflict_message`` is given;
    every other database error becomes StoreFailure.
    """
    try:
        yield
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if conflict_message:
            print(f"[DEBUG] Integrity violation: {e.orig}")
            raise Conflict(conflict_message) from e
        print(f"[ERROR] {failure_message}: {e}")
        raise StoreFailure(failure_message) from e
    except SQLAlchemyError as e:
        session.rollback()
        print(f"[ERROR] {failure_message}: {e}")
        raise StoreFailure(failure_message) from e
    except Exception:
        session.rollback()
        raise
