# db/transaction.py

from contextlib import contextmanager
from flask import current_app
from db.extensions import db


@contextmanager
def transaction(session=None):
    """
    Scoped unit of work.

    Yields the session to pass through the operation, commits when the
    block exits normally and rolls back (then re-raises) on any exception,
    so nothing written inside the block survives a failure.
    """
    if session is None:
        session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        current_app.logger.warning("Transaction rolled back")
        raise
