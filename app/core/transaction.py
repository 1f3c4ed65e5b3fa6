import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import TransactionTimeoutError

logger = logging.getLogger(__name__)


class TransactionScope:
    """Deadline bookkeeping for one write transaction."""

    def __init__(self, db: Session, max_wait: float, timeout: float):
        self.db = db
        self.max_wait = max_wait
        self.timeout = timeout
        self.started_at = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def check_deadline(self) -> None:
        if self.elapsed > self.timeout:
            raise TransactionTimeoutError(
                f"Transaction exceeded {self.timeout:g}s execution budget"
            )


def _apply_database_timeouts(db: Session, max_wait: float, timeout: float) -> None:
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(
        text("SELECT set_config('lock_timeout', :value, true)"),
        {"value": f"{int(max_wait * 1000)}ms"},
    )
    db.execute(
        text("SELECT set_config('statement_timeout', :value, true)"),
        {"value": f"{int(timeout * 1000)}ms"},
    )


@contextmanager
def transaction_scope(
    db: Session,
    max_wait: Optional[float] = None,
    timeout: Optional[float] = None,
) -> Iterator[TransactionScope]:
    """Run a block as one transaction: commit on success, roll back on any error.

    ``max_wait`` bounds how long we may wait for the connection and for row
    locks; ``timeout`` bounds the total execution time. Exceeding either
    raises ``TransactionTimeoutError`` and nothing is committed.
    """
    max_wait = settings.TRANSACTION_MAX_WAIT_SECONDS if max_wait is None else max_wait
    timeout = settings.TRANSACTION_TIMEOUT_SECONDS if timeout is None else timeout

    scope = TransactionScope(db, max_wait=max_wait, timeout=timeout)
    try:
        db.connection()
        if scope.elapsed > max_wait:
            raise TransactionTimeoutError(
                f"Timed out after {max_wait:g}s waiting for the transaction to start"
            )
        _apply_database_timeouts(db, max_wait, timeout)

        yield scope

        scope.check_deadline()
        db.commit()
    except Exception:
        db.rollback()
        logger.debug("Transaction rolled back after %.3fs", scope.elapsed)
        raise
