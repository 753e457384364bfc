# Overview: Atomic allocation of sequential order numbers.

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import OrderSequence

ORDER_SEQUENCE = "orders"


class SequenceError(Exception):
    """Raised when a sequence cannot be allocated."""


def _bump(name: str) -> int | None:
    stmt = (
        update(OrderSequence)
        .where(OrderSequence.name == name)
        .values(next_number=OrderSequence.next_number + 1)
    )
    result = db.session.execute(stmt)
    if not result.rowcount:
        return None
    db.session.flush()
    current = (
        db.session.query(OrderSequence.next_number)
        .filter_by(name=name)
        .scalar()
    )
    return current - 1


def next_sequence_number(name: str = ORDER_SEQUENCE) -> int:
    """
    Allocate the next number of a named sequence inside the current transaction.

    The increment is a single UPDATE, so the row write lock is held until the
    caller commits; a concurrent allocator blocks (or fails with a lock error
    that run_with_retry handles) instead of reading the same value.

    Must be the first write of the caller's transaction: losing the race to
    create the sequence row rolls the session back before retrying the UPDATE.
    """
    if not name:
        raise SequenceError("sequence name is required")

    number = _bump(name)
    if number is not None:
        return number

    db.session.add(OrderSequence(name=name, next_number=2))
    try:
        db.session.flush()
        return 1
    except IntegrityError:
        db.session.rollback()
        number = _bump(name)
        if number is None:
            raise
        return number
