"""Capacity-bound counters updated with a single conditional UPDATE."""

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session


def bounded_increment(
    db: Session,
    model: Any,
    row_id: UUID,
    counter: str,
    limit: str,
    *conditions: Any,
) -> bool:
    """
    Increment `model.<counter>` by one if it is still below `model.<limit>`.

    Issues UPDATE ... SET counter = counter + 1 WHERE id = :id AND
    counter < limit AND <conditions>, so the check and the write are one
    statement and concurrent callers cannot push the counter past the limit.
    Does not commit.

    Returns:
        True if the row was updated, False if the guard rejected it
    """
    counter_col = getattr(model, counter)
    limit_col = getattr(model, limit)
    stmt = (
        update(model)
        .where(model.id == row_id, counter_col < limit_col, *conditions)
        .values({counter: counter_col + 1})
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    return result.rowcount == 1
