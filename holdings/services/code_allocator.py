"""Identifiers, human-readable codes and creation-time ordering keys.

Codes come from the ``code_counter`` singleton row. The increment is a
single ``UPDATE ... SET current_value = current_value + 1`` issued inside
the caller's transaction, so the code and the row that carries it commit
(or roll back) together and two concurrent transactions can never read the
same counter value.
"""

import logging
import threading
import time
import uuid

from sqlalchemy.orm import Session

from ..models.system import CodeCounter, CODE_COUNTER_ID, CODE_COUNTER_START

# Minimum number of digits in a code; larger values simply grow wider.
CODE_WIDTH = 4

logger = logging.getLogger(__name__)

_sort_lock = threading.Lock()
_last_sort_key = 0


def init_code_counter(db: Session) -> None:
    """Create the counter row if it does not exist yet."""
    exists = db.query(CodeCounter.id).filter(CodeCounter.id == CODE_COUNTER_ID).first()
    if exists is None:
        db.add(CodeCounter(id=CODE_COUNTER_ID, current_value=CODE_COUNTER_START))
        db.commit()
        logger.info("Initialized code counter", extra={"start": CODE_COUNTER_START})


def allocate_code(db: Session) -> str:
    """Increment the counter and return the new value as a zero-padded code.

    Does not commit; the caller's commit persists the increment together
    with the record using the code.
    """
    updated = (
        db.query(CodeCounter)
        .filter(CodeCounter.id == CODE_COUNTER_ID)
        .update(
            {CodeCounter.current_value: CodeCounter.current_value + 1},
            synchronize_session=False,
        )
    )
    if not updated:
        db.add(CodeCounter(id=CODE_COUNTER_ID, current_value=CODE_COUNTER_START + 1))
        db.flush()
        value = CODE_COUNTER_START + 1
    else:
        value = (
            db.query(CodeCounter.current_value)
            .filter(CodeCounter.id == CODE_COUNTER_ID)
            .scalar()
        )
    return format_code(value)


def format_code(value: int) -> str:
    return str(value).zfill(CODE_WIDTH)


def new_record_id(prefix: str) -> str:
    """Collision-free record id, e.g. ``co-3f9a1c2b7d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def next_sort_key() -> int:
    """Millisecond clock reading, forced strictly increasing within this process."""
    global _last_sort_key
    with _sort_lock:
        now = time.time_ns() // 1_000_000
        _last_sort_key = max(now, _last_sort_key + 1)
        return _last_sort_key
