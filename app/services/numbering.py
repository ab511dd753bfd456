import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.sales import BillSequence
from app.services.errors import BillNumberGenerationFailed

logger = logging.getLogger(__name__)


def format_bill_number(prefix: str, number: int, pad: int | None = None) -> str:
    return f"{prefix}-{number:0{pad or settings.bill_number_padding}d}"


def _increment(db: Session, prefix: str) -> int | None:
    result = db.execute(
        update(BillSequence)
        .where(BillSequence.prefix == prefix)
        .values(next_number=BillSequence.next_number + 1)
        .execution_options(synchronize_session=False)
    )
    if not result.rowcount:
        return None
    current = db.scalar(select(BillSequence.next_number).where(BillSequence.prefix == prefix))
    return int(current) - 1


def next_bill_number(db: Session, prefix: str | None = None) -> str:
    """Allocate the next sequential bill number inside the caller's transaction.

    The sequence row is bumped with an atomic UPDATE, so two concurrent
    checkouts never receive the same number. The first call for a prefix
    creates the row; losing that insert race falls back to the UPDATE.
    """
    prefix = prefix or settings.bill_number_prefix
    try:
        number = _increment(db, prefix)
        if number is None:
            try:
                with db.begin_nested():
                    db.add(BillSequence(prefix=prefix, next_number=2))
                number = 1
            except IntegrityError:
                number = _increment(db, prefix)
                if number is None:
                    raise BillNumberGenerationFailed("Failed to generate bill number")
    except SQLAlchemyError as exc:
        logger.error("Bill number generation failed for prefix %s: %s", prefix, exc)
        raise BillNumberGenerationFailed("Failed to generate bill number") from exc
    return format_bill_number(prefix, number)
