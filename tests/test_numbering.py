import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.models import BillSequence
from app.services import numbering
from app.services.errors import BillNumberGenerationFailed
from app.services.numbering import format_bill_number, next_bill_number


def test_format_pads_number():
    assert format_bill_number("LSM", 42) == "LSM-000042"
    assert format_bill_number("LSM", 1234567) == "LSM-1234567"
    assert format_bill_number("INV", 7, pad=3) == "INV-007"


def test_first_number_creates_sequence(db_session):
    assert next_bill_number(db_session) == "LSM-000001"
    db_session.commit()
    assert db_session.scalar(select(BillSequence.next_number).where(BillSequence.prefix == "LSM")) == 2


def test_numbers_increase_per_prefix(db_session):
    issued = [next_bill_number(db_session) for _ in range(3)]
    other = next_bill_number(db_session, prefix="RET")
    db_session.commit()

    assert issued == ["LSM-000001", "LSM-000002", "LSM-000003"]
    assert other == "RET-000001"


def test_rolled_back_number_is_reissued(db_session):
    next_bill_number(db_session)
    db_session.commit()
    assert next_bill_number(db_session) == "LSM-000002"
    db_session.rollback()
    assert next_bill_number(db_session) == "LSM-000002"


def test_store_error_becomes_generation_failure(db_session, monkeypatch):
    def locked(*args, **kwargs):
        raise OperationalError("UPDATE bill_sequences", {}, Exception("database is locked"))

    monkeypatch.setattr(numbering, "_increment", locked)
    with pytest.raises(BillNumberGenerationFailed):
        next_bill_number(db_session)
