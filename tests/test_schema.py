"""
Unit tests for schedule models.
"""
import pytest
from pydantic import ValidationError

from vesting.schema import Account, FieldRecord, Pool, Schedule

BIG = 123456789012345678901


def test_field_record_presence():
    """Test presence checks look at absence, not at falsy values."""
    record = FieldRecord(name="", amount=0, percent_of_total=0)
    assert record.present("name", "amount", "percent_of_total")
    assert not record.present("pool")
    assert FieldRecord().is_blank()


def test_account_from_record_drops_other_fields():
    """Test only account fields are kept from a row."""
    record = FieldRecord(name="Alice", amount=BIG, percent_of_total=12, pool="Team", address="secret1xyz")
    account = Account.from_record(record)
    assert account.name == "Alice"
    assert account.amount == BIG
    assert account.address == "secret1xyz"
    assert not hasattr(account, "percent_of_total")
    assert not hasattr(account, "pool")


def test_amount_rejects_negative():
    """Test amounts can't be negative."""
    with pytest.raises(ValidationError):
        Account(name="Alice", amount=-1)


def test_pool_defaults_and_total():
    """Test pool defaults."""
    pool = Pool(name="Team", total=600)
    assert pool.partial is False
    assert pool.accounts == []
    pool.accounts.append(Account(name="A", amount=BIG))
    pool.accounts.append(Account(name="B", amount=1))
    assert pool.accounts_total() == BIG + 1


def test_schedule_pool_lookup():
    """Test finding a pool by name."""
    schedule = Schedule(total=1000, pools=[Pool(name="Team", total=600), Pool(name="Advisors", total=400)])
    assert schedule.pool("Advisors").total == 400
    assert schedule.pool("Missing") is None


def test_amounts_dump_as_strings_in_json_mode():
    """Test amounts stay ints in Python and become strings in JSON mode."""
    schedule = Schedule(total=BIG, pools=[])
    assert schedule.model_dump() == {"total": BIG, "pools": []}
    assert schedule.model_dump(mode="json") == {"total": str(BIG), "pools": []}
