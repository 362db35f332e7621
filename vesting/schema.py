"""
Pydantic schemas for field records and the vesting schedule tree.
Amounts are exact integers and serialize to JSON as decimal strings.
"""
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field, PlainSerializer


def check_non_negative(v: int) -> int:
    """Token amounts are counted in base units and can't go below zero."""
    if v < 0:
        raise ValueError(f"amount must not be negative, got {v}")
    return v


# Python ints are arbitrary precision; JSON numbers are not, so dump as text.
Amount = Annotated[
    int,
    AfterValidator(check_non_negative),
    PlainSerializer(str, return_type=str, when_used="json"),
]

# Field vocabulary produced by the column mapping
FIELD_NAMES = (
    "total",
    "subtotal",
    "percent_of_total",
    "pool",
    "name",
    "amount",
    "address",
    "start_at",
    "interval",
    "duration",
    "cliff",
    "portion_size",
    "remainder",
)

AMOUNT_FIELDS = ("total", "subtotal", "amount", "cliff", "portion_size", "remainder")
INTEGER_FIELDS = ("start_at", "interval", "duration")
TEXT_FIELDS = ("pool", "name", "address")

# Fields an account keeps from its row, in output order
ACCOUNT_FIELDS = (
    "name",
    "amount",
    "address",
    "start_at",
    "interval",
    "duration",
    "cliff",
    "portion_size",
    "remainder",
)


class FieldRecord(BaseModel):
    """
    Named fields of one table row.
    None means the cell was empty, which is not the same as zero.
    """
    total: Optional[Amount] = None
    subtotal: Optional[Amount] = None
    percent_of_total: Optional[Decimal] = None
    pool: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[Amount] = None
    address: Optional[str] = None
    start_at: Optional[int] = None
    interval: Optional[int] = None
    duration: Optional[int] = None
    cliff: Optional[Amount] = None
    portion_size: Optional[Amount] = None
    remainder: Optional[Amount] = None

    def present(self, *fields: str) -> bool:
        """True if every named field has a value."""
        return all(getattr(self, field) is not None for field in fields)

    def is_blank(self) -> bool:
        """True if no field has a value."""
        return not any(getattr(self, field) is not None for field in FIELD_NAMES)


class Account(BaseModel):
    """A recipient within a pool and its vesting parameters."""
    name: str
    amount: Amount
    address: Optional[str] = None
    start_at: Optional[int] = None
    interval: Optional[int] = None
    duration: Optional[int] = None
    cliff: Optional[Amount] = None
    portion_size: Optional[Amount] = None
    remainder: Optional[Amount] = None

    @classmethod
    def from_record(cls, record: FieldRecord) -> "Account":
        """Keep only the account fields of a row."""
        return cls(**{field: getattr(record, field) for field in ACCOUNT_FIELDS})


class Pool(BaseModel):
    """A named share of the grand total, split across accounts."""
    name: str
    total: Amount
    partial: bool = False
    accounts: List[Account] = Field(default_factory=list)

    def accounts_total(self) -> int:
        return sum(account.amount for account in self.accounts)


class Schedule(BaseModel):
    """Grand total plus its pools, in table order."""
    total: Amount
    pools: List[Pool] = Field(default_factory=list)

    def pool(self, name: str) -> Optional[Pool]:
        """Find a pool by name."""
        for pool in self.pools:
            if pool.name == name:
                return pool
        return None
