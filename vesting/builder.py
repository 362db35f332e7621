"""
Schedule builder.

Walks field records in table order and assembles a Schedule, checking as it goes:

- schedule_total: the grand total row declares ``total == subtotal``
- pool_total: a pool's accounts add up to the pool's subtotal (checked when the next
  pool header arrives)
- total_bound: pool subtotals seen so far never add up to more than the grand total

The first violation aborts the build.
"""
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union

from vesting.exceptions import InvariantError, StructuralError
from vesting.logger import setup_logger
from vesting.schema import Account, FieldRecord, Pool, Schedule

logger = setup_logger(__name__)

GRAND_TOTAL = "grand_total"
POOL_HEADER = "pool_header"
ACCOUNT_ENTRY = "account_entry"
UNRECOGNIZED = "unrecognized"


class Empty(NamedTuple):
    """No pool opened yet."""


class InPool(NamedTuple):
    """Accounts are being added to ``schedule.pools[pool_index]``."""
    pool_index: int
    running_total: int


State = Union[Empty, InPool]


def classify_row(row: int, record: FieldRecord, header_row: int) -> str:
    """
    Decide what a row is from the fields it carries.

    The grand total row is recognized by position. Everything else is
    recognized by which fields are present, never by their values.
    """
    if row == header_row:
        return GRAND_TOTAL
    if record.present("pool", "subtotal", "percent_of_total"):
        return POOL_HEADER
    if record.present("name", "amount", "percent_of_total"):
        return ACCOUNT_ENTRY
    return UNRECOGNIZED


class ScheduleBuilder:
    """
    Incremental builder: feed rows in order, then call finish().

    Only the builder holds the schedule while it is being built; finish()
    hands it out once all rows passed.
    """

    def __init__(self, header_row: int = 5, check_final_pool: bool = False):
        self.header_row = header_row
        self.check_final_pool = check_final_pool
        self.state: State = Empty()
        self.skipped: List[int] = []
        self._schedule: Optional[Schedule] = None
        self._pools_total = 0
        self._rows_seen = 0
        self._last_row: Optional[int] = None

    def feed(self, row: int, record: FieldRecord) -> str:
        """
        Process one row.

        Args:
            row: Spreadsheet row number
            record: Fields of that row

        Returns:
            The row kind it was classified as

        Raises:
            StructuralError: If the row can't appear where it does
            InvariantError: If totals stop adding up
        """
        self._rows_seen += 1
        self._last_row = row
        kind = classify_row(row, record, self.header_row)

        if kind == GRAND_TOTAL:
            self._grand_total(row, record)
        elif kind == POOL_HEADER:
            self._pool_header(row, record)
        elif kind == ACCOUNT_ENTRY:
            self._account_entry(row, record)
        elif not record.is_blank():
            logger.debug(f"row {row}: not a pool or account, skipping: {record.model_dump(exclude_none=True)}")
            self.skipped.append(row)

        return kind

    def _grand_total(self, row: int, record: FieldRecord) -> None:
        if not record.present("total", "subtotal"):
            raise StructuralError(
                f"row {row} (schedule total): expected both total and subtotal",
                row=row,
                details={"row": row, "total": record.total, "subtotal": record.subtotal}
            )
        if record.total != record.subtotal:
            raise InvariantError(
                f"row {row} (schedule total): total must equal subtotal "
                f"(total {record.total}, subtotal {record.subtotal})",
                row=row,
                invariant="schedule_total",
                details={"row": row, "total": record.total, "subtotal": record.subtotal}
            )
        self._schedule = Schedule(total=record.total, pools=[])
        logger.debug(f"row {row}: schedule total {record.total}")

    def _require_schedule(self, row: int, kind: str) -> Schedule:
        if self._schedule is None:
            raise StructuralError(
                f"row {row} ({kind}): appears before the schedule total row {self.header_row}",
                row=row,
                details={"row": row, "header_row": self.header_row}
            )
        return self._schedule

    def _pool_header(self, row: int, record: FieldRecord) -> None:
        schedule = self._require_schedule(row, "pool")

        pools_total = self._pools_total + record.subtotal
        if pools_total > schedule.total:
            raise InvariantError(
                f"row {row} (pool): subtotals must not add up to more than total "
                f"({pools_total} > {schedule.total})",
                row=row,
                invariant="total_bound",
                details={"row": row, "pools_total": pools_total, "total": schedule.total}
            )
        self._pools_total = pools_total

        self._close_pool(row)

        schedule.pools.append(Pool(name=record.pool, total=record.subtotal, partial=False, accounts=[]))
        self.state = InPool(pool_index=len(schedule.pools) - 1, running_total=0)
        logger.debug(f"row {row}: pool '{record.pool}' {record.subtotal}")

    def _close_pool(self, row: int) -> None:
        """Check the open pool's accounts against its subtotal."""
        if not isinstance(self.state, InPool):
            return
        pool = self._schedule.pools[self.state.pool_index]
        if self.state.running_total != pool.total:
            raise InvariantError(
                f"row {row} (pool): previous pool's subtotal was "
                f"{self.state.running_total} (expected {pool.total})",
                row=row,
                invariant="pool_total",
                details={
                    "row": row,
                    "pool": pool.name,
                    "accounts_total": self.state.running_total,
                    "expected": pool.total,
                }
            )

    def _account_entry(self, row: int, record: FieldRecord) -> None:
        schedule = self._require_schedule(row, "account")
        if not isinstance(self.state, InPool):
            raise StructuralError(
                f"row {row} (account): account '{record.name}' appears before any pool",
                row=row,
                details={"row": row, "name": record.name}
            )
        pool = schedule.pools[self.state.pool_index]
        pool.accounts.append(Account.from_record(record))
        self.state = self.state._replace(running_total=self.state.running_total + record.amount)

    def finish(self) -> Schedule:
        """
        Return the finished schedule.

        The last pool is only checked against its accounts when
        ``check_final_pool`` is set; otherwise a pool is only checked when
        another pool header follows it.

        Raises:
            StructuralError: If no schedule total row was seen
            InvariantError: If the final pool check is enabled and fails
        """
        if self._schedule is None:
            raise StructuralError(
                f"schedule total row {self.header_row} not found",
                row=self.header_row,
                details={"header_row": self.header_row, "rows_seen": self._rows_seen}
            )
        if self.check_final_pool and isinstance(self.state, InPool):
            self._close_pool(self._last_row + 1)

        schedule = self._schedule
        logger.info(
            f"Built schedule: total {schedule.total}, {len(schedule.pools)} pools, "
            f"{sum(len(pool.accounts) for pool in schedule.pools)} accounts, "
            f"{len(self.skipped)} rows skipped"
        )
        return schedule


def build_schedule(
    records: Iterable[Tuple[int, FieldRecord]],
    header_row: int = 5,
    check_final_pool: bool = False
) -> Schedule:
    """
    Build a schedule from (row_number, record) pairs in table order.

    Args:
        records: Rows of the data region, starting at the schedule total row
        header_row: Row number of the schedule total row
        check_final_pool: Also check the last pool against its accounts

    Returns:
        Validated Schedule

    Raises:
        StructuralError: If a row is out of place
        InvariantError: If totals don't add up
    """
    builder = ScheduleBuilder(header_row=header_row, check_final_pool=check_final_pool)
    for row, record in records:
        builder.feed(row, record)
    return builder.finish()
