import re
from datetime import date, datetime
from typing import Optional

from sqlmodel import select

from expense_tracker.models.account_settings import AccountSettings
from expense_tracker.models.transaction import Transaction
from expense_tracker.models.voucher_counter import VoucherCounter
from expense_tracker.store import RecordStore

# [prefix-]YYYYMMDD-NNNN
VOUCHER_PATTERN = re.compile(r"(\d{8})-(\d+)$")


def format_voucher_id(day: date, counter: int, prefix: str = "") -> str:
    voucher = f"{day.strftime('%Y%m%d')}-{counter:04d}"
    return f"{prefix}-{voucher}" if prefix else voucher


def parse_voucher_id(voucher_id: str) -> Optional[tuple[str, int]]:
    """Day (YYYYMMDD) and counter of a voucher id, or None for foreign formats."""
    match = VOUCHER_PATTERN.search(voucher_id or "")
    if not match:
        return None
    return match.group(1), int(match.group(2))


def _counter_row(store: RecordStore, day: str) -> VoucherCounter:
    counter = store.session.exec(
        select(VoucherCounter).where(
            VoucherCounter.account_id == store.account_id,
            VoucherCounter.day == day,
        )
    ).first()
    if counter is None:
        counter = VoucherCounter(account_id=store.account_id, day=day, counter=0)
    return counter


def _voucher_taken(store: RecordStore, voucher_id: str) -> bool:
    return store.session.exec(
        select(Transaction.id).where(
            Transaction.account_id == store.account_id,
            Transaction.voucher_id == voucher_id,
        )
    ).first() is not None


def reserve_voucher_id(store: RecordStore, voucher_id: str) -> None:
    """Move the day's counter past a voucher id written from elsewhere (e.g. a backup)."""
    parsed = parse_voucher_id(voucher_id)
    if parsed is None:
        return
    day, number = parsed
    counter = _counter_row(store, day)
    if number > counter.counter:
        counter.counter = number
        store.session.add(counter)
        store.session.flush()


def next_voucher_id(store: RecordStore, today: Optional[date] = None) -> str:
    """
    Allocate the next voucher number of the day for the store's account:
    YYYYMMDD-0001, YYYYMMDD-0002, ... optionally prefixed from the account settings.
    Numbers already used by a transaction of the account are skipped.
    """
    today = today or datetime.utcnow().date()
    counter = _counter_row(store, today.strftime("%Y%m%d"))

    settings = store.session.get(AccountSettings, store.account_id)
    prefix = settings.voucher_prefix if settings else ""

    counter.counter += 1
    voucher_id = format_voucher_id(today, counter.counter, prefix)
    while _voucher_taken(store, voucher_id):
        counter.counter += 1
        voucher_id = format_voucher_id(today, counter.counter, prefix)

    store.session.add(counter)
    store.session.flush()
    return voucher_id
