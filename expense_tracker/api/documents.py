import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response

from expense_tracker.api.dependencies import get_store
from expense_tracker.domain import balances
from expense_tracker.models.category import Category
from expense_tracker.models.financial_user import FinancialUser
from expense_tracker.models.transaction import Transaction
from expense_tracker.reports import pdf
from expense_tracker.store import RecordStore
from expense_tracker.utils.settings_helpers import get_account_settings

router = APIRouter(prefix="/documents", tags=["documents"])


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/vouchers/{transaction_id}")
def download_voucher(transaction_id: int, store: RecordStore = Depends(get_store)):
    transaction = store.get(Transaction, transaction_id)
    settings = get_account_settings(store)
    content = pdf.render_voucher(
        transaction,
        store.find(FinancialUser, transaction.financial_user_id),
        store.find(Category, transaction.category_id, include_global=True),
        currency=settings.currency.value,
        software_name=settings.software_name,
    )
    return _pdf_response(content, f"voucher-{transaction.voucher_id}.pdf")


@router.get("/statements/{year}/{month}")
def download_monthly_statement(
    year: int = Path(..., ge=1900, le=9999),
    month: int = Path(..., ge=1, le=12),
    store: RecordStore = Depends(get_store),
):
    predicate = balances.in_month(year, month)
    transactions = [tx for tx in store.list(Transaction) if predicate(tx)]
    settings = get_account_settings(store)
    content = pdf.render_monthly_statement(
        year,
        month,
        balances.period_summary(transactions),
        transactions,
        {c.id: c.name for c in store.list(Category, include_global=True)},
        {fu.id: fu.name for fu in store.list(FinancialUser)},
        currency=settings.currency.value,
        software_name=settings.software_name,
    )
    return _pdf_response(content, f"statement-{year}-{month:02d}.pdf")


@router.get("/category-breakdown")
def download_category_breakdown(
    store: RecordStore = Depends(get_store),
    start_date: Optional[dt.date] = Query(None),
    end_date: Optional[dt.date] = Query(None),
):
    transactions = store.list(Transaction)
    if start_date or end_date:
        predicate = balances.in_range(start_date, end_date)
        transactions = [tx for tx in transactions if predicate(tx)]
    rows = balances.per_category_breakdown(transactions, store.list(Category, include_global=True))
    settings = get_account_settings(store)
    content = pdf.render_category_breakdown(rows, currency=settings.currency.value, software_name=settings.software_name)
    return _pdf_response(content, "category-breakdown.pdf")
