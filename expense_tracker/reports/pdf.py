"""PDF documents: cash vouchers, monthly statements and category breakdowns.

Rendering is done with the reportlab canvas straight into memory; callers get
the finished PDF as bytes. Figures come from `domain.balances`, never from
ad-hoc sums here.
"""

import calendar
from io import BytesIO
from typing import Iterable, List, Mapping, Optional

from reportlab.graphics.barcode import code128
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, A5, landscape
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from expense_tracker.schemas.summary import CategoryBreakdown, PeriodSummary

DARK_GREEN = colors.Color(0, 77 / 255, 64 / 255)
LIGHT_GREY = colors.Color(245 / 255, 245 / 255, 245 / 255)
BORDER_GREY = colors.Color(200 / 255, 200 / 255, 200 / 255)


def format_amount(amount: float, currency: str) -> str:
    return f"{currency} {amount:.2f}"


def _kind_label(kind) -> str:
    return str(getattr(kind, "value", kind)).replace("_", " ").upper()


def render_voucher(transaction, financial_user, category, currency: str, software_name: str) -> bytes:
    """A5 landscape cash voucher for a single transaction."""
    buffer = BytesIO()
    page_width, page_height = landscape(A5)
    pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height))
    pdf.setTitle(f"Voucher {transaction.voucher_id}")

    pdf.setFont("Helvetica-Bold", 20)
    pdf.setFillColor(DARK_GREEN)
    pdf.drawCentredString(page_width / 2, page_height - 15 * mm, "CASH VOUCHER")

    pdf.setFont("Helvetica", 11)
    pdf.setFillColor(colors.Color(50 / 255, 50 / 255, 50 / 255))
    pdf.drawRightString(page_width - 15 * mm, page_height - 12 * mm, software_name)

    barcode = code128.Code128(transaction.voucher_id, barHeight=12 * mm, barWidth=0.8)
    barcode.drawOn(pdf, 15 * mm, page_height - 32 * mm)

    pdf.setFont("Helvetica", 8)
    pdf.drawString(15 * mm, page_height - 37 * mm, f"Voucher ID: {transaction.voucher_id}")
    pdf.drawRightString(page_width - 15 * mm, page_height - 37 * mm, f"Date: {transaction.date:%Y-%m-%d}")

    rows = [
        ("Transaction Type", _kind_label(transaction.kind)),
        ("Amount", format_amount(transaction.amount, currency)),
        ("To", financial_user.name if financial_user else "Unknown"),
        ("Category", category.name if category else "Uncategorized"),
        ("Description / Details", transaction.title),
    ]
    top = page_height - 45 * mm
    row_height = 9 * mm
    label_width = 50 * mm
    left = 15 * mm
    right = page_width - 15 * mm
    for index, (label, value) in enumerate(rows):
        y = top - (index + 1) * row_height
        pdf.setFillColor(LIGHT_GREY)
        pdf.setStrokeColor(BORDER_GREY)
        pdf.rect(left, y, label_width, row_height, fill=1, stroke=1)
        pdf.rect(left + label_width, y, right - left - label_width, row_height, fill=0, stroke=1)
        pdf.setFillColor(colors.Color(40 / 255, 40 / 255, 40 / 255))
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(left + 3 * mm, y + 3 * mm, label)
        pdf.setFont("Helvetica", 10)
        pdf.drawString(left + label_width + 3 * mm, y + 3 * mm, str(value))

    signature_y = 25 * mm
    pdf.line(20 * mm, signature_y, 70 * mm, signature_y)
    pdf.drawString(20 * mm, signature_y - 6 * mm, "Approved By:")
    pdf.line(page_width - 70 * mm, signature_y, page_width - 20 * mm, signature_y)
    pdf.drawString(page_width - 70 * mm, signature_y - 6 * mm, "Signature:")

    pdf.setStrokeColor(DARK_GREEN)
    pdf.setLineWidth(1.5)
    pdf.rect(5 * mm, 5 * mm, page_width - 10 * mm, page_height - 10 * mm)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


class _ReportWriter:
    """Line-oriented A4 writer that starts a new page when the current one fills up."""

    def __init__(self, title: str, software_name: str):
        self.buffer = BytesIO()
        self.width, self.height = A4
        self.pdf = canvas.Canvas(self.buffer, pagesize=A4)
        self.pdf.setTitle(title)
        self.title = title
        self.software_name = software_name
        self._new_page()

    def _new_page(self) -> None:
        self.pdf.setFont("Helvetica-Bold", 16)
        self.pdf.setFillColor(DARK_GREEN)
        self.pdf.drawString(20 * mm, self.height - 20 * mm, self.title)
        self.pdf.setFont("Helvetica", 9)
        self.pdf.setFillColor(colors.black)
        self.pdf.drawRightString(self.width - 20 * mm, self.height - 20 * mm, self.software_name)
        self.y = self.height - 32 * mm

    def line(self, columns: List[str], positions: List[float], bold: bool = False) -> None:
        if self.y < 20 * mm:
            self.pdf.showPage()
            self._new_page()
        self.pdf.setFont("Helvetica-Bold" if bold else "Helvetica", 9)
        for text, x in zip(columns, positions):
            self.pdf.drawString(x * mm, self.y, text[:48])
        self.y -= 6 * mm

    def gap(self) -> None:
        self.y -= 4 * mm

    def finish(self) -> bytes:
        self.pdf.showPage()
        self.pdf.save()
        return self.buffer.getvalue()


def render_monthly_statement(
    year: int,
    month: int,
    summary: PeriodSummary,
    transactions: Iterable,
    category_names: Mapping[Optional[int], str],
    financial_user_names: Mapping[Optional[int], str],
    currency: str,
    software_name: str,
) -> bytes:
    writer = _ReportWriter(f"Monthly Statement - {calendar.month_name[month]} {year}", software_name)

    writer.line(["Total income", format_amount(summary.income, currency)], [20, 80], bold=True)
    writer.line(["Total expenses", format_amount(summary.expense, currency)], [20, 80], bold=True)
    writer.line(["Net", format_amount(summary.net, currency)], [20, 80], bold=True)
    writer.line(["Savings rate", f"{summary.savings_rate * 100:.1f}%"], [20, 80], bold=True)
    writer.gap()

    positions = [20, 45, 75, 130, 165]
    writer.line(["Date", "Voucher", "Title", "Category", "Amount"], positions, bold=True)
    for tx in sorted(transactions, key=lambda t: t.date):
        sign = "+" if _kind_label(tx.kind) == "INCOME" else "-"
        writer.line(
            [
                f"{tx.date:%Y-%m-%d}",
                tx.voucher_id,
                f"{tx.title} ({financial_user_names.get(tx.financial_user_id, '-')})",
                category_names.get(tx.category_id, "-"),
                f"{sign}{format_amount(tx.amount, currency)}",
            ],
            positions,
        )
    return writer.finish()


def render_category_breakdown(rows: List[CategoryBreakdown], currency: str, software_name: str) -> bytes:
    writer = _ReportWriter("Category-wise Breakdown", software_name)
    positions = [20, 65, 100, 135, 160, 180]
    writer.line(["Category", "Income", "Expense", "Net", "% Inc", "% Exp"], positions, bold=True)
    for row in rows:
        writer.line(
            [
                f"{row.name} ({row.count})",
                format_amount(row.income, currency),
                format_amount(row.expense, currency),
                format_amount(row.net, currency),
                f"{row.pct_of_total_income:.1f}%",
                f"{row.pct_of_total_expense:.1f}%",
            ],
            positions,
        )
    writer.gap()
    total_income = sum(r.income for r in rows)
    total_expense = sum(r.expense for r in rows)
    writer.line(
        ["Total", format_amount(total_income, currency), format_amount(total_expense, currency),
         format_amount(total_income - total_expense, currency)],
        positions[:4],
        bold=True,
    )
    return writer.finish()
