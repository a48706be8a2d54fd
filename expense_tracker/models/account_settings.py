# expense_tracker/models/account_settings.py

from enum import Enum
from sqlmodel import SQLModel, Field
from uuid import UUID


class Currency(str, Enum):
    USD = "USD"
    BDT = "BDT"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"


class NumberFormat(str, Enum):
    english = "english"
    bengali = "bengali"


class Theme(str, Enum):
    light = "light"
    dark = "dark"


class AccountSettings(SQLModel, table=True):
    __tablename__ = "account_settings"

    account_id: UUID = Field(foreign_key="user.id", primary_key=True)
    currency: Currency = Field(default=Currency.USD)
    number_format: NumberFormat = Field(default=NumberFormat.english)
    theme: Theme = Field(default=Theme.light)
    voucher_prefix: str = Field(default="")
    date_format: str = Field(default="MM/DD/YYYY")
    notifications: bool = Field(default=True)
    auto_backup: bool = Field(default=False)
    software_name: str = Field(default="Expense Tracker")
