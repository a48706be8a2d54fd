from typing import Optional
from pydantic import BaseModel, ConfigDict

from expense_tracker.models.account_settings import Currency, NumberFormat, Theme


class AccountSettingsRead(BaseModel):
    currency: Currency
    number_format: NumberFormat
    theme: Theme
    voucher_prefix: str
    date_format: str
    notifications: bool
    auto_backup: bool
    software_name: str

    model_config = ConfigDict(from_attributes=True)


class AccountSettingsUpdate(BaseModel):
    currency: Optional[Currency] = None
    number_format: Optional[NumberFormat] = None
    theme: Optional[Theme] = None
    voucher_prefix: Optional[str] = None
    date_format: Optional[str] = None
    notifications: Optional[bool] = None
    auto_backup: Optional[bool] = None
    software_name: Optional[str] = None
