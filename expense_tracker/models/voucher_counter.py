from sqlmodel import SQLModel, Field
from uuid import UUID


class VoucherCounter(SQLModel, table=True):
    __tablename__ = "voucher_counter"

    account_id: UUID = Field(foreign_key="user.id", primary_key=True)
    day: str = Field(primary_key=True)  # YYYYMMDD
    counter: int = 0
