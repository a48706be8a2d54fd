from sqlmodel import SQLModel, Session, create_engine

from expense_tracker.core.config import settings

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, echo=settings.sql_echo, connect_args=connect_args)


def import_models():
    # Table classes must be imported before metadata.create_all
    from expense_tracker.models.user import User  # noqa: F401
    from expense_tracker.models.account_settings import AccountSettings  # noqa: F401
    from expense_tracker.models.category import Category  # noqa: F401
    from expense_tracker.models.financial_user import FinancialUser  # noqa: F401
    from expense_tracker.models.goal import Goal  # noqa: F401
    from expense_tracker.models.loan import Loan  # noqa: F401
    from expense_tracker.models.transaction import Transaction  # noqa: F401
    from expense_tracker.models.voucher_counter import VoucherCounter  # noqa: F401


def create_db_and_tables():
    import_models()
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
