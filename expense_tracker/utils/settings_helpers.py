from expense_tracker.models.account_settings import AccountSettings
from expense_tracker.store import RecordStore


def get_account_settings(store: RecordStore) -> AccountSettings:
    """Stored settings for the account, or an unsaved instance holding the defaults."""
    settings = store.session.get(AccountSettings, store.account_id)
    if settings is None:
        settings = AccountSettings(account_id=store.account_id)
    return settings


def save_account_settings(store: RecordStore, patch: dict) -> AccountSettings:
    settings = get_account_settings(store)
    for field, value in patch.items():
        setattr(settings, field, value)
    store.session.add(settings)
    store.session.commit()
    store.session.refresh(settings)
    return settings
