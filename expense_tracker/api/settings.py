from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_store
from expense_tracker.schemas.settings import AccountSettingsRead, AccountSettingsUpdate
from expense_tracker.store import RecordStore
from expense_tracker.utils.settings_helpers import get_account_settings, save_account_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=AccountSettingsRead)
@router.get("/", response_model=AccountSettingsRead)
def read_settings(store: RecordStore = Depends(get_store)):
    return get_account_settings(store)


@router.put("", response_model=AccountSettingsRead)
@router.put("/", response_model=AccountSettingsRead)
def update_settings(data: AccountSettingsUpdate, store: RecordStore = Depends(get_store)):
    return save_account_settings(store, data.model_dump(exclude_unset=True, exclude_none=True))
