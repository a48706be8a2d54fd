from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_store
from expense_tracker.schemas.backup import BackupDocument, ImportResult
from expense_tracker.services import backup
from expense_tracker.store import RecordStore

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("", response_model=BackupDocument)
@router.get("/", response_model=BackupDocument)
def export_data(store: RecordStore = Depends(get_store)):
    return backup.export_account(store)


@router.post("/import", response_model=ImportResult)
def import_data(document: BackupDocument, store: RecordStore = Depends(get_store)):
    return backup.import_account(store, document)


@router.delete("", status_code=200)
@router.delete("/", status_code=200)
def reset_data(store: RecordStore = Depends(get_store)):
    backup.reset_account(store)
    return {"message": "Account data reset"}
