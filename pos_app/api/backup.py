import json

from fastapi import APIRouter, Depends, HTTPException, UploadFile

from pos_app.api.deps import get_settings, get_store
from pos_app.config import Settings
from pos_app.schemas.backup import ImportResult, StoreInfoData
from pos_app.services import backup_service
from pos_app.services.store import Store

router = APIRouter(tags=["Backup"])


@router.get("/backup/export")
def export_backup(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    return backup_service.export_backup(store, settings)


@router.post("/backup/import", response_model=ImportResult)
def import_backup(file: UploadFile, store: Store = Depends(get_store)):
    if not file.filename or not file.filename.endswith(".json"):
        raise HTTPException(400, "Only JSON backup files are supported")

    try:
        document = json.loads(file.file.read().decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise HTTPException(400, f"Backup file is not valid JSON: {e}")
    if not isinstance(document, dict):
        raise HTTPException(400, "Backup file must contain a JSON object")
    return backup_service.import_backup(store, document)


@router.get("/store-info", response_model=StoreInfoData)
def get_store_info(store: Store = Depends(get_store), settings: Settings = Depends(get_settings)):
    return backup_service.get_store_info(store, settings)


@router.put("/store-info", response_model=StoreInfoData)
def save_store_info(data: StoreInfoData, store: Store = Depends(get_store)):
    return backup_service.save_store_info(store, data)
