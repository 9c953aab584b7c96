# dripdesk_api/api/records.py
import logging
from typing import Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from ..core.config import COLLECTIONS
from ..storage.sqlite_store import RecordNotFound, RecordStore, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_collection(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown collection '{collection}'.")
    return collection


@router.get("/{collection}")
def list_records(collection: str, request: Request, store: RecordStore = Depends(get_store)):
    """
    Lists a collection, most recently updated first.
    Any query parameter is an equality filter, e.g. `?client_id=...`.
    """
    _check_collection(collection)
    filters = dict(request.query_params)
    records = store.list(collection, filters)
    return {"status": "success", "records": records}


@router.get("/{collection}/{record_id}")
def get_record(collection: str, record_id: str, store: RecordStore = Depends(get_store)):
    _check_collection(collection)
    try:
        return {"status": "success", "record": store.get(collection, record_id)}
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{collection}", status_code=201)
def create_record(collection: str, payload: Dict = Body(...), store: RecordStore = Depends(get_store)):
    _check_collection(collection)
    record = store.create(collection, payload)
    return {"status": "success", "message": f"Created record {record['id']}.", "record": record}


@router.put("/{collection}/{record_id}")
def update_record(collection: str, record_id: str, payload: Dict = Body(...),
                  store: RecordStore = Depends(get_store)):
    _check_collection(collection)
    try:
        record = store.update(collection, record_id, payload)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "success", "message": f"Updated record {record_id}.", "record": record}


@router.delete("/{collection}/{record_id}")
def delete_record(collection: str, record_id: str, store: RecordStore = Depends(get_store)):
    _check_collection(collection)
    try:
        store.delete(collection, record_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "success", "message": f"Deleted record {record_id}."}


@router.delete("/{collection}")
def delete_matching(collection: str, request: Request, store: RecordStore = Depends(get_store)):
    """Bulk delete by equality filters. Refuses to run without at least one filter."""
    _check_collection(collection)
    filters = dict(request.query_params)
    if not filters:
        raise HTTPException(status_code=422, detail="Bulk delete requires at least one filter.")
    deleted = store.delete_where(collection, filters)
    return {"status": "success", "message": f"Deleted {deleted} record(s).", "deleted": deleted}
