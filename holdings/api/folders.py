"""Folder API: CRUD over the flat folder store.

Folder trees are served by the per-level list endpoints; this router
returns folders flat, with the folder type under ``type``.
"""

import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ..database import get_db
from ..exceptions import FolderNotFoundError
from ..levels import FolderType
from ..schemas.folder import FolderCreate, FolderUpdate, FolderResponse
from ..schemas.tree import SuccessResponse
from ..services.folder_service import FolderService, folder_record

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["folders"])


@router.get("", response_model=List[FolderResponse])
def list_folders(
    type: FolderType = Query(...),
    owner_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Folders of one type ordered by sort_order, optionally for one owner."""
    service = FolderService(db)
    return [folder_record(f) for f in service.list_folders(type, owner_id)]


@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(data: FolderCreate, db: Session = Depends(get_db)):
    folder = FolderService(db).create_folder(data)
    return folder_record(folder)


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: str, db: Session = Depends(get_db)):
    folder = FolderService(db).get_folder(folder_id)
    if not folder:
        raise FolderNotFoundError(folder_id)
    return folder_record(folder)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(folder_id: str, data: FolderUpdate, db: Session = Depends(get_db)):
    folder = FolderService(db).update_folder(folder_id, data)
    if not folder:
        raise FolderNotFoundError(folder_id)
    return folder_record(folder)


@router.delete("/{folder_id}", response_model=SuccessResponse)
def delete_folder(folder_id: str, db: Session = Depends(get_db)):
    """Delete a folder; its subfolders and records move up to its parent."""
    if not FolderService(db).delete_folder(folder_id):
        raise FolderNotFoundError(folder_id)
    return {"success": True}
