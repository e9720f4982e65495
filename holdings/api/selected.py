"""Selected-view API and view location lookup."""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..exceptions import SelectedViewNotFoundError, ViewLocationNotFoundError
from ..schemas.selected import SelectedViewCreate, SelectionStatus, ViewLocation
from ..schemas.tree import TreeNode, SuccessResponse
from ..services.selected_view_service import SelectedViewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/selected", tags=["selected"])

# Location lives under /api/views but is answered by the selected-view service.
location_router = APIRouter(tags=["selected"])


@router.get("", response_model=List[TreeNode], response_model_exclude_unset=True)
def list_selected(db: Session = Depends(get_db)):
    return SelectedViewService(db).get_all()


@router.post("", response_model=TreeNode, response_model_exclude_unset=True, status_code=201)
def select_view(data: SelectedViewCreate, db: Session = Depends(get_db)):
    """Add a view to the selected collection. 409 if it is already there."""
    return SelectedViewService(db).create(data)


@router.delete("/{selected_id}", response_model=SuccessResponse)
def unselect_view(selected_id: str, db: Session = Depends(get_db)):
    if not SelectedViewService(db).delete(selected_id):
        raise SelectedViewNotFoundError(selected_id)
    return {"success": True}


@router.get("/check/{view_id}", response_model=SelectionStatus)
def check_selected(view_id: str, db: Session = Depends(get_db)):
    return SelectedViewService(db).check_selected(view_id)


@location_router.get("/api/views/{view_id}/location", response_model=ViewLocation)
def get_view_location(view_id: str, db: Session = Depends(get_db)):
    """Ancestry of a view, root first. 404 if any link is missing."""
    location = SelectedViewService(db).get_view_location(view_id)
    if location is None:
        raise ViewLocationNotFoundError(view_id)
    return location
