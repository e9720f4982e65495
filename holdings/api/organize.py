"""Move and reorder endpoints shared by every item kind."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..levels import ItemKind
from ..schemas.tree import MoveRequest, ReorderRequest, SuccessResponse
from ..services.organizer import move_item, reorder_items

router = APIRouter(prefix="/api", tags=["organize"])


@router.put("/move/{kind}/{item_id}", response_model=SuccessResponse)
def move(kind: ItemKind, item_id: str, data: MoveRequest, db: Session = Depends(get_db)):
    """File an item into a folder. For ``kind=folder`` the target becomes its parent."""
    move_item(db, kind, item_id, data.folder_id)
    return {"success": True}


@router.put("/reorder", response_model=SuccessResponse)
def reorder(data: ReorderRequest, db: Session = Depends(get_db)):
    return {"success": reorder_items(db, data.type, data.items)}
