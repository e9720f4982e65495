"""UI settings blob API."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.tree import SuccessResponse
from ..services.settings_service import SettingsService

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=Dict[str, Any])
def get_settings(db: Session = Depends(get_db)):
    return SettingsService(db).get_all()


@router.put("", response_model=SuccessResponse)
def update_settings(values: Dict[str, Any], db: Session = Depends(get_db)):
    """Upsert the given keys; others are kept."""
    return {"success": SettingsService(db).update(values)}
