"""Hierarchy record API: one router per level, built from the level registry.

List endpoints take the parent id under the parent reference name
(``?shareholder_id=`` on companies, ``?company_id=`` on projects, ...).
"""

import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ..database import get_db
from ..exceptions import EntityNotFoundError
from ..levels import LEVELS, Level
from ..schemas.entity import EntityCreate, EntityUpdate
from ..schemas.tree import TreeNode, SuccessResponse
from ..services.entity_service import EntityService

logger = logging.getLogger(__name__)


def build_entity_router(level: Level) -> APIRouter:
    spec = LEVELS[level]
    router = APIRouter(prefix=f"/api/{spec.route}", tags=[spec.route])

    @router.get("", response_model=List[TreeNode], response_model_exclude_unset=True)
    def list_records(
        owner_id: Optional[str] = Query(None, alias=spec.parent_field or "owner_id"),
        db: Session = Depends(get_db),
    ):
        """Folder tree of the records under one parent."""
        return EntityService(db, level).get_all(owner_id)

    @router.get("/{entity_id}", response_model=TreeNode, response_model_exclude_unset=True)
    def get_record(entity_id: str, db: Session = Depends(get_db)):
        record = EntityService(db, level).get(entity_id)
        if record is None:
            raise EntityNotFoundError(level.value, entity_id)
        return record

    @router.post("", response_model=TreeNode, response_model_exclude_unset=True, status_code=201)
    def create_record(data: EntityCreate, db: Session = Depends(get_db)):
        """Create a record; with ``cascade`` (default) one placeholder child per level below."""
        return EntityService(db, level).create(data, cascade=data.cascade)

    @router.put("/{entity_id}", response_model=TreeNode, response_model_exclude_unset=True)
    def update_record(entity_id: str, data: EntityUpdate, db: Session = Depends(get_db)):
        record = EntityService(db, level).update(entity_id, data)
        if record is None:
            raise EntityNotFoundError(level.value, entity_id)
        return record

    @router.delete("/{entity_id}", response_model=SuccessResponse)
    def delete_record(entity_id: str, db: Session = Depends(get_db)):
        """Delete one record. Descendants are left in place."""
        if not EntityService(db, level).delete(entity_id):
            raise EntityNotFoundError(level.value, entity_id)
        return {"success": True}

    return router


entity_routers = [build_entity_router(level) for level in Level]
