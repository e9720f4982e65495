"""Generic CRUD, move, reorder and tree listing for one hierarchy level.

One class serves all five levels; everything level-specific comes from the
level's ``LevelSpec`` (table, parent reference, folder type, extra columns
and the child level used for cascade creation).
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..levels import LEVELS, Level, LevelSpec
from ..repositories import EntityRepository, FolderRepository, record_to_dict
from ..schemas.entity import EntityCreate, EntityUpdate
from ..schemas.tree import ReorderItem
from .code_allocator import allocate_code, new_record_id, next_sort_key
from .folder_service import check_member_folder, folder_node
from .tree_builder import build_tree

logger = logging.getLogger(__name__)


class EntityService:
    """Operations on the records of a single level.

    Public methods:
        get_all  -- folder tree of one parent's records
        get      -- single record as a node
        create   -- new record, optionally with a default child chain
        update   -- partial update of name / folder / order / extras
        delete   -- exactly one row; never cascades
        move     -- file into a folder (None = root)
        reorder  -- batch sort_order (and folder_id) update
    """

    def __init__(self, db: Session, level: Level):
        self.db = db
        self.spec = LEVELS[level]
        self.repo = EntityRepository(db, self.spec)
        self.folder_repo = FolderRepository(db)

    def get_all(self, owner_id: Optional[str] = None) -> List[Dict[str, Any]]:
        scope = owner_id if self.spec.scoped else None
        folders = self.folder_repo.list_in_scope(self.spec.folder_type, scope)
        records = self.repo.list_scoped(scope)
        return build_tree(
            [folder_node(f) for f in folders],
            [self._to_node(r) for r in records],
        )

    def get(self, entity_id: str) -> Optional[Dict[str, Any]]:
        record = self.repo.get_by_id_optional(entity_id)
        return self._to_node(record) if record else None

    def count(self) -> int:
        return self.repo.count()

    def create(self, data: EntityCreate, cascade: bool = True) -> Dict[str, Any]:
        """Insert a record and, with *cascade*, one default child per level below it.

        Every row and code of the chain commits in a single transaction.
        """
        parent_id = getattr(data, self.spec.parent_field) if self.spec.scoped else None
        extras = {column: getattr(data, column) for column, _ in self.spec.extras}
        record = self._insert(self.spec, data.name, data.folder_id, parent_id, extras)

        created = 1
        if cascade:
            created += self._cascade_create(self.spec, record.id)

        self.db.commit()
        logger.info(
            "Record created",
            extra={
                "level": self.spec.level.value,
                "record_id": record.id,
                "code": record.code,
                "cascade_rows": created,
            },
        )
        return self._to_node(record)

    def update(self, entity_id: str, data: EntityUpdate) -> Optional[Dict[str, Any]]:
        record = self.repo.get_by_id_optional(entity_id)
        if record is None:
            return None

        allowed = {"name", "folder_id", "sort_order"} | {column for column, _ in self.spec.extras}
        patch = {k: v for k, v in data.model_dump(exclude_unset=True).items() if k in allowed}

        if "folder_id" in patch:
            folder_id = patch.pop("folder_id")
            self._check_folder(folder_id, self._parent_of(record))
            record.folder_id = folder_id
        for key, value in patch.items():
            if value is not None:
                setattr(record, key, value)

        self.db.commit()
        self.db.refresh(record)
        return self._to_node(record)

    def delete(self, entity_id: str) -> bool:
        removed = self.repo.delete_by_id(entity_id)
        self.db.commit()
        if removed:
            logger.info(
                "Record deleted",
                extra={"level": self.spec.level.value, "record_id": entity_id},
            )
        return removed

    def move(self, entity_id: str, folder_id: Optional[str]) -> bool:
        record = self.repo.get_by_id_optional(entity_id)
        if record is None:
            return False
        self._check_folder(folder_id, self._parent_of(record))
        record.folder_id = folder_id
        self.db.commit()
        return True

    def reorder(self, items: List[ReorderItem]) -> bool:
        for item in items:
            record = self.repo.get_by_id_optional(item.id)
            if record is None:
                logger.warning(
                    "Reorder skipped unknown record",
                    extra={"level": self.spec.level.value, "record_id": item.id},
                )
                continue
            record.sort_order = item.sort_order
            if "folder_id" in item.model_fields_set:
                self._check_folder(item.folder_id, self._parent_of(record))
                record.folder_id = item.folder_id
        self.db.commit()
        return True

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _to_node(self, record) -> Dict[str, Any]:
        node = record_to_dict(record)
        node["type"] = self.spec.level.value
        return node

    def _parent_of(self, record) -> Optional[str]:
        return getattr(record, self.spec.parent_field) if self.spec.scoped else None

    def _check_folder(self, folder_id: Optional[str], parent_id: Optional[str]) -> None:
        if folder_id:
            check_member_folder(self.folder_repo, folder_id, self.spec.folder_type, parent_id)

    def _insert(
        self,
        spec: LevelSpec,
        name: Optional[str],
        folder_id: Optional[str],
        parent_id: Optional[str],
        extras: Dict[str, Optional[str]],
    ):
        if folder_id:
            check_member_folder(self.folder_repo, folder_id, spec.folder_type, parent_id)

        record = spec.model(
            id=new_record_id(spec.id_prefix),
            code=allocate_code(self.db),
            name=name or spec.placeholder_name,
            folder_id=folder_id,
            sort_order=next_sort_key(),
        )
        if spec.scoped:
            setattr(record, spec.parent_field, parent_id)
        for column, default in spec.extras:
            setattr(record, column, extras.get(column) or default)

        return EntityRepository(self.db, spec).add(record)

    def _cascade_create(self, spec: LevelSpec, parent_id: str) -> int:
        """Create one placeholder child per level below *spec*. Returns rows created."""
        created = 0
        while spec.child is not None:
            spec = LEVELS[spec.child]
            child = self._insert(spec, None, None, parent_id, {})
            parent_id = child.id
            created += 1
        return created
