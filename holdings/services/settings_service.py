"""Server-side key/value storage for UI layout settings.

Values are stored JSON-encoded; rows written by other tools that are not
valid JSON come back as their raw string.
"""

import json
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..models import Setting

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for row in self.db.query(Setting).order_by(Setting.key).all():
            try:
                result[row.key] = json.loads(row.value) if row.value is not None else None
            except ValueError:
                result[row.key] = row.value
        return result

    def update(self, values: Dict[str, Any]) -> bool:
        """Upsert every key in *values*; keys not mentioned are left untouched."""
        for key, value in values.items():
            self.db.merge(Setting(key=key, value=json.dumps(value)))
        self.db.commit()
        logger.debug("Settings updated", extra={"keys": sorted(values)})
        return True
