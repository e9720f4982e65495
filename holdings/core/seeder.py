"""Seed a small demo hierarchy on first startup.

Gives new users two shareholders with a few companies, projects, tables
and views to click through. Idempotent: skips if any shareholder exists.
"""

import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# (name, extras, children) triples, one nesting level per hierarchy level.
SAMPLE_HIERARCHY = [
    ("Alice Chen", {}, [
        ("Northwind Tech", {}, [
            ("Project Alpha", {}, [
                ("Schedule", {"color": "#22c55e"}, [
                    ("Gantt", {"view_type": "gantt"}, []),
                    ("Board", {"view_type": "kanban"}, []),
                ]),
                ("Budget", {"color": "#ef4444"}, []),
            ]),
            ("Project Beta", {}, []),
        ]),
        ("Harbor Trading", {}, []),
    ]),
    ("Bruno Lima", {}, []),
]


def seed_sample_data(db: Session) -> int:
    """Create the sample hierarchy if the database has no shareholders.

    Args:
        db: An open SQLAlchemy session.

    Returns:
        Number of records seeded (0 if skipped).
    """
    from ..levels import LEVELS, Level
    from ..schemas.entity import EntityCreate
    from ..services.entity_service import EntityService

    existing = EntityService(db, Level.SHAREHOLDER).count()
    if existing > 0:
        logger.debug("Database has %d shareholders, skipping seed", existing)
        return 0

    levels = list(Level)
    seeded = 0

    def create_branch(depth: int, parent_id, nodes) -> None:
        nonlocal seeded
        spec = LEVELS[levels[depth]]
        service = EntityService(db, spec.level)
        for name, extras, children in nodes:
            payload = {"name": name, **extras}
            if spec.scoped:
                payload[spec.parent_field] = parent_id
            record = service.create(EntityCreate(**payload), cascade=False)
            seeded += 1
            if children:
                create_branch(depth + 1, record["id"], children)

    create_branch(0, None, SAMPLE_HIERARCHY)
    logger.info("Seeded %d sample records", seeded)
    return seeded
