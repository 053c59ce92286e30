"""
Fabric repository functions.

Fabrics are keyed by ``(id, site_id)``: the id comes from the site and is
only unique within it.
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, dialect_name, filter_in
from infradb.db.search import search_filter

logger = logging.getLogger(__name__)

STATUS_PENDING = "Pending"
STATUS_READY = "Ready"
STATUS_ERROR = "Error"
STATUS_DELETING = "Deleting"

RELATIONS = ("site", "infrastructure_provider")

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "id": models.Fabric.id,
    "status": models.Fabric.status,
    "created": models.Fabric.created,
    "updated": models.Fabric.updated,
}


def create_fabric(db: Session, fabric: schemas.FabricCreate) -> models.Fabric:
    db_fabric = models.Fabric(**fabric.model_dump())
    db.add(db_fabric)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating fabric {fabric.id} on site {fabric.site_id}: {e}")
        db.rollback()
        raise
    logger.info(f"Created fabric {fabric.id} on site {fabric.site_id}")
    return get_fabric(db, db_fabric.id, db_fabric.site_id)


def get_fabric(
    db: Session,
    fabric_id: str,
    site_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.Fabric:
    q = base_query(db, models.Fabric).filter(models.Fabric.id == fabric_id, models.Fabric.site_id == site_id)
    q = apply_relations(q, models.Fabric, include_relations, RELATIONS)
    db_fabric = q.first()
    if db_fabric is None:
        raise DoesNotExistError("Fabric", f"{fabric_id}@{site_id}")
    return db_fabric


def get_fabrics(
    db: Session,
    filters: Optional[schemas.FabricFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    filters = filters or schemas.FabricFilter()
    q = base_query(db, models.Fabric)
    q = filter_in(q, models.Fabric.id, filters.ids)
    if filters.org is not None:
        q = q.filter(models.Fabric.org == filters.org)
    if filters.site_id is not None:
        q = q.filter(models.Fabric.site_id == filters.site_id)
    if filters.infrastructure_provider_id is not None:
        q = q.filter(models.Fabric.infrastructure_provider_id == filters.infrastructure_provider_id)
    if filters.status is not None:
        q = q.filter(models.Fabric.status == filters.status)
    if filters.search_query is not None:
        q = q.filter(
            search_filter(dialect_name(db), (models.Fabric.id, models.Fabric.status), filters.search_query)
        )
    q = apply_relations(q, models.Fabric, include_relations, RELATIONS)
    logger.debug(f"Listing fabrics: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def update_fabric(db: Session, fabric_id: str, site_id: uuid.UUID, fabric: schemas.FabricUpdate) -> models.Fabric:
    db_fabric = get_fabric(db, fabric_id, site_id)
    changes = fabric.model_dump(exclude_none=True)
    if not changes:
        return db_fabric
    for key, value in changes.items():
        setattr(db_fabric, key, value)
    db_fabric.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating fabric {fabric_id} on site {site_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_fabric)
    logger.info(f"Updated fabric {fabric_id} on site {site_id}: {sorted(changes)}")
    return db_fabric


def delete_fabric(db: Session, fabric_id: str, site_id: uuid.UUID) -> None:
    delete_fabrics(db, ids=[fabric_id], site_id=site_id)


def delete_fabrics(db: Session, ids: Optional[Sequence[str]] = None, site_id: Optional[uuid.UUID] = None) -> int:
    """Soft-delete every fabric matching ``ids`` and ``site_id``; returns the number deleted.

    With neither argument every fabric is deleted.
    """
    q = base_query(db, models.Fabric)
    q = filter_in(q, models.Fabric.id, ids)
    if site_id is not None:
        q = q.filter(models.Fabric.site_id == site_id)
    try:
        deleted = q.update({models.Fabric.deleted: models.now_utc()})
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting fabrics ids={ids} site={site_id}: {e}")
        db.rollback()
        raise
    logger.info(f"Deleted {deleted} fabrics (ids={ids}, site={site_id})")
    return deleted
