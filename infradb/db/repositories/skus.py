"""
SKU repository functions.

SKU ids are assigned by the site controller and must be supplied on create.
SKUs are hard-deleted.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, dialect_name, filter_in
from infradb.db.types import array_overlap

logger = logging.getLogger(__name__)

RELATIONS = ("site",)

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "created": models.SKU.created,
    "updated": models.SKU.updated,
}


def create_sku(db: Session, sku: schemas.SkuCreate) -> models.SKU:
    db_sku = models.SKU(
        id=sku.id,
        site_id=sku.site_id,
        device_type=sku.device_type,
        components=sku.components,
        associated_machines=list(sku.associated_machine_ids or []),
    )
    db.add(db_sku)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating SKU {sku.id}: {e}")
        db.rollback()
        raise
    logger.info(f"Created SKU {sku.id} on site {sku.site_id}")
    return get_sku(db, db_sku.id)


def get_sku(db: Session, sku_id: str, include_relations: Optional[Iterable[str]] = None) -> models.SKU:
    q = base_query(db, models.SKU).filter(models.SKU.id == sku_id)
    q = apply_relations(q, models.SKU, include_relations, RELATIONS)
    db_sku = q.first()
    if db_sku is None:
        raise DoesNotExistError("SKU", sku_id)
    return db_sku


def get_skus(
    db: Session,
    filters: Optional[schemas.SkuFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    filters = filters or schemas.SkuFilter()
    q = base_query(db, models.SKU)
    q = filter_in(q, models.SKU.site_id, filters.site_ids)
    q = filter_in(q, models.SKU.id, filters.sku_ids)
    q = filter_in(q, models.SKU.device_type, filters.device_types)
    # Unlike the IN filters an empty list here means no filter
    if filters.associated_machine_ids:
        q = q.filter(array_overlap(models.SKU.associated_machines, filters.associated_machine_ids, dialect_name(db)))
    q = apply_relations(q, models.SKU, include_relations, RELATIONS)
    logger.debug(f"Listing SKUs: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def update_sku(db: Session, sku_id: str, sku: schemas.SkuUpdate) -> models.SKU:
    db_sku = get_sku(db, sku_id)
    changes = sku.model_dump(exclude_none=True)
    if not changes:
        return db_sku
    machine_ids = changes.pop("associated_machine_ids", None)
    for key, value in changes.items():
        setattr(db_sku, key, value)
    if machine_ids is not None:
        db_sku.associated_machines = list(machine_ids)
    db_sku.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating SKU {sku_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_sku)
    logger.info(f"Updated SKU {sku_id}: {sorted(sku.model_dump(exclude_none=True))}")
    return db_sku


def clear_sku(db: Session, sku_id: str, clear: schemas.SkuClear) -> models.SKU:
    db_sku = get_sku(db, sku_id)
    fields = [name for name, flagged in clear.model_dump().items() if flagged]
    if not fields:
        return db_sku
    for name in fields:
        setattr(db_sku, name, None)
    db_sku.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing {fields} on SKU {sku_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_sku)
    return db_sku


def delete_sku(db: Session, sku_id: str) -> None:
    try:
        removed = db.query(models.SKU).filter(models.SKU.id == sku_id).delete()
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting SKU {sku_id}: {e}")
        db.rollback()
        raise
    if removed:
        logger.info(f"Deleted SKU {sku_id}")
