"""
Allocation constraint repository functions.
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError, InvalidParamsError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, filter_in

logger = logging.getLogger(__name__)

CONSTRAINT_TYPE_RESERVED = "Reserved"
CONSTRAINT_TYPE_ON_DEMAND = "OnDemand"
CONSTRAINT_TYPE_PREEMPTIBLE = "Preemptible"

RESOURCE_TYPE_INSTANCE_TYPE = "InstanceType"
RESOURCE_TYPE_IP_BLOCK = "IPBlock"

RELATIONS = ("allocation",)

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "resource_type": models.AllocationConstraint.resource_type,
    "created": models.AllocationConstraint.created,
    "updated": models.AllocationConstraint.updated,
}


def _require_text(name: str, value: Optional[str]) -> None:
    if value is not None and not value.strip():
        raise InvalidParamsError(f"{name} is empty")


def create_allocation_constraint(
    db: Session,
    constraint: schemas.AllocationConstraintCreate,
) -> models.AllocationConstraint:
    _require_text("resource_type", constraint.resource_type)
    _require_text("constraint_type", constraint.constraint_type)
    db_ac = models.AllocationConstraint(**constraint.model_dump(exclude_none=True))
    db.add(db_ac)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating allocation constraint for allocation {constraint.allocation_id}: {e}")
        db.rollback()
        raise
    logger.info(
        f"Created allocation constraint {db_ac.id}: {db_ac.constraint_type} {db_ac.constraint_value} "
        f"{db_ac.resource_type} {db_ac.resource_type_id}"
    )
    return get_allocation_constraint(db, db_ac.id)


def get_allocation_constraint(
    db: Session,
    constraint_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.AllocationConstraint:
    q = base_query(db, models.AllocationConstraint).filter(models.AllocationConstraint.id == constraint_id)
    q = apply_relations(q, models.AllocationConstraint, include_relations, RELATIONS)
    db_ac = q.first()
    if db_ac is None:
        raise DoesNotExistError("AllocationConstraint", constraint_id)
    return db_ac


def get_allocation_constraints(
    db: Session,
    filters: Optional[schemas.AllocationConstraintFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    filters = filters or schemas.AllocationConstraintFilter()
    q = base_query(db, models.AllocationConstraint)
    q = filter_in(q, models.AllocationConstraint.allocation_id, filters.allocation_ids)
    q = filter_in(q, models.AllocationConstraint.resource_type_id, filters.resource_type_ids)
    if filters.resource_type is not None:
        q = q.filter(models.AllocationConstraint.resource_type == filters.resource_type)
    if filters.constraint_type is not None:
        q = q.filter(models.AllocationConstraint.constraint_type == filters.constraint_type)
    if filters.derived_resource_id is not None:
        q = q.filter(models.AllocationConstraint.derived_resource_id == filters.derived_resource_id)
    q = apply_relations(q, models.AllocationConstraint, include_relations, RELATIONS)
    logger.debug(f"Listing allocation constraints: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def update_allocation_constraint(
    db: Session,
    constraint_id: uuid.UUID,
    constraint: schemas.AllocationConstraintUpdate,
) -> models.AllocationConstraint:
    _require_text("resource_type", constraint.resource_type)
    _require_text("constraint_type", constraint.constraint_type)
    db_ac = get_allocation_constraint(db, constraint_id)
    changes = constraint.model_dump(exclude_none=True)
    if not changes:
        return db_ac
    for key, value in changes.items():
        setattr(db_ac, key, value)
    db_ac.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating allocation constraint {constraint_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_ac)
    logger.info(f"Updated allocation constraint {constraint_id}: {sorted(changes)}")
    return db_ac


def clear_allocation_constraint(
    db: Session,
    constraint_id: uuid.UUID,
    clear: schemas.AllocationConstraintClear,
) -> models.AllocationConstraint:
    db_ac = get_allocation_constraint(db, constraint_id)
    if not clear.derived_resource_id:
        return db_ac
    db_ac.derived_resource_id = None
    db_ac.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing derived resource on allocation constraint {constraint_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_ac)
    return db_ac


def delete_allocation_constraint(db: Session, constraint_id: uuid.UUID) -> None:
    try:
        deleted = base_query(db, models.AllocationConstraint).filter(
            models.AllocationConstraint.id == constraint_id
        ).update({models.AllocationConstraint.deleted: models.now_utc()})
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting allocation constraint {constraint_id}: {e}")
        db.rollback()
        raise
    if deleted:
        logger.info(f"Deleted allocation constraint {constraint_id}")
