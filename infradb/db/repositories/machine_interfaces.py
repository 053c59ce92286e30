"""
Machine interface repository functions.

Machine interfaces are the NICs a site controller reports for a machine. They
are soft-deleted by default; ``purge=True`` removes the row.
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, dialect_name, filter_in
from infradb.db.types import array_overlap

logger = logging.getLogger(__name__)

RELATIONS = ("machine", "subnet")

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "hostname": models.MachineInterface.hostname,
    "created": models.MachineInterface.created,
    "updated": models.MachineInterface.updated,
}


def create_machine_interface(db: Session, machine_interface: schemas.MachineInterfaceCreate) -> models.MachineInterface:
    db_mi = models.MachineInterface(**machine_interface.model_dump(exclude_none=True))
    db.add(db_mi)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating interface for machine {machine_interface.machine_id}: {e}")
        db.rollback()
        raise
    logger.info(f"Created machine interface {db_mi.id} for machine {db_mi.machine_id}")
    return get_machine_interface(db, db_mi.id)


def get_machine_interface(
    db: Session,
    machine_interface_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.MachineInterface:
    q = base_query(db, models.MachineInterface).filter(models.MachineInterface.id == machine_interface_id)
    q = apply_relations(q, models.MachineInterface, include_relations, RELATIONS)
    db_mi = q.first()
    if db_mi is None:
        raise DoesNotExistError("MachineInterface", machine_interface_id)
    return db_mi


def get_machine_interfaces(
    db: Session,
    filters: Optional[schemas.MachineInterfaceFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    filters = filters or schemas.MachineInterfaceFilter()
    q = base_query(db, models.MachineInterface)
    q = filter_in(q, models.MachineInterface.machine_id, filters.machine_ids)
    q = filter_in(q, models.MachineInterface.controller_interface_id, filters.controller_interface_ids)
    q = filter_in(q, models.MachineInterface.controller_segment_id, filters.controller_segment_ids)
    q = filter_in(q, models.MachineInterface.attached_dpu_machine_id, filters.attached_dpu_machine_ids)
    q = filter_in(q, models.MachineInterface.subnet_id, filters.subnet_ids)
    q = filter_in(q, models.MachineInterface.hostname, filters.hostnames)
    q = filter_in(q, models.MachineInterface.mac_address, filters.mac_addresses)
    if filters.is_primary is not None:
        q = q.filter(models.MachineInterface.is_primary == filters.is_primary)
    if filters.ip_addresses is not None:
        q = q.filter(array_overlap(models.MachineInterface.ip_addresses, filters.ip_addresses, dialect_name(db)))

    q = apply_relations(q, models.MachineInterface, include_relations, RELATIONS)
    logger.debug(f"Listing machine interfaces: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def update_machine_interface(
    db: Session,
    machine_interface_id: uuid.UUID,
    machine_interface: schemas.MachineInterfaceUpdate,
) -> models.MachineInterface:
    db_mi = get_machine_interface(db, machine_interface_id)
    changes = machine_interface.model_dump(exclude_none=True)
    if not changes:
        return db_mi
    for key, value in changes.items():
        setattr(db_mi, key, value)
    db_mi.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating machine interface {machine_interface_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_mi)
    logger.info(f"Updated machine interface {machine_interface_id}: {sorted(changes)}")
    return db_mi


def clear_machine_interface(
    db: Session,
    machine_interface_id: uuid.UUID,
    clear: schemas.MachineInterfaceClear,
) -> models.MachineInterface:
    db_mi = get_machine_interface(db, machine_interface_id)
    fields = [name for name, flagged in clear.model_dump().items() if flagged]
    if not fields:
        return db_mi
    for name in fields:
        setattr(db_mi, name, None)
    db_mi.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing {fields} on machine interface {machine_interface_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_mi)
    logger.info(f"Cleared {fields} on machine interface {machine_interface_id}")
    return db_mi


def delete_machine_interface(db: Session, machine_interface_id: uuid.UUID, purge: bool = False) -> None:
    """Soft-delete a machine interface, or remove the row when ``purge`` is set.

    Purging also removes rows that were previously soft-deleted.
    """
    q = db.query(models.MachineInterface).filter(models.MachineInterface.id == machine_interface_id)
    try:
        if purge:
            removed = q.delete()
        else:
            removed = q.filter(models.MachineInterface.deleted.is_(None)).update(
                {models.MachineInterface.deleted: models.now_utc()}
            )
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting machine interface {machine_interface_id} (purge={purge}): {e}")
        db.rollback()
        raise
    if removed:
        logger.info(f"Deleted machine interface {machine_interface_id} (purge={purge})")
