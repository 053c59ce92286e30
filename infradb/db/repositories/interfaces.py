"""
Instance interface repository functions.

Interfaces attach an instance to a subnet or VPC prefix. Creation is batched:
:func:`create_interface` is the single-item form of :func:`create_interfaces`.
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError, InvalidParamsError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, dialect_name, filter_in
from infradb.db.types import array_overlap
from infradb.utils.settings import get_settings

logger = logging.getLogger(__name__)

STATUS_PENDING = "Pending"
STATUS_PROVISIONING = "Provisioning"
STATUS_READY = "Ready"
STATUS_ERROR = "Error"
STATUS_DELETING = "Deleting"

RELATIONS = ("instance", "subnet", "vpc_prefix", "machine_interface")

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "status": models.Interface.status,
    "created": models.Interface.created,
    "updated": models.Interface.updated,
}


def create_interfaces(db: Session, interfaces: Sequence[schemas.InterfaceCreate]) -> List[models.Interface]:
    """Insert ``interfaces`` in one flush and return the rows in input order."""
    max_items = get_settings().max_batch_items
    if len(interfaces) > max_items:
        raise InvalidParamsError(f"batch size {len(interfaces)} exceeds maximum allowed {max_items}")
    if not interfaces:
        return []

    db_interfaces = [
        models.Interface(id=uuid.uuid4(), **interface.model_dump(exclude_none=True))
        for interface in interfaces
    ]
    db.add_all(db_interfaces)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating {len(db_interfaces)} interfaces: {e}")
        db.rollback()
        raise

    ids = [db_interface.id for db_interface in db_interfaces]
    fetched = {row.id: row for row in base_query(db, models.Interface).filter(models.Interface.id.in_(ids)).all()}
    if len(fetched) != len(ids):
        raise DoesNotExistError("Interface", [i for i in ids if i not in fetched])
    logger.info(f"Created {len(ids)} interfaces")
    return [fetched[i] for i in ids]


def create_interface(db: Session, interface: schemas.InterfaceCreate) -> models.Interface:
    return create_interfaces(db, [interface])[0]


def get_interface(
    db: Session,
    interface_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.Interface:
    q = base_query(db, models.Interface).filter(models.Interface.id == interface_id)
    q = apply_relations(q, models.Interface, include_relations, RELATIONS)
    db_interface = q.first()
    if db_interface is None:
        raise DoesNotExistError("Interface", interface_id)
    return db_interface


def get_interfaces(
    db: Session,
    filters: Optional[schemas.InterfaceFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    filters = filters or schemas.InterfaceFilter()
    q = base_query(db, models.Interface)
    q = filter_in(q, models.Interface.instance_id, filters.instance_ids)
    q = filter_in(q, models.Interface.status, filters.statuses)
    if filters.subnet_id is not None:
        q = q.filter(models.Interface.subnet_id == filters.subnet_id)
    if filters.vpc_prefix_id is not None:
        q = q.filter(models.Interface.vpc_prefix_id == filters.vpc_prefix_id)
    if filters.is_physical is not None:
        q = q.filter(models.Interface.is_physical == filters.is_physical)
    if filters.device is not None:
        q = q.filter(models.Interface.device == filters.device)
    if filters.device_instance is not None:
        q = q.filter(models.Interface.device_instance == filters.device_instance)
    if filters.ip_addresses is not None:
        q = q.filter(array_overlap(models.Interface.ip_addresses, filters.ip_addresses, dialect_name(db)))
    q = apply_relations(q, models.Interface, include_relations, RELATIONS)
    logger.debug(f"Listing interfaces: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def update_interface(db: Session, interface_id: uuid.UUID, interface: schemas.InterfaceUpdate) -> models.Interface:
    db_interface = get_interface(db, interface_id)
    changes = interface.model_dump(exclude_none=True)
    if not changes:
        return db_interface
    for key, value in changes.items():
        setattr(db_interface, key, value)
    db_interface.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating interface {interface_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_interface)
    logger.info(f"Updated interface {interface_id}: {sorted(changes)}")
    return db_interface


def clear_interface(db: Session, interface_id: uuid.UUID, clear: schemas.InterfaceClear) -> models.Interface:
    db_interface = get_interface(db, interface_id)
    fields = [name for name, flagged in clear.model_dump().items() if flagged]
    if not fields:
        return db_interface
    for name in fields:
        setattr(db_interface, name, None)
    db_interface.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing {fields} on interface {interface_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_interface)
    logger.info(f"Cleared {fields} on interface {interface_id}")
    return db_interface


def delete_interface(db: Session, interface_id: uuid.UUID) -> None:
    try:
        deleted = base_query(db, models.Interface).filter(models.Interface.id == interface_id).update(
            {models.Interface.deleted: models.now_utc()}
        )
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting interface {interface_id}: {e}")
        db.rollback()
        raise
    if deleted:
        logger.info(f"Deleted interface {interface_id}")
