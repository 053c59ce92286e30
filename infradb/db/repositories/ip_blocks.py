"""
IP block repository functions.

Implements create/read/update/clear/delete for IP blocks, per-status counts,
and filtered listing with free-text search.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError, InvalidParamsError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, count_by_status, dialect_name, filter_in
from infradb.db.search import search_filter

logger = logging.getLogger(__name__)

STATUS_PENDING = "Pending"
STATUS_PROVISIONING = "Provisioning"
STATUS_READY = "Ready"
STATUS_ERROR = "Error"
STATUS_DELETING = "Deleting"
STATUSES = (STATUS_PENDING, STATUS_PROVISIONING, STATUS_READY, STATUS_ERROR, STATUS_DELETING)

ROUTING_TYPE_PUBLIC = "Public"
ROUTING_TYPE_DATACENTER_ONLY = "DatacenterOnly"

PROTOCOL_VERSION_V4 = "IPv4"
PROTOCOL_VERSION_V6 = "IPv6"

RELATIONS = ("site", "infrastructure_provider", "tenant")

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "name": models.IPBlock.name,
    "prefix": models.IPBlock.prefix,
    "status": models.IPBlock.status,
    "created": models.IPBlock.created,
    "updated": models.IPBlock.updated,
}

_SEARCH_COLUMNS = (models.IPBlock.name, models.IPBlock.description, models.IPBlock.status)


def create_ip_block(db: Session, ip_block: schemas.IPBlockCreate) -> models.IPBlock:
    db_ip_block = models.IPBlock(**ip_block.model_dump(exclude_none=True))
    db.add(db_ip_block)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating IP block {ip_block.name}: {e}")
        db.rollback()
        raise
    logger.info(f"Created IP block {db_ip_block.id} ({db_ip_block.prefix}/{db_ip_block.prefix_length})")
    return get_ip_block(db, db_ip_block.id)


def get_ip_block(db: Session, ip_block_id: uuid.UUID, include_relations: Optional[Iterable[str]] = None) -> models.IPBlock:
    """Return the IP block or raise DoesNotExistError."""
    q = base_query(db, models.IPBlock).filter(models.IPBlock.id == ip_block_id)
    q = apply_relations(q, models.IPBlock, include_relations, RELATIONS)
    db_ip_block = q.first()
    if db_ip_block is None:
        raise DoesNotExistError("IPBlock", ip_block_id)
    return db_ip_block


def get_ip_block_count_by_status(
    db: Session,
    infrastructure_provider_id: Optional[uuid.UUID] = None,
    site_id: Optional[uuid.UUID] = None,
    tenant_id: Optional[uuid.UUID] = None,
) -> Dict[str, int]:
    """Count IP blocks per status, scoped by any of provider, site and tenant."""
    q = base_query(db, models.IPBlock)
    if infrastructure_provider_id is not None:
        q = q.filter(models.IPBlock.infrastructure_provider_id == infrastructure_provider_id)
    if site_id is not None:
        q = q.filter(models.IPBlock.site_id == site_id)
    if tenant_id is not None:
        q = q.filter(models.IPBlock.tenant_id == tenant_id)
    return count_by_status(q, models.IPBlock.status, STATUSES)


def get_ip_blocks(
    db: Session,
    filters: Optional[schemas.IPBlockFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    """List IP blocks matching ``filters``; returns ``(ip_blocks, total)``.

    ``exclude_derived`` restricts the result to provider-owned blocks and so
    cannot be combined with ``tenant_ids``.
    """
    filters = filters or schemas.IPBlockFilter()
    if filters.exclude_derived and filters.tenant_ids is not None:
        raise InvalidParamsError("exclude_derived cannot be combined with tenant_ids")

    q = base_query(db, models.IPBlock)
    q = filter_in(q, models.IPBlock.id, filters.ids)
    q = filter_in(q, models.IPBlock.name, filters.names)
    q = filter_in(q, models.IPBlock.site_id, filters.site_ids)
    q = filter_in(q, models.IPBlock.infrastructure_provider_id, filters.infrastructure_provider_ids)
    q = filter_in(q, models.IPBlock.tenant_id, filters.tenant_ids)
    q = filter_in(q, models.IPBlock.routing_type, filters.routing_types)
    q = filter_in(q, models.IPBlock.prefix, filters.prefixes)
    q = filter_in(q, models.IPBlock.prefix_length, filters.prefix_lengths)
    q = filter_in(q, models.IPBlock.protocol_version, filters.protocol_versions)
    q = filter_in(q, models.IPBlock.status, filters.statuses)
    if filters.full_grant is not None:
        q = q.filter(models.IPBlock.full_grant == filters.full_grant)
    if filters.exclude_derived:
        q = q.filter(models.IPBlock.tenant_id.is_(None))
    if filters.search_query is not None:
        q = q.filter(search_filter(dialect_name(db), _SEARCH_COLUMNS, filters.search_query))

    q = apply_relations(q, models.IPBlock, include_relations, RELATIONS)
    logger.debug(f"Listing IP blocks: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def update_ip_block(db: Session, ip_block_id: uuid.UUID, ip_block: schemas.IPBlockUpdate) -> models.IPBlock:
    db_ip_block = get_ip_block(db, ip_block_id)
    changes = ip_block.model_dump(exclude_none=True)
    if not changes:
        return db_ip_block
    for key, value in changes.items():
        setattr(db_ip_block, key, value)
    db_ip_block.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating IP block {ip_block_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_ip_block)
    logger.info(f"Updated IP block {ip_block_id}: {sorted(changes)}")
    return db_ip_block


def clear_ip_block(db: Session, ip_block_id: uuid.UUID, clear: schemas.IPBlockClear) -> models.IPBlock:
    """Set the flagged nullable columns to NULL."""
    db_ip_block = get_ip_block(db, ip_block_id)
    fields = [name for name, flagged in clear.model_dump().items() if flagged]
    if not fields:
        return db_ip_block
    for name in fields:
        setattr(db_ip_block, name, None)
    db_ip_block.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing {fields} on IP block {ip_block_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_ip_block)
    logger.info(f"Cleared {fields} on IP block {ip_block_id}")
    return db_ip_block


def delete_ip_block(db: Session, ip_block_id: uuid.UUID) -> None:
    """Soft-delete an IP block. Deleting a missing block is not an error."""
    try:
        deleted = base_query(db, models.IPBlock).filter(models.IPBlock.id == ip_block_id).update(
            {models.IPBlock.deleted: models.now_utc()}
        )
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting IP block {ip_block_id}: {e}")
        db.rollback()
        raise
    if deleted:
        logger.info(f"Deleted IP block {ip_block_id}")
    else:
        logger.debug(f"IP block {ip_block_id} not found for delete")
