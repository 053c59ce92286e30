"""
Operating system / site association repository functions.

An association tracks the sync state of an operating system image on a site.
Its ``version`` is a digest of the image parameters, recomputed by
:func:`generate_and_update_version` whenever the operating system changes.
"""
from __future__ import annotations

import hashlib
import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, filter_in

logger = logging.getLogger(__name__)

STATUS_SYNCING = "Syncing"
STATUS_SYNCED = "Synced"
STATUS_ERROR = "Error"
STATUS_DELETING = "Deleting"

RELATIONS = ("operating_system", "site")

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "status": models.OperatingSystemSiteAssociation.status,
    "created": models.OperatingSystemSiteAssociation.created,
    "updated": models.OperatingSystemSiteAssociation.updated,
}

# Image parameters folded into the version digest, in order
_VERSIONED_IMAGE_FIELDS = (
    "image_url",
    "image_sha",
    "image_auth_type",
    "image_auth_token",
    "image_disk",
    "root_fs_id",
    "root_fs_label",
)


def create_os_site_association(
    db: Session,
    association: schemas.OperatingSystemSiteAssociationCreate,
) -> models.OperatingSystemSiteAssociation:
    db_ossa = models.OperatingSystemSiteAssociation(**association.model_dump(exclude_none=True))
    db.add(db_ossa)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(
            f"Error associating operating system {association.operating_system_id} with site {association.site_id}: {e}"
        )
        db.rollback()
        raise
    logger.info(f"Created operating system site association {db_ossa.id}")
    return get_os_site_association(db, db_ossa.id)


def get_os_site_association(
    db: Session,
    association_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.OperatingSystemSiteAssociation:
    q = base_query(db, models.OperatingSystemSiteAssociation).filter(
        models.OperatingSystemSiteAssociation.id == association_id
    )
    q = apply_relations(q, models.OperatingSystemSiteAssociation, include_relations, RELATIONS)
    db_ossa = q.first()
    if db_ossa is None:
        raise DoesNotExistError("OperatingSystemSiteAssociation", association_id)
    return db_ossa


def get_os_site_association_by_os_and_site(
    db: Session,
    operating_system_id: uuid.UUID,
    site_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.OperatingSystemSiteAssociation:
    q = base_query(db, models.OperatingSystemSiteAssociation).filter(
        models.OperatingSystemSiteAssociation.operating_system_id == operating_system_id,
        models.OperatingSystemSiteAssociation.site_id == site_id,
    )
    q = apply_relations(q, models.OperatingSystemSiteAssociation, include_relations, RELATIONS)
    db_ossa = q.first()
    if db_ossa is None:
        raise DoesNotExistError("OperatingSystemSiteAssociation", f"{operating_system_id}/{site_id}")
    return db_ossa


def get_os_site_associations(
    db: Session,
    filters: Optional[schemas.OperatingSystemSiteAssociationFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    filters = filters or schemas.OperatingSystemSiteAssociationFilter()
    q = base_query(db, models.OperatingSystemSiteAssociation)
    q = filter_in(q, models.OperatingSystemSiteAssociation.operating_system_id, filters.operating_system_ids)
    q = filter_in(q, models.OperatingSystemSiteAssociation.site_id, filters.site_ids)
    q = filter_in(q, models.OperatingSystemSiteAssociation.version, filters.versions)
    q = filter_in(q, models.OperatingSystemSiteAssociation.status, filters.statuses)
    q = apply_relations(q, models.OperatingSystemSiteAssociation, include_relations, RELATIONS)
    logger.debug(f"Listing operating system site associations: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def compute_version(operating_system_id: uuid.UUID, operating_system: Optional[models.OperatingSystem]) -> str:
    """SHA-1 over the operating system id and the image parameters that are set."""
    digest = hashlib.sha1(str(operating_system_id).encode())
    if operating_system is not None:
        for field in _VERSIONED_IMAGE_FIELDS:
            value = getattr(operating_system, field)
            if value is not None:
                digest.update(value.encode())
        digest.update(b"\x01" if operating_system.enable_block_storage else b"\x00")
    return digest.hexdigest()


def generate_and_update_version(db: Session, association_id: uuid.UUID) -> models.OperatingSystemSiteAssociation:
    db_ossa = get_os_site_association(db, association_id, include_relations=["operating_system"])
    version = compute_version(db_ossa.operating_system_id, db_ossa.operating_system)
    logger.debug(f"Computed version {version} for operating system site association {association_id}")
    return update_os_site_association(
        db, association_id, schemas.OperatingSystemSiteAssociationUpdate(version=version)
    )


def update_os_site_association(
    db: Session,
    association_id: uuid.UUID,
    association: schemas.OperatingSystemSiteAssociationUpdate,
) -> models.OperatingSystemSiteAssociation:
    db_ossa = get_os_site_association(db, association_id)
    changes = association.model_dump(exclude_none=True)
    if not changes:
        return db_ossa
    for key, value in changes.items():
        setattr(db_ossa, key, value)
    db_ossa.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating operating system site association {association_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_ossa)
    logger.info(f"Updated operating system site association {association_id}: {sorted(changes)}")
    return db_ossa


def clear_os_site_association(
    db: Session,
    association_id: uuid.UUID,
    clear: schemas.OperatingSystemSiteAssociationClear,
) -> models.OperatingSystemSiteAssociation:
    db_ossa = get_os_site_association(db, association_id)
    if not clear.version:
        return db_ossa
    db_ossa.version = None
    db_ossa.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing version on operating system site association {association_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_ossa)
    return db_ossa


def delete_os_site_association(db: Session, association_id: uuid.UUID) -> None:
    try:
        deleted = base_query(db, models.OperatingSystemSiteAssociation).filter(
            models.OperatingSystemSiteAssociation.id == association_id
        ).update({models.OperatingSystemSiteAssociation.deleted: models.now_utc()})
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting operating system site association {association_id}: {e}")
        db.rollback()
        raise
    if deleted:
        logger.info(f"Deleted operating system site association {association_id}")
