"""
Site repository functions.

Sites carry three JSON documents: ``location`` and ``contact`` (both
searchable and sortable) and ``config`` (feature flags, filterable).
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy import false, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import PageInput, paginate
from infradb.db.query_utils import apply_relations, base_query, dialect_name, filter_in
from infradb.db.search import search_filter

logger = logging.getLogger(__name__)

STATUS_PENDING = "Pending"
STATUS_REGISTERED = "Registered"
STATUS_ERROR = "Error"
STATUS_DELETING = "Deleting"

RELATIONS = ("infrastructure_provider",)

_LOCATION_CITY = models.Site.location["city"].as_string()
_LOCATION_STATE = models.Site.location["state"].as_string()
_LOCATION_COUNTRY = models.Site.location["country"].as_string()
_CONTACT_EMAIL = models.Site.contact["email"].as_string()

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "name": models.Site.name,
    "display_name": models.Site.display_name,
    "status": models.Site.status,
    "created": models.Site.created,
    "updated": models.Site.updated,
    "location": _LOCATION_CITY,
    "contact": _CONTACT_EMAIL,
}

_SEARCH_COLUMNS = (
    models.Site.name,
    models.Site.display_name,
    models.Site.description,
    models.Site.status,
    _LOCATION_CITY,
    _LOCATION_STATE,
    _LOCATION_COUNTRY,
    _CONTACT_EMAIL,
)


def create_site(db: Session, site: schemas.SiteCreate) -> models.Site:
    db_site = models.Site(**site.model_dump(exclude_none=True))
    db.add(db_site)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating site {site.name}: {e}")
        db.rollback()
        raise
    logger.info(f"Created site {db_site.id} ({db_site.name}) for org {db_site.org}")
    return get_site(db, db_site.id)


def get_site(
    db: Session,
    site_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
    include_deleted: bool = False,
) -> models.Site:
    q = base_query(db, models.Site, include_deleted=include_deleted).filter(models.Site.id == site_id)
    q = apply_relations(q, models.Site, include_relations, RELATIONS)
    db_site = q.first()
    if db_site is None:
        raise DoesNotExistError("Site", site_id)
    return db_site


def _config_flag(key: str):
    return func.coalesce(models.Site.config[key].as_boolean(), false())


def _filtered_query(db: Session, filters: schemas.SiteFilter):
    q = base_query(db, models.Site)
    q = filter_in(q, models.Site.id, filters.site_ids)
    q = filter_in(q, models.Site.status, filters.statuses)
    if filters.name is not None:
        q = q.filter(models.Site.name == filters.name)
    if filters.org is not None:
        q = q.filter(models.Site.org == filters.org)
    if filters.infrastructure_provider_id is not None:
        q = q.filter(models.Site.infrastructure_provider_id == filters.infrastructure_provider_id)
    if filters.config is not None:
        for key, value in filters.config.model_dump(exclude_none=True).items():
            q = q.filter(_config_flag(key) == value)
    if filters.search_query is not None:
        q = q.filter(search_filter(dialect_name(db), _SEARCH_COLUMNS, filters.search_query))
    return q


def get_sites(
    db: Session,
    filters: Optional[schemas.SiteFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    q = _filtered_query(db, filters or schemas.SiteFilter())
    q = apply_relations(q, models.Site, include_relations, RELATIONS)
    logger.debug(f"Listing sites: filters={filters!r} page={page!r}")
    return paginate(q, page, ORDER_BY_FIELDS, ORDER_BY_DEFAULT)


def get_site_count(db: Session, filters: Optional[schemas.SiteFilter] = None) -> int:
    return _filtered_query(db, filters or schemas.SiteFilter()).count()


def update_site(db: Session, site_id: uuid.UUID, site: schemas.SiteUpdate) -> models.Site:
    db_site = get_site(db, site_id)
    changes = site.model_dump(exclude_none=True)
    config_changes = changes.pop("config", None)
    if not changes and not config_changes:
        return db_site
    for key, value in changes.items():
        setattr(db_site, key, value)
    if config_changes:
        # Assign a new dict so the JSON column is flagged dirty
        db_site.config = {**(db_site.config or {}), **config_changes}
    db_site.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating site {site_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_site)
    logger.info(f"Updated site {site_id}: {sorted(changes) + (['config'] if config_changes else [])}")
    return db_site


def clear_site(db: Session, site_id: uuid.UUID, clear: schemas.SiteClear) -> models.Site:
    db_site = get_site(db, site_id)
    fields = [name for name, flagged in clear.model_dump().items() if flagged]
    if not fields:
        return db_site
    for name in fields:
        setattr(db_site, name, None)
    db_site.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing {fields} on site {site_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_site)
    logger.info(f"Cleared {fields} on site {site_id}")
    return db_site


def delete_site(db: Session, site_id: uuid.UUID) -> None:
    try:
        deleted = base_query(db, models.Site).filter(models.Site.id == site_id).update(
            {models.Site.deleted: models.now_utc()}
        )
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting site {site_id}: {e}")
        db.rollback()
        raise
    if deleted:
        logger.info(f"Deleted site {site_id}")
