"""
Tenant account repository functions.

A tenant account links a tenant org to an infrastructure provider. Accounts
may be listed in order of their tenant's org names or of the contact's email
and full name; ordering on such a field joins the related table and eagerly
loads the relation.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError, InvalidParamsError
from infradb.db.pagination import OrderBy, PageInput, default_order_by, paginate_multi
from infradb.db.query_utils import apply_relations, base_query, count_by_status, filter_in

logger = logging.getLogger(__name__)

STATUS_PENDING = "Pending"
STATUS_INVITED = "Invited"
STATUS_READY = "Ready"
STATUS_ERROR = "Error"
STATUSES = (STATUS_PENDING, STATUS_INVITED, STATUS_READY, STATUS_ERROR)

RELATION_TENANT = "tenant"
RELATION_INFRASTRUCTURE_PROVIDER = "infrastructure_provider"
RELATION_TENANT_CONTACT = "tenant_contact"
RELATIONS = (RELATION_TENANT, RELATION_INFRASTRUCTURE_PROVIDER, RELATION_TENANT_CONTACT)

_CONTACT = aliased(models.User, name="tenant_contact_user")

ORDER_BY_DEFAULT = "created"
ORDER_BY_FIELDS = {
    "account_number": models.TenantAccount.account_number,
    "status": models.TenantAccount.status,
    "created": models.TenantAccount.created,
    "updated": models.TenantAccount.updated,
    "tenant_org_name": models.Tenant.org,
    "tenant_org_display_name": models.Tenant.org_display_name,
    "tenant_contact_email": _CONTACT.email,
    "tenant_contact_full_name": None,
}

# Full name sorts by first name, then last name
_FULL_NAME_PARTS = ("tenant_contact_first_name", "tenant_contact_last_name")
_ORDER_COLUMNS = {
    **{k: v for k, v in ORDER_BY_FIELDS.items() if v is not None},
    "tenant_contact_first_name": _CONTACT.first_name,
    "tenant_contact_last_name": _CONTACT.last_name,
}

_TENANT_ORDER_FIELDS = {"tenant_org_name", "tenant_org_display_name"}
_CONTACT_ORDER_FIELDS = {"tenant_contact_email", "tenant_contact_full_name"}


def create_tenant_account(db: Session, account: schemas.TenantAccountCreate) -> models.TenantAccount:
    db_account = models.TenantAccount(**account.model_dump(exclude_none=True))
    db.add(db_account)
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error creating tenant account {account.account_number}: {e}")
        db.rollback()
        raise
    logger.info(
        f"Created tenant account {db_account.id} ({db_account.account_number}) "
        f"for tenant org {db_account.tenant_org} on provider {db_account.infrastructure_provider_org}"
    )
    return get_tenant_account(db, db_account.id)


def get_tenant_account(
    db: Session,
    account_id: uuid.UUID,
    include_relations: Optional[Iterable[str]] = None,
) -> models.TenantAccount:
    q = base_query(db, models.TenantAccount).filter(models.TenantAccount.id == account_id)
    q = apply_relations(q, models.TenantAccount, include_relations, RELATIONS)
    db_account = q.first()
    if db_account is None:
        raise DoesNotExistError("TenantAccount", account_id)
    return db_account


def get_tenant_account_by_account_number(
    db: Session,
    account_number: str,
    include_relations: Optional[Iterable[str]] = None,
) -> models.TenantAccount:
    q = base_query(db, models.TenantAccount).filter(models.TenantAccount.account_number == account_number)
    q = apply_relations(q, models.TenantAccount, include_relations, RELATIONS)
    db_account = q.first()
    if db_account is None:
        raise DoesNotExistError("TenantAccount", account_number)
    return db_account


def get_tenant_account_count_by_status(
    db: Session,
    infrastructure_provider_id: Optional[uuid.UUID] = None,
    tenant_id: Optional[uuid.UUID] = None,
) -> Dict[str, int]:
    q = base_query(db, models.TenantAccount)
    if infrastructure_provider_id is not None:
        q = q.filter(models.TenantAccount.infrastructure_provider_id == infrastructure_provider_id)
    if tenant_id is not None:
        q = q.filter(models.TenantAccount.tenant_id == tenant_id)
    return count_by_status(q, models.TenantAccount.status, STATUSES)


def _filtered_query(db: Session, filters: schemas.TenantAccountFilter):
    q = base_query(db, models.TenantAccount)
    if filters.infrastructure_provider_id is not None:
        q = q.filter(models.TenantAccount.infrastructure_provider_id == filters.infrastructure_provider_id)
    q = filter_in(q, models.TenantAccount.status, filters.statuses)
    q = filter_in(q, models.TenantAccount.tenant_id, filters.tenant_ids)
    q = filter_in(q, models.TenantAccount.tenant_org, filters.tenant_orgs)
    return q


def get_tenant_account_count(db: Session, filters: Optional[schemas.TenantAccountFilter] = None) -> int:
    return _filtered_query(db, filters or schemas.TenantAccountFilter()).count()


def get_tenant_accounts(
    db: Session,
    filters: Optional[schemas.TenantAccountFilter] = None,
    page: Optional[PageInput] = None,
    include_relations: Optional[Iterable[str]] = None,
):
    page = page or PageInput()
    order_by = page.order_by or default_order_by(ORDER_BY_DEFAULT)
    if order_by.field not in ORDER_BY_FIELDS:
        raise InvalidParamsError(
            f"invalid order by field {order_by.field!r}, expected one of {sorted(ORDER_BY_FIELDS)}"
        )

    relations = list(include_relations or [])
    q = _filtered_query(db, filters or schemas.TenantAccountFilter())
    if order_by.field in _TENANT_ORDER_FIELDS:
        q = q.outerjoin(models.Tenant, models.TenantAccount.tenant_id == models.Tenant.id)
        if RELATION_TENANT not in relations:
            relations.append(RELATION_TENANT)
    elif order_by.field in _CONTACT_ORDER_FIELDS:
        q = q.outerjoin(_CONTACT, models.TenantAccount.tenant_contact_id == _CONTACT.id)
        if RELATION_TENANT_CONTACT not in relations:
            relations.append(RELATION_TENANT_CONTACT)
    q = apply_relations(q, models.TenantAccount, relations, RELATIONS)

    if order_by.field == "tenant_contact_full_name":
        order_by_list = [OrderBy(field=part, order=order_by.order) for part in _FULL_NAME_PARTS]
    else:
        order_by_list = [order_by]
    logger.debug(f"Listing tenant accounts: filters={filters!r} page={page!r}")
    return paginate_multi(q, page.offset, page.limit, order_by_list, _ORDER_COLUMNS)


def update_tenant_account(
    db: Session,
    account_id: uuid.UUID,
    account: schemas.TenantAccountUpdate,
) -> models.TenantAccount:
    db_account = get_tenant_account(db, account_id)
    changes = account.model_dump(exclude_none=True)
    if not changes:
        return db_account
    for key, value in changes.items():
        setattr(db_account, key, value)
    db_account.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error updating tenant account {account_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_account)
    logger.info(f"Updated tenant account {account_id}: {sorted(changes)}")
    return db_account


def clear_tenant_account(
    db: Session,
    account_id: uuid.UUID,
    clear: schemas.TenantAccountClear,
) -> models.TenantAccount:
    db_account = get_tenant_account(db, account_id)
    fields = [name for name, flagged in clear.model_dump().items() if flagged]
    if not fields:
        return db_account
    for name in fields:
        setattr(db_account, name, None)
    db_account.updated = models.now_utc()
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error clearing {fields} on tenant account {account_id}: {e}")
        db.rollback()
        raise
    db.refresh(db_account)
    logger.info(f"Cleared {fields} on tenant account {account_id}")
    return db_account


def delete_tenant_account(db: Session, account_id: uuid.UUID) -> None:
    try:
        deleted = base_query(db, models.TenantAccount).filter(models.TenantAccount.id == account_id).update(
            {models.TenantAccount.deleted: models.now_utc()}
        )
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Error deleting tenant account {account_id}: {e}")
        db.rollback()
        raise
    if deleted:
        logger.info(f"Deleted tenant account {account_id}")
