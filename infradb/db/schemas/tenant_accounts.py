import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class TenantAccountBase(BaseModel):
    account_number: str
    tenant_id: uuid.UUID | None = None
    tenant_org: str
    infrastructure_provider_id: uuid.UUID
    infrastructure_provider_org: str
    subscription_id: str | None = None
    subscription_tier: str | None = None
    status: str


class TenantAccountCreate(TenantAccountBase):
    tenant_contact_id: uuid.UUID | None = None
    created_by: uuid.UUID


class TenantAccountUpdate(BaseModel):
    tenant_id: uuid.UUID | None = None
    subscription_id: str | None = None
    subscription_tier: str | None = None
    tenant_contact_id: uuid.UUID | None = None
    status: str | None = None


class TenantAccountClear(BaseModel):
    tenant_id: bool = False
    subscription_id: bool = False
    subscription_tier: bool = False
    tenant_contact_id: bool = False


class TenantAccountFilter(BaseModel):
    infrastructure_provider_id: uuid.UUID | None = None
    statuses: list[str] | None = None
    tenant_ids: list[uuid.UUID] | None = None
    tenant_orgs: list[str] | None = None


class TenantAccount(TenantAccountBase):
    id: uuid.UUID
    tenant_contact_id: uuid.UUID | None = None
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    created_by: uuid.UUID
    model_config = ConfigDict(from_attributes=True)
