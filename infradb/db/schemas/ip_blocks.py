import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class IPBlockBase(BaseModel):
    name: str
    description: str | None = None
    site_id: uuid.UUID
    infrastructure_provider_id: uuid.UUID
    tenant_id: uuid.UUID | None = None
    routing_type: str
    prefix: str
    prefix_length: int
    protocol_version: str
    full_grant: bool = False
    status: str


class IPBlockCreate(IPBlockBase):
    id: uuid.UUID | None = None
    created_by: uuid.UUID | None = None


class IPBlockUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    site_id: uuid.UUID | None = None
    infrastructure_provider_id: uuid.UUID | None = None
    tenant_id: uuid.UUID | None = None
    routing_type: str | None = None
    prefix: str | None = None
    prefix_length: int | None = None
    protocol_version: str | None = None
    full_grant: bool | None = None
    status: str | None = None


class IPBlockClear(BaseModel):
    description: bool = False
    tenant_id: bool = False


class IPBlockFilter(BaseModel):
    ids: list[uuid.UUID] | None = None
    names: list[str] | None = None
    site_ids: list[uuid.UUID] | None = None
    infrastructure_provider_ids: list[uuid.UUID] | None = None
    tenant_ids: list[uuid.UUID] | None = None
    routing_types: list[str] | None = None
    prefixes: list[str] | None = None
    prefix_lengths: list[int] | None = None
    protocol_versions: list[str] | None = None
    full_grant: bool | None = None
    statuses: list[str] | None = None
    # Provider-owned blocks only (tenant_id IS NULL)
    exclude_derived: bool = False
    search_query: str | None = None


class IPBlock(IPBlockBase):
    id: uuid.UUID
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    created_by: uuid.UUID | None = None
    model_config = ConfigDict(from_attributes=True)
