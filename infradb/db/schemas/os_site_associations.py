import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class OperatingSystemSiteAssociationBase(BaseModel):
    operating_system_id: uuid.UUID
    site_id: uuid.UUID
    version: str | None = None
    status: str


class OperatingSystemSiteAssociationCreate(OperatingSystemSiteAssociationBase):
    created_by: uuid.UUID


class OperatingSystemSiteAssociationUpdate(BaseModel):
    operating_system_id: uuid.UUID | None = None
    site_id: uuid.UUID | None = None
    version: str | None = None
    status: str | None = None
    is_missing_on_site: bool | None = None


class OperatingSystemSiteAssociationClear(BaseModel):
    version: bool = False


class OperatingSystemSiteAssociationFilter(BaseModel):
    operating_system_ids: list[uuid.UUID] | None = None
    site_ids: list[uuid.UUID] | None = None
    versions: list[str] | None = None
    statuses: list[str] | None = None


class OperatingSystemSiteAssociation(OperatingSystemSiteAssociationBase):
    id: uuid.UUID
    is_missing_on_site: bool
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    created_by: uuid.UUID
    model_config = ConfigDict(from_attributes=True)
