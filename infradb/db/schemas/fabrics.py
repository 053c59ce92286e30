import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class FabricBase(BaseModel):
    id: str
    org: str
    site_id: uuid.UUID
    infrastructure_provider_id: uuid.UUID
    status: str


class FabricCreate(FabricBase):
    pass


class FabricUpdate(BaseModel):
    infrastructure_provider_id: uuid.UUID | None = None
    status: str | None = None
    is_missing_on_site: bool | None = None


class FabricFilter(BaseModel):
    org: str | None = None
    site_id: uuid.UUID | None = None
    infrastructure_provider_id: uuid.UUID | None = None
    status: str | None = None
    ids: list[str] | None = None
    search_query: str | None = None


class Fabric(FabricBase):
    is_missing_on_site: bool
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
