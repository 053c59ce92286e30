import uuid
from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict


class SkuBase(BaseModel):
    site_id: uuid.UUID
    device_type: str | None = None
    # Component inventory document as reported by the site (cpus, gpus, memory, ...)
    components: dict[str, Any] | None = None


class SkuCreate(SkuBase):
    id: str
    associated_machine_ids: list[str] | None = None


class SkuUpdate(BaseModel):
    device_type: str | None = None
    components: dict[str, Any] | None = None
    # An empty list clears the associations
    associated_machine_ids: list[str] | None = None


class SkuClear(BaseModel):
    device_type: bool = False
    components: bool = False


class SkuFilter(BaseModel):
    site_ids: list[uuid.UUID] | None = None
    sku_ids: list[str] | None = None
    device_types: list[str] | None = None
    associated_machine_ids: list[str] | None = None


class Sku(SkuBase):
    id: str
    associated_machines: list[str]
    created: datetime
    updated: datetime
    model_config = ConfigDict(from_attributes=True)
