import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class AllocationConstraintBase(BaseModel):
    allocation_id: uuid.UUID
    resource_type: str
    resource_type_id: uuid.UUID
    constraint_type: str
    constraint_value: int
    derived_resource_id: uuid.UUID | None = None


class AllocationConstraintCreate(AllocationConstraintBase):
    created_by: uuid.UUID


class AllocationConstraintUpdate(BaseModel):
    allocation_id: uuid.UUID | None = None
    resource_type: str | None = None
    resource_type_id: uuid.UUID | None = None
    constraint_type: str | None = None
    constraint_value: int | None = None
    derived_resource_id: uuid.UUID | None = None


class AllocationConstraintClear(BaseModel):
    derived_resource_id: bool = False


class AllocationConstraintFilter(BaseModel):
    allocation_ids: list[uuid.UUID] | None = None
    resource_type: str | None = None
    resource_type_ids: list[uuid.UUID] | None = None
    constraint_type: str | None = None
    derived_resource_id: uuid.UUID | None = None


class AllocationConstraint(AllocationConstraintBase):
    id: uuid.UUID
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    created_by: uuid.UUID
    model_config = ConfigDict(from_attributes=True)
