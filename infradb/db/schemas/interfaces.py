import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class InterfaceBase(BaseModel):
    instance_id: uuid.UUID
    subnet_id: uuid.UUID | None = None
    vpc_prefix_id: uuid.UUID | None = None
    machine_interface_id: uuid.UUID | None = None
    device: str | None = None
    device_instance: int | None = None
    is_physical: bool = False
    virtual_function_id: int | None = None
    status: str


class InterfaceCreate(InterfaceBase):
    created_by: uuid.UUID


class InterfaceUpdate(BaseModel):
    instance_id: uuid.UUID | None = None
    subnet_id: uuid.UUID | None = None
    vpc_prefix_id: uuid.UUID | None = None
    machine_interface_id: uuid.UUID | None = None
    device: str | None = None
    device_instance: int | None = None
    virtual_function_id: int | None = None
    mac_address: str | None = None
    ip_addresses: list[str] | None = None
    status: str | None = None


class InterfaceClear(BaseModel):
    subnet_id: bool = False
    vpc_prefix_id: bool = False
    machine_interface_id: bool = False
    device: bool = False
    device_instance: bool = False
    virtual_function_id: bool = False
    mac_address: bool = False
    ip_addresses: bool = False


class InterfaceFilter(BaseModel):
    instance_ids: list[uuid.UUID] | None = None
    subnet_id: uuid.UUID | None = None
    vpc_prefix_id: uuid.UUID | None = None
    device: str | None = None
    device_instance: int | None = None
    is_physical: bool | None = None
    statuses: list[str] | None = None
    ip_addresses: list[str] | None = None


class Interface(InterfaceBase):
    id: uuid.UUID
    mac_address: str | None = None
    ip_addresses: list[str] | None = None
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    created_by: uuid.UUID
    model_config = ConfigDict(from_attributes=True)
