import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class MachineInterfaceBase(BaseModel):
    machine_id: str
    controller_interface_id: uuid.UUID | None = None
    controller_segment_id: uuid.UUID | None = None
    attached_dpu_machine_id: str | None = None
    subnet_id: uuid.UUID | None = None
    hostname: str | None = None
    is_primary: bool = False
    mac_address: str | None = None
    ip_addresses: list[str] = []


class MachineInterfaceCreate(MachineInterfaceBase):
    id: uuid.UUID | None = None


class MachineInterfaceUpdate(BaseModel):
    machine_id: str | None = None
    controller_interface_id: uuid.UUID | None = None
    controller_segment_id: uuid.UUID | None = None
    attached_dpu_machine_id: str | None = None
    subnet_id: uuid.UUID | None = None
    hostname: str | None = None
    is_primary: bool | None = None
    mac_address: str | None = None
    ip_addresses: list[str] | None = None


class MachineInterfaceClear(BaseModel):
    controller_interface_id: bool = False
    controller_segment_id: bool = False
    attached_dpu_machine_id: bool = False
    subnet_id: bool = False
    hostname: bool = False
    mac_address: bool = False


class MachineInterfaceFilter(BaseModel):
    machine_ids: list[str] | None = None
    controller_interface_ids: list[uuid.UUID] | None = None
    controller_segment_ids: list[uuid.UUID] | None = None
    attached_dpu_machine_ids: list[str] | None = None
    subnet_ids: list[uuid.UUID] | None = None
    hostnames: list[str] | None = None
    is_primary: bool | None = None
    mac_addresses: list[str] | None = None
    ip_addresses: list[str] | None = None


class MachineInterface(MachineInterfaceBase):
    id: uuid.UUID
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
