import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class SiteLocation(BaseModel):
    city: str | None = None
    state: str | None = None
    country: str | None = None


class SiteContact(BaseModel):
    email: str | None = None


class SiteConfig(BaseModel):
    native_networking: bool = False
    network_security_group: bool = False
    nvlink_partition: bool = False
    max_network_security_group_rule_count: int | None = None


class SiteConfigUpdate(BaseModel):
    native_networking: bool | None = None
    network_security_group: bool | None = None
    nvlink_partition: bool | None = None
    max_network_security_group_rule_count: int | None = None


class SiteConfigFilter(BaseModel):
    native_networking: bool | None = None
    network_security_group: bool | None = None
    nvlink_partition: bool | None = None


class SiteBase(BaseModel):
    name: str
    display_name: str | None = None
    description: str | None = None
    org: str
    infrastructure_provider_id: uuid.UUID
    site_controller_version: str | None = None
    site_agent_version: str | None = None
    registration_token: str | None = None
    registration_token_expiration: datetime | None = None
    is_infinity_enabled: bool = False
    serial_console_hostname: str | None = None
    is_serial_console_enabled: bool = False
    serial_console_idle_timeout: int | None = None
    serial_console_max_session_length: int | None = None
    location: SiteLocation | None = None
    contact: SiteContact | None = None
    status: str


class SiteCreate(SiteBase):
    id: uuid.UUID | None = None
    config: SiteConfig = SiteConfig()
    created_by: uuid.UUID


class SiteUpdate(BaseModel):
    name: str | None = None
    display_name: str | None = None
    description: str | None = None
    org: str | None = None
    infrastructure_provider_id: uuid.UUID | None = None
    site_controller_version: str | None = None
    site_agent_version: str | None = None
    registration_token: str | None = None
    registration_token_expiration: datetime | None = None
    is_infinity_enabled: bool | None = None
    serial_console_hostname: str | None = None
    is_serial_console_enabled: bool | None = None
    serial_console_idle_timeout: int | None = None
    serial_console_max_session_length: int | None = None
    inventory_received: datetime | None = None
    location: SiteLocation | None = None
    contact: SiteContact | None = None
    status: str | None = None
    # Merged into the stored config; unset keys are kept
    config: SiteConfigUpdate | None = None


class SiteClear(BaseModel):
    display_name: bool = False
    description: bool = False
    site_controller_version: bool = False
    site_agent_version: bool = False
    registration_token: bool = False
    registration_token_expiration: bool = False
    serial_console_hostname: bool = False
    serial_console_idle_timeout: bool = False
    serial_console_max_session_length: bool = False
    location: bool = False
    contact: bool = False


class SiteFilter(BaseModel):
    name: str | None = None
    org: str | None = None
    infrastructure_provider_id: uuid.UUID | None = None
    site_ids: list[uuid.UUID] | None = None
    statuses: list[str] | None = None
    config: SiteConfigFilter | None = None
    search_query: str | None = None


class Site(SiteBase):
    id: uuid.UUID
    inventory_received: datetime | None = None
    config: SiteConfig
    created: datetime
    updated: datetime
    deleted: datetime | None = None
    created_by: uuid.UUID
    model_config = ConfigDict(from_attributes=True)
