import uuid
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc
from ..types import StringArray


class Site(Base):
    __tablename__ = 'site'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    org = Column(String, nullable=False)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=False)
    site_controller_version = Column(String, nullable=True)
    site_agent_version = Column(String, nullable=True)
    registration_token = Column(String, nullable=True)
    registration_token_expiration = Column(DateTime(timezone=True), nullable=True)
    is_infinity_enabled = Column(Boolean, nullable=False, default=False)
    serial_console_hostname = Column(String, nullable=True)
    is_serial_console_enabled = Column(Boolean, nullable=False, default=False)
    serial_console_idle_timeout = Column(Integer, nullable=True)
    serial_console_max_session_length = Column(Integer, nullable=True)
    inventory_received = Column(DateTime(timezone=True), nullable=True)
    location = Column(JSONB(none_as_null=True), nullable=True)  # {"city", "state", "country"}
    contact = Column(JSONB(none_as_null=True), nullable=True)  # {"email"}
    config = Column(JSONB, nullable=False, default=dict)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=False)

    infrastructure_provider = relationship('InfrastructureProvider')

    __table_args__ = (
        Index('ix_site_infrastructure_provider_id', 'infrastructure_provider_id'),
        Index('ix_site_org', 'org'),
        Index('ix_site_status', 'status'),
    )


class OperatingSystemSiteAssociation(Base):
    __tablename__ = 'operating_system_site_association'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    operating_system_id = Column(UUID(as_uuid=True), ForeignKey('operating_system.id'), nullable=False)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    version = Column(String, nullable=True)
    status = Column(String, nullable=False)
    is_missing_on_site = Column(Boolean, nullable=False, default=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=False)

    operating_system = relationship('OperatingSystem')
    site = relationship('Site')

    __table_args__ = (
        Index('ix_os_site_association_operating_system_id', 'operating_system_id'),
        Index('ix_os_site_association_site_id', 'site_id'),
    )


class SKU(Base):
    __tablename__ = 'sku'
    # Supplied by the site controller, never generated here
    id = Column(String, primary_key=True)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    device_type = Column(String, nullable=True)
    components = Column(JSONB(none_as_null=True), nullable=True)
    associated_machines = Column(StringArray(), nullable=False, default=list)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)

    site = relationship('Site')

    __table_args__ = (
        Index('ix_sku_site_id', 'site_id'),
    )
