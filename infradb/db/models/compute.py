import uuid
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class OperatingSystem(Base):
    __tablename__ = 'operating_system'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    org = Column(String, nullable=False)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=True)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=True)
    # Image based operating systems; these feed the per-site version hash
    image_url = Column(Text, nullable=True)
    image_sha = Column(String, nullable=True)
    image_auth_type = Column(String, nullable=True)
    image_auth_token = Column(Text, nullable=True)
    image_disk = Column(String, nullable=True)
    root_fs_id = Column(String, nullable=True)
    root_fs_label = Column(String, nullable=True)
    enable_block_storage = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)


class Machine(Base):
    __tablename__ = 'machine'
    # Machine ids are assigned by the site controller
    id = Column(String, primary_key=True)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=False)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    hostname = Column(String, nullable=True)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)

    site = relationship('Site')

    __table_args__ = (
        Index('ix_machine_site_id', 'site_id'),
    )


class Instance(Base):
    __tablename__ = 'instance'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=False)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    machine_id = Column(String, ForeignKey('machine.id'), nullable=True)
    operating_system_id = Column(UUID(as_uuid=True), ForeignKey('operating_system.id'), nullable=True)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)

    __table_args__ = (
        Index('ix_instance_tenant_id', 'tenant_id'),
        Index('ix_instance_site_id', 'site_id'),
    )
