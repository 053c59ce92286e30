import uuid
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index, Integer, Text, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc
from ..types import StringArray


class Subnet(Base):
    __tablename__ = 'subnet'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=True)
    ipv4_prefix = Column(String, nullable=True)
    prefix_length = Column(Integer, nullable=True)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)


class VpcPrefix(Base):
    __tablename__ = 'vpc_prefix'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=True)
    prefix = Column(String, nullable=False)
    prefix_length = Column(Integer, nullable=False)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)


class IPBlock(Base):
    __tablename__ = 'ip_block'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=False)
    # Set only on blocks derived for a tenant from a provider block
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=True)
    routing_type = Column(String, nullable=False)
    prefix = Column(String, nullable=False)
    prefix_length = Column(Integer, nullable=False)
    protocol_version = Column(String, nullable=False)
    full_grant = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)

    site = relationship('Site')
    infrastructure_provider = relationship('InfrastructureProvider')
    tenant = relationship('Tenant')

    __table_args__ = (
        Index('ix_ip_block_site_id', 'site_id'),
        Index('ix_ip_block_infrastructure_provider_id', 'infrastructure_provider_id'),
        Index('ix_ip_block_tenant_id', 'tenant_id'),
        CheckConstraint("routing_type in ('Public','DatacenterOnly')", name='ck_ip_block_routing_type'),
        CheckConstraint("protocol_version in ('IPv4','IPv6')", name='ck_ip_block_protocol_version'),
    )


class Fabric(Base):
    __tablename__ = 'fabric'
    # Fabric ids are only unique within a site
    id = Column(String, primary_key=True)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), primary_key=True)
    org = Column(String, nullable=False)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=False)
    status = Column(String, nullable=False)
    is_missing_on_site = Column(Boolean, nullable=False, default=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)

    site = relationship('Site')
    infrastructure_provider = relationship('InfrastructureProvider')

    __table_args__ = (
        Index('ix_fabric_infrastructure_provider_id', 'infrastructure_provider_id'),
    )


class MachineInterface(Base):
    __tablename__ = 'machine_interface'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    machine_id = Column(String, ForeignKey('machine.id'), nullable=False)
    controller_interface_id = Column(UUID(as_uuid=True), nullable=True)
    controller_segment_id = Column(UUID(as_uuid=True), nullable=True)
    attached_dpu_machine_id = Column(String, nullable=True)
    subnet_id = Column(UUID(as_uuid=True), ForeignKey('subnet.id'), nullable=True)
    hostname = Column(String, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    mac_address = Column(String, nullable=True)
    ip_addresses = Column(StringArray(), nullable=False, default=list)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)

    machine = relationship('Machine')
    subnet = relationship('Subnet')

    __table_args__ = (
        Index('ix_machine_interface_machine_id', 'machine_id'),
    )


class Interface(Base):
    __tablename__ = 'interface'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    instance_id = Column(UUID(as_uuid=True), ForeignKey('instance.id'), nullable=False)
    subnet_id = Column(UUID(as_uuid=True), ForeignKey('subnet.id'), nullable=True)
    vpc_prefix_id = Column(UUID(as_uuid=True), ForeignKey('vpc_prefix.id'), nullable=True)
    machine_interface_id = Column(UUID(as_uuid=True), ForeignKey('machine_interface.id'), nullable=True)
    device = Column(String, nullable=True)
    device_instance = Column(Integer, nullable=True)
    is_physical = Column(Boolean, nullable=False, default=False)
    virtual_function_id = Column(Integer, nullable=True)
    mac_address = Column(String, nullable=True)
    ip_addresses = Column(StringArray(), nullable=True)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=False)

    instance = relationship('Instance')
    subnet = relationship('Subnet')
    vpc_prefix = relationship('VpcPrefix')
    machine_interface = relationship('MachineInterface')

    __table_args__ = (
        Index('ix_interface_instance_id', 'instance_id'),
    )
