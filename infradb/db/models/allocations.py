import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Allocation(Base):
    __tablename__ = 'allocation'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=False)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=False)
    site_id = Column(UUID(as_uuid=True), ForeignKey('site.id'), nullable=False)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)


class AllocationConstraint(Base):
    __tablename__ = 'allocation_constraint'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    allocation_id = Column(UUID(as_uuid=True), ForeignKey('allocation.id'), nullable=False)
    resource_type = Column(String, nullable=False)  # InstanceType|IPBlock
    resource_type_id = Column(UUID(as_uuid=True), nullable=False)
    constraint_type = Column(String, nullable=False)  # Reserved|OnDemand|Preemptible
    constraint_value = Column(Integer, nullable=False)
    # Only set for IPBlock constraints: the block carved out for the tenant
    derived_resource_id = Column(UUID(as_uuid=True), nullable=True)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=False)

    allocation = relationship('Allocation')

    __table_args__ = (
        Index('ix_allocation_constraint_allocation_id', 'allocation_id'),
        Index('ix_allocation_constraint_resource_type_id', 'resource_type_id'),
    )
