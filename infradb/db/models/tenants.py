import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class TenantAccount(Base):
    __tablename__ = 'tenant_account'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_number = Column(String, nullable=False, unique=True)
    tenant_id = Column(UUID(as_uuid=True), ForeignKey('tenant.id'), nullable=True)
    tenant_org = Column(String, nullable=False)
    infrastructure_provider_id = Column(UUID(as_uuid=True), ForeignKey('infrastructure_provider.id'), nullable=False)
    infrastructure_provider_org = Column(String, nullable=False)
    subscription_id = Column(String, nullable=True)
    subscription_tier = Column(String, nullable=True)
    tenant_contact_id = Column(UUID(as_uuid=True), ForeignKey('user.id'), nullable=True)
    status = Column(String, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=False)

    tenant = relationship('Tenant')
    infrastructure_provider = relationship('InfrastructureProvider')
    tenant_contact = relationship('User')

    __table_args__ = (
        Index('ix_tenant_account_infrastructure_provider_id', 'infrastructure_provider_id'),
        Index('ix_tenant_account_tenant_id', 'tenant_id'),
    )
