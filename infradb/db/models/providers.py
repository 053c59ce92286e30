import uuid
from sqlalchemy import Column, String, DateTime, Text, Index
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class InfrastructureProvider(Base):
    __tablename__ = 'infrastructure_provider'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    org = Column(String, nullable=False)
    org_display_name = Column(String, nullable=True)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)

    __table_args__ = (
        Index('ix_infrastructure_provider_org', 'org'),
    )


class Tenant(Base):
    __tablename__ = 'tenant'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    org = Column(String, nullable=False)
    org_display_name = Column(String, nullable=True)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
    deleted = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), nullable=True)

    __table_args__ = (
        Index('ix_tenant_org', 'org'),
    )


class User(Base):
    __tablename__ = 'user'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    auxiliary_id = Column(String, nullable=True, unique=True)
    email = Column(Text, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    created = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated = Column(DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc)
