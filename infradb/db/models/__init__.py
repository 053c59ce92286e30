"""
Domain-split SQLAlchemy models with an aggregator.

Exposes `Base`, `now_utc`, and all ORM classes.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .providers import InfrastructureProvider, Tenant, User
from .compute import OperatingSystem, Machine, Instance
from .sites import Site, OperatingSystemSiteAssociation, SKU
from .networking import Subnet, VpcPrefix, IPBlock, Fabric, MachineInterface, Interface
from .allocations import Allocation, AllocationConstraint
from .tenants import TenantAccount

__all__ = [
    # base
    "Base",
    "now_utc",
    # providers/tenants/users
    "InfrastructureProvider",
    "Tenant",
    "User",
    "TenantAccount",
    # compute
    "OperatingSystem",
    "Machine",
    "Instance",
    # sites
    "Site",
    "OperatingSystemSiteAssociation",
    "SKU",
    # networking
    "Subnet",
    "VpcPrefix",
    "IPBlock",
    "Fabric",
    "MachineInterface",
    "Interface",
    # allocations
    "Allocation",
    "AllocationConstraint",
]
