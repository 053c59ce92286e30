"""
Domain-split Pydantic schemas with an aggregator.

Each entity has create, update, clear and filter inputs plus a read model.
"""

from .ip_blocks import IPBlockBase, IPBlockCreate, IPBlockUpdate, IPBlockClear, IPBlockFilter, IPBlock
from .machine_interfaces import (
    MachineInterfaceBase,
    MachineInterfaceCreate,
    MachineInterfaceUpdate,
    MachineInterfaceClear,
    MachineInterfaceFilter,
    MachineInterface,
)
from .os_site_associations import (
    OperatingSystemSiteAssociationBase,
    OperatingSystemSiteAssociationCreate,
    OperatingSystemSiteAssociationUpdate,
    OperatingSystemSiteAssociationClear,
    OperatingSystemSiteAssociationFilter,
    OperatingSystemSiteAssociation,
)
from .allocation_constraints import (
    AllocationConstraintBase,
    AllocationConstraintCreate,
    AllocationConstraintUpdate,
    AllocationConstraintClear,
    AllocationConstraintFilter,
    AllocationConstraint,
)
from .interfaces import InterfaceBase, InterfaceCreate, InterfaceUpdate, InterfaceClear, InterfaceFilter, Interface
from .fabrics import FabricBase, FabricCreate, FabricUpdate, FabricFilter, Fabric
from .sites import (
    SiteLocation,
    SiteContact,
    SiteConfig,
    SiteConfigUpdate,
    SiteConfigFilter,
    SiteBase,
    SiteCreate,
    SiteUpdate,
    SiteClear,
    SiteFilter,
    Site,
)
from .skus import SkuBase, SkuCreate, SkuUpdate, SkuClear, SkuFilter, Sku
from .tenant_accounts import (
    TenantAccountBase,
    TenantAccountCreate,
    TenantAccountUpdate,
    TenantAccountClear,
    TenantAccountFilter,
    TenantAccount,
)

__all__ = [
    # ip blocks
    "IPBlockBase", "IPBlockCreate", "IPBlockUpdate", "IPBlockClear", "IPBlockFilter", "IPBlock",
    # machine interfaces
    "MachineInterfaceBase", "MachineInterfaceCreate", "MachineInterfaceUpdate",
    "MachineInterfaceClear", "MachineInterfaceFilter", "MachineInterface",
    # os/site associations
    "OperatingSystemSiteAssociationBase", "OperatingSystemSiteAssociationCreate",
    "OperatingSystemSiteAssociationUpdate", "OperatingSystemSiteAssociationClear",
    "OperatingSystemSiteAssociationFilter", "OperatingSystemSiteAssociation",
    # allocation constraints
    "AllocationConstraintBase", "AllocationConstraintCreate", "AllocationConstraintUpdate",
    "AllocationConstraintClear", "AllocationConstraintFilter", "AllocationConstraint",
    # interfaces
    "InterfaceBase", "InterfaceCreate", "InterfaceUpdate", "InterfaceClear", "InterfaceFilter", "Interface",
    # fabrics
    "FabricBase", "FabricCreate", "FabricUpdate", "FabricFilter", "Fabric",
    # sites
    "SiteLocation", "SiteContact", "SiteConfig", "SiteConfigUpdate", "SiteConfigFilter",
    "SiteBase", "SiteCreate", "SiteUpdate", "SiteClear", "SiteFilter", "Site",
    # skus
    "SkuBase", "SkuCreate", "SkuUpdate", "SkuClear", "SkuFilter", "Sku",
    # tenant accounts
    "TenantAccountBase", "TenantAccountCreate", "TenantAccountUpdate",
    "TenantAccountClear", "TenantAccountFilter", "TenantAccount",
]
