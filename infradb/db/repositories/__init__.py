"""
Per-entity repository modules for database access.

Every module exposes plain functions taking a ``Session`` first. They flush
but never commit; wrap calls in :func:`infradb.db.database.transaction` or
commit on the session yourself.
"""

from . import (  # noqa: F401
    allocation_constraints,
    fabrics,
    interfaces,
    ip_blocks,
    machine_interfaces,
    os_site_associations,
    sites,
    skus,
    tenant_accounts,
)
