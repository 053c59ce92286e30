import uuid

import pytest

from infradb.db import models
from infradb.db.database import SessionLocal, engine


@pytest.fixture(scope="module")
def db():
    models.Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean(request):
    if "db" not in request.fixturenames:
        yield
        return
    db = request.getfixturevalue("db")
    db.rollback()
    for table in reversed(models.Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()
    yield


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def provider(db):
    p = models.InfrastructureProvider(name="provider", org="provider-org", org_display_name="Provider Org")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def tenant(db):
    t = models.Tenant(name="tenant", org="tenant-org", org_display_name="Tenant Org")
    db.add(t)
    db.commit()
    db.refresh(t)
    return t


@pytest.fixture
def site(db, provider, user_id):
    s = models.Site(
        name="site-a",
        org=provider.org,
        infrastructure_provider_id=provider.id,
        status="Registered",
        created_by=user_id,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@pytest.fixture
def machine(db, provider, site):
    m = models.Machine(id="machine-1", infrastructure_provider_id=provider.id, site_id=site.id, status="Ready")
    db.add(m)
    db.commit()
    db.refresh(m)
    return m


@pytest.fixture
def subnet(db, site, tenant):
    s = models.Subnet(name="subnet-a", site_id=site.id, tenant_id=tenant.id, ipv4_prefix="10.0.0.0", prefix_length=24, status="Ready")
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@pytest.fixture
def instance(db, site, tenant, machine):
    i = models.Instance(name="instance-a", tenant_id=tenant.id, site_id=site.id, machine_id=machine.id, status="Ready")
    db.add(i)
    db.commit()
    db.refresh(i)
    return i


@pytest.fixture
def operating_system(db, provider):
    o = models.OperatingSystem(
        name="ubuntu",
        org=provider.org,
        infrastructure_provider_id=provider.id,
        image_url="https://images.example.com/ubuntu.img",
        image_sha="abc123",
        status="Ready",
    )
    db.add(o)
    db.commit()
    db.refresh(o)
    return o


@pytest.fixture
def allocation(db, provider, tenant, site):
    a = models.Allocation(name="alloc-a", infrastructure_provider_id=provider.id, tenant_id=tenant.id, site_id=site.id, status="Registered")
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
