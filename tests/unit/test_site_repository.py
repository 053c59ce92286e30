import uuid

import pytest

from infradb.db import schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import OrderBy, PageInput
from infradb.db.repositories import sites as repo


def _create(db, provider, user_id, **overrides):
    values = dict(
        name="site",
        org=provider.org,
        infrastructure_provider_id=provider.id,
        status=repo.STATUS_PENDING,
        created_by=user_id,
    )
    values.update(overrides)
    return repo.create_site(db, schemas.SiteCreate(**values))


def test_create_site_defaults(db, provider, user_id):
    site = _create(db, provider, user_id)
    assert site.config == {"native_networking": False, "network_security_group": False, "nvlink_partition": False}
    assert site.location is None
    assert site.is_serial_console_enabled is False

    read = schemas.Site.model_validate(site)
    assert read.config.native_networking is False


def test_create_site_with_documents(db, provider, user_id):
    site = _create(
        db,
        provider,
        user_id,
        location=schemas.SiteLocation(city="Santa Clara", state="CA", country="USA"),
        contact=schemas.SiteContact(email="ops@example.com"),
    )
    assert site.location["city"] == "Santa Clara"
    assert site.contact == {"email": "ops@example.com"}


def test_get_site_include_deleted(db, provider, user_id):
    site = _create(db, provider, user_id)
    repo.delete_site(db, site.id)
    with pytest.raises(DoesNotExistError):
        repo.get_site(db, site.id)
    deleted = repo.get_site(db, site.id, include_deleted=True)
    assert deleted.deleted is not None

    with pytest.raises(DoesNotExistError):
        repo.get_site(db, uuid.uuid4(), include_deleted=True)


def test_update_site_merges_config(db, provider, user_id):
    site = _create(db, provider, user_id, config=schemas.SiteConfig(native_networking=True))
    updated = repo.update_site(
        db,
        site.id,
        schemas.SiteUpdate(status=repo.STATUS_REGISTERED, config=schemas.SiteConfigUpdate(nvlink_partition=True)),
    )
    assert updated.status == repo.STATUS_REGISTERED
    assert updated.config["native_networking"] is True
    assert updated.config["nvlink_partition"] is True
    assert updated.config["network_security_group"] is False


def test_clear_site(db, provider, user_id):
    site = _create(
        db,
        provider,
        user_id,
        description="lab",
        registration_token="tok",
        location=schemas.SiteLocation(city="Austin"),
    )
    cleared = repo.clear_site(db, site.id, schemas.SiteClear(registration_token=True, location=True))
    assert cleared.registration_token is None
    assert cleared.location is None
    assert cleared.description == "lab"


def test_get_sites_filters(db, provider, user_id):
    a = _create(db, provider, user_id, name="a", config=schemas.SiteConfig(native_networking=True))
    _create(db, provider, user_id, name="b", status=repo.STATUS_REGISTERED)

    rows, total = repo.get_sites(db, schemas.SiteFilter(infrastructure_provider_id=provider.id))
    assert total == 2

    rows, _ = repo.get_sites(db, schemas.SiteFilter(statuses=[repo.STATUS_REGISTERED]))
    assert [r.name for r in rows] == ["b"]

    rows, _ = repo.get_sites(db, schemas.SiteFilter(site_ids=[a.id]))
    assert [r.name for r in rows] == ["a"]

    rows, _ = repo.get_sites(db, schemas.SiteFilter(config=schemas.SiteConfigFilter(native_networking=True)))
    assert [r.name for r in rows] == ["a"]

    rows, _ = repo.get_sites(db, schemas.SiteFilter(config=schemas.SiteConfigFilter(native_networking=False)))
    assert [r.name for r in rows] == ["b"]

    assert repo.get_site_count(db, schemas.SiteFilter(name="a")) == 1
    assert repo.get_site_count(db) == 2


def test_get_site_count_filters_and_skips_deleted(db, provider, user_id):
    _create(db, provider, user_id, name="a", config=schemas.SiteConfig(native_networking=True))
    _create(db, provider, user_id, name="b", status=repo.STATUS_REGISTERED)
    c = _create(db, provider, user_id, name="c", status=repo.STATUS_REGISTERED, config=schemas.SiteConfig(native_networking=True))

    assert repo.get_site_count(db) == 3
    assert repo.get_site_count(db, schemas.SiteFilter(statuses=[repo.STATUS_REGISTERED])) == 2
    assert repo.get_site_count(db, schemas.SiteFilter(config=schemas.SiteConfigFilter(native_networking=True))) == 2
    assert repo.get_site_count(db, schemas.SiteFilter(statuses=[])) == 0

    repo.delete_site(db, c.id)
    assert repo.get_site_count(db) == 2
    assert repo.get_site_count(db, schemas.SiteFilter(statuses=[repo.STATUS_REGISTERED])) == 1
    assert repo.get_site_count(db, schemas.SiteFilter(config=schemas.SiteConfigFilter(native_networking=True))) == 1
    assert repo.get_site_count(db, schemas.SiteFilter(site_ids=[c.id])) == 0


def test_get_sites_search_location_and_contact(db, provider, user_id):
    _create(db, provider, user_id, name="west", location=schemas.SiteLocation(city="San Jose", country="USA"))
    _create(db, provider, user_id, name="east", contact=schemas.SiteContact(email="noc@east.example.com"))

    rows, _ = repo.get_sites(db, schemas.SiteFilter(search_query="jose"))
    assert [r.name for r in rows] == ["west"]

    rows, _ = repo.get_sites(db, schemas.SiteFilter(search_query="noc@east"))
    assert [r.name for r in rows] == ["east"]


def test_get_sites_order_by_location(db, provider, user_id):
    _create(db, provider, user_id, name="b", location=schemas.SiteLocation(city="Boston"))
    _create(db, provider, user_id, name="none")
    _create(db, provider, user_id, name="a", location=schemas.SiteLocation(city="Austin"))

    rows, _ = repo.get_sites(db, page=PageInput(order_by=OrderBy(field="location")))
    assert [r.name for r in rows] == ["a", "b", "none"]

    rows, _ = repo.get_sites(db, page=PageInput(order_by=OrderBy(field="location", order="DESC")))
    assert [r.name for r in rows] == ["b", "a", "none"]


def test_get_sites_include_provider(db, provider, user_id):
    _create(db, provider, user_id)
    rows, _ = repo.get_sites(db, include_relations=["infrastructure_provider"])
    assert rows[0].infrastructure_provider.name == "provider"
