import pytest

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.repositories import fabrics as repo


def _create(db, site, provider, fabric_id="fabric-1", **overrides):
    values = dict(id=fabric_id, org=provider.org, site_id=site.id, infrastructure_provider_id=provider.id, status=repo.STATUS_PENDING)
    values.update(overrides)
    return repo.create_fabric(db, schemas.FabricCreate(**values))


def _second_site(db, provider, user_id):
    s = models.Site(name="site-b", org=provider.org, infrastructure_provider_id=provider.id, status="Registered", created_by=user_id)
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def test_fabric_ids_are_scoped_to_site(db, site, provider, user_id):
    other = _second_site(db, provider, user_id)
    first = _create(db, site, provider)
    second = _create(db, other, provider, status=repo.STATUS_READY)

    assert repo.get_fabric(db, "fabric-1", site.id).status == repo.STATUS_PENDING
    assert repo.get_fabric(db, "fabric-1", other.id).status == repo.STATUS_READY
    assert first.is_missing_on_site is False
    assert second.site_id == other.id


def test_update_fabric(db, site, provider):
    _create(db, site, provider)
    updated = repo.update_fabric(db, "fabric-1", site.id, schemas.FabricUpdate(status=repo.STATUS_READY, is_missing_on_site=True))
    assert updated.status == repo.STATUS_READY
    assert updated.is_missing_on_site is True


def test_get_fabrics_filters_and_search(db, site, provider):
    _create(db, site, provider, "fabric-east")
    _create(db, site, provider, "fabric-west", status=repo.STATUS_ERROR)

    rows, total = repo.get_fabrics(db, schemas.FabricFilter(site_id=site.id))
    assert total == 2

    rows, _ = repo.get_fabrics(db, schemas.FabricFilter(status=repo.STATUS_ERROR))
    assert [r.id for r in rows] == ["fabric-west"]

    rows, _ = repo.get_fabrics(db, schemas.FabricFilter(search_query="east"))
    assert [r.id for r in rows] == ["fabric-east"]

    rows, _ = repo.get_fabrics(db, schemas.FabricFilter(ids=["fabric-west"]), include_relations=["site"])
    assert rows[0].site.name == "site-a"


def test_delete_fabric(db, site, provider):
    _create(db, site, provider)
    repo.delete_fabric(db, "fabric-1", site.id)
    with pytest.raises(DoesNotExistError):
        repo.get_fabric(db, "fabric-1", site.id)


def test_delete_fabrics_by_site(db, site, provider, user_id):
    other = _second_site(db, provider, user_id)
    _create(db, site, provider, "a")
    _create(db, site, provider, "b")
    _create(db, other, provider, "a")

    assert repo.delete_fabrics(db, ids=["a", "b"], site_id=site.id) == 2
    rows, total = repo.get_fabrics(db)
    assert total == 1
    assert rows[0].site_id == other.id
    assert repo.delete_fabrics(db, ids=["a", "b"], site_id=site.id) == 0
