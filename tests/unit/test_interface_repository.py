import uuid

import pytest

from infradb.db import schemas
from infradb.db.errors import DoesNotExistError, InvalidParamsError
from infradb.db.repositories import interfaces as repo


def _payload(instance, user_id, **overrides):
    values = dict(instance_id=instance.id, status=repo.STATUS_PENDING, created_by=user_id)
    values.update(overrides)
    return schemas.InterfaceCreate(**values)


def test_create_interfaces_preserves_input_order(db, instance, subnet, user_id):
    payloads = [_payload(instance, user_id, subnet_id=subnet.id, device=f"eth{i}", device_instance=i) for i in range(5)]
    created = repo.create_interfaces(db, payloads)
    assert [c.device for c in created] == [f"eth{i}" for i in range(5)]
    assert len({c.id for c in created}) == 5


def test_create_interfaces_empty_batch(db):
    assert repo.create_interfaces(db, []) == []


def test_create_interfaces_batch_limit(db, instance, user_id, monkeypatch):
    monkeypatch.setenv("INFRADB_MAX_BATCH_ITEMS", "2")
    payloads = [_payload(instance, user_id) for _ in range(3)]
    with pytest.raises(InvalidParamsError):
        repo.create_interfaces(db, payloads)


def test_create_interface_single(db, instance, user_id):
    interface = repo.create_interface(db, _payload(instance, user_id, is_physical=True))
    assert interface.is_physical is True
    assert interface.ip_addresses is None


def test_update_clear_delete_interface(db, instance, subnet, user_id):
    interface = repo.create_interface(db, _payload(instance, user_id, subnet_id=subnet.id, device="eth0"))
    updated = repo.update_interface(
        db,
        interface.id,
        schemas.InterfaceUpdate(status=repo.STATUS_READY, mac_address="aa:bb:cc:dd:ee:ff", ip_addresses=["10.0.0.9"]),
    )
    assert updated.status == repo.STATUS_READY
    assert updated.ip_addresses == ["10.0.0.9"]

    cleared = repo.clear_interface(db, interface.id, schemas.InterfaceClear(mac_address=True, ip_addresses=True))
    assert cleared.mac_address is None
    assert cleared.ip_addresses is None
    assert cleared.device == "eth0"

    repo.delete_interface(db, interface.id)
    with pytest.raises(DoesNotExistError):
        repo.get_interface(db, interface.id)


def test_get_interfaces_filters(db, instance, subnet, user_id):
    a, b = repo.create_interfaces(
        db,
        [
            _payload(instance, user_id, subnet_id=subnet.id, is_physical=True, device="eth0"),
            _payload(instance, user_id, device="eth1", status=repo.STATUS_READY),
        ],
    )
    repo.update_interface(db, b.id, schemas.InterfaceUpdate(ip_addresses=["10.1.1.1"]))

    rows, total = repo.get_interfaces(db, schemas.InterfaceFilter(instance_ids=[instance.id]))
    assert total == 2

    rows, _ = repo.get_interfaces(db, schemas.InterfaceFilter(subnet_id=subnet.id))
    assert [r.id for r in rows] == [a.id]

    rows, _ = repo.get_interfaces(db, schemas.InterfaceFilter(is_physical=False))
    assert [r.id for r in rows] == [b.id]

    rows, _ = repo.get_interfaces(db, schemas.InterfaceFilter(statuses=[repo.STATUS_READY]))
    assert [r.id for r in rows] == [b.id]

    rows, _ = repo.get_interfaces(db, schemas.InterfaceFilter(ip_addresses=["10.1.1.1"]))
    assert [r.id for r in rows] == [b.id]

    rows, total = repo.get_interfaces(db, schemas.InterfaceFilter(instance_ids=[uuid.uuid4()]))
    assert total == 0


def test_get_interface_relations(db, instance, subnet, user_id):
    interface = repo.create_interface(db, _payload(instance, user_id, subnet_id=subnet.id))
    fetched = repo.get_interface(db, interface.id, include_relations=["instance", "subnet"])
    assert fetched.instance.name == "instance-a"
    assert fetched.subnet.name == "subnet-a"
