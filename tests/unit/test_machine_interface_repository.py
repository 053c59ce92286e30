import uuid

import pytest

from infradb.db import models, schemas
from infradb.db.errors import DoesNotExistError
from infradb.db.pagination import OrderBy, PageInput
from infradb.db.repositories import machine_interfaces as repo


def _create(db, machine, **overrides):
    values = dict(machine_id=machine.id, hostname="host-a", mac_address="00:11:22:33:44:55")
    values.update(overrides)
    return repo.create_machine_interface(db, schemas.MachineInterfaceCreate(**values))


def test_create_defaults(db, machine):
    mi = _create(db, machine)
    assert mi.is_primary is False
    assert mi.ip_addresses == []
    assert mi.subnet_id is None


def test_update_and_clear_machine_interface(db, machine, subnet):
    mi = _create(db, machine, subnet_id=subnet.id, attached_dpu_machine_id="dpu-1")
    updated = repo.update_machine_interface(
        db, mi.id, schemas.MachineInterfaceUpdate(is_primary=True, ip_addresses=["10.0.0.5"])
    )
    assert updated.is_primary is True
    assert updated.ip_addresses == ["10.0.0.5"]
    assert updated.hostname == "host-a"

    cleared = repo.clear_machine_interface(
        db, mi.id, schemas.MachineInterfaceClear(subnet_id=True, attached_dpu_machine_id=True)
    )
    assert cleared.subnet_id is None
    assert cleared.attached_dpu_machine_id is None
    assert cleared.mac_address == "00:11:22:33:44:55"


def test_get_machine_interfaces_filters(db, machine, subnet):
    a = _create(db, machine, hostname="a", is_primary=True, ip_addresses=["10.0.0.1", "10.0.0.2"])
    _create(db, machine, hostname="b", subnet_id=subnet.id, ip_addresses=["10.0.0.3"])

    rows, total = repo.get_machine_interfaces(db, schemas.MachineInterfaceFilter(machine_ids=[machine.id]))
    assert total == 2

    rows, _ = repo.get_machine_interfaces(db, schemas.MachineInterfaceFilter(is_primary=True))
    assert [r.id for r in rows] == [a.id]

    rows, _ = repo.get_machine_interfaces(db, schemas.MachineInterfaceFilter(subnet_ids=[subnet.id]))
    assert [r.hostname for r in rows] == ["b"]

    rows, _ = repo.get_machine_interfaces(db, schemas.MachineInterfaceFilter(ip_addresses=["10.0.0.2", "192.168.1.1"]))
    assert [r.hostname for r in rows] == ["a"]

    rows, total = repo.get_machine_interfaces(db, schemas.MachineInterfaceFilter(ip_addresses=[]))
    assert total == 0


def test_get_machine_interfaces_order_by_hostname(db, machine):
    for hostname in ("b", "c", "a"):
        _create(db, machine, hostname=hostname)
    rows, _ = repo.get_machine_interfaces(db, page=PageInput(order_by=OrderBy(field="hostname")))
    assert [r.hostname for r in rows] == ["a", "b", "c"]


def test_get_machine_interface_with_machine_relation(db, machine):
    mi = _create(db, machine)
    fetched = repo.get_machine_interface(db, mi.id, include_relations=["machine"])
    assert fetched.machine.id == machine.id


def test_soft_delete_then_purge(db, machine):
    mi = _create(db, machine)
    repo.delete_machine_interface(db, mi.id)
    with pytest.raises(DoesNotExistError):
        repo.get_machine_interface(db, mi.id)
    assert db.query(models.MachineInterface).filter(models.MachineInterface.id == mi.id).count() == 1

    repo.delete_machine_interface(db, mi.id, purge=True)
    assert db.query(models.MachineInterface).filter(models.MachineInterface.id == mi.id).count() == 0


def test_delete_missing_machine_interface_is_noop(db):
    repo.delete_machine_interface(db, uuid.uuid4())
    repo.delete_machine_interface(db, uuid.uuid4(), purge=True)
