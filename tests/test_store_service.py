import json

import pytest

from sitedefects.core.errors import ImportFormatError, RecordNotFoundError
from sitedefects.core.schemas import DefectCreate, DefectStatus, DefectUpdate
from sitedefects.services.store_service import (
    DefectStore,
    JsonFileDefectStore,
    build_store,
    load_records,
)


@pytest.fixture
def store(make_record):
    return DefectStore([
        make_record(id="1", category="Corridor", location="Floor 2", total=16, fixed=0),
        make_record(id="2", category="Corridor", location="Floor 3", total=23, fixed=23,
                    status=DefectStatus.FIXED_WAIT_APPROVAL),
        make_record(id="3", category="Stairs", location="ST-1", total=43, fixed=0),
    ])


def test_add_uses_defaults(store):
    r = store.add(DefectCreate(location="Lobby"))
    assert r.id and r.id not in {"1", "2", "3"}
    assert r.category == "General"
    assert r.location == "Lobby"
    assert (r.total_defects, r.fixed_defects) == (0, 0)
    assert r.status is DefectStatus.PENDING
    assert store.snapshot()[-1] == r


def test_add_generates_unique_ids(store):
    ids = {store.add().id for _ in range(20)}
    assert len(ids) == 20


def test_update_changes_only_given_fields(store):
    r = store.update("3", DefectUpdate(note="scaffold removed", target_date="10/2/69"))
    assert r.note == "scaffold removed"
    assert r.target_date == "10/2/69"
    assert r.location == "ST-1"
    assert store.get("3") == r
    assert [x.id for x in store.snapshot()] == ["1", "2", "3"]


def test_update_unknown_id(store):
    with pytest.raises(RecordNotFoundError):
        store.update("nope", DefectUpdate(note="x"))


def test_set_counts_derives_status(store):
    assert store.set_counts("1", fixed=16).status is DefectStatus.COMPLETED
    assert store.set_counts("1", fixed=0).status is DefectStatus.PENDING
    # partial progress leaves the stored status alone
    assert store.set_counts("2", fixed=10).status is DefectStatus.FIXED_WAIT_APPROVAL


def test_set_counts_allows_overfix(store):
    r = store.set_counts("3", total=2, fixed=5)
    assert r.fixed_defects == 5
    assert r.status is DefectStatus.PENDING


def test_delete(store):
    store.delete("2")
    assert [r.id for r in store.snapshot()] == ["1", "3"]
    with pytest.raises(RecordNotFoundError):
        store.delete("2")


def test_rename_category(store):
    assert store.rename_category("Corridor", "Hallway") == 2
    assert [r.category for r in store.snapshot()] == ["Hallway", "Hallway", "Stairs"]
    assert store.rename_category("Missing", "X") == 0
    with pytest.raises(ValueError):
        store.rename_category("Stairs", "  ")


def test_import_replace(store, make_record):
    store.import_records([make_record(id="9")], mode="replace")
    assert [r.id for r in store.snapshot()] == ["9"]


def test_import_merge_overwrites_by_id_and_appends(store, make_record):
    count = store.import_records(
        [make_record(id="3", location="ST-1 revised"), make_record(id="4")], mode="merge"
    )
    assert count == 2
    snap = store.snapshot()
    assert [r.id for r in snap] == ["1", "2", "3", "4"]
    assert snap[2].location == "ST-1 revised"


def test_import_rejects_unknown_mode(store):
    with pytest.raises(ValueError):
        store.import_records([], mode="append")


def test_snapshot_is_isolated(store):
    snap = store.snapshot()
    snap.clear()
    assert len(store.snapshot()) == 3
    before = store.snapshot()
    store.delete("1")
    assert len(before) == 3


def test_export_records_is_camel_case(store):
    data = store.export_records()
    assert data[0]["totalDefects"] == 16
    assert data[1]["status"] == "Fixed (Wait CM)"


def test_load_records_validation():
    with pytest.raises(ImportFormatError):
        load_records({"id": "1"})
    with pytest.raises(ImportFormatError):
        load_records([{"id": "1"}])
    with pytest.raises(ImportFormatError):
        load_records([{"id": "1", "location": "L", "category": "C", "totalDefects": -4}])
    assert load_records([]) == []


def test_json_store_persists_changes(tmp_path, make_record):
    path = tmp_path / "nested" / "defects.json"
    store = JsonFileDefectStore(path, seed=[make_record(id="1", category="Roof")])
    assert json.loads(path.read_text(encoding="utf-8"))[0]["id"] == "1"

    store.rename_category("Roof", "ดาดฟ้า")
    added = store.add(DefectCreate(category="Stairs", location="ST-2", total_defects=32))

    reloaded = JsonFileDefectStore(path)
    assert [r.id for r in reloaded.snapshot()] == ["1", added.id]
    assert reloaded.get("1").category == "ดาดฟ้า"
    assert reloaded.get(added.id).total_defects == 32


class _Cfg:
    store_backend = "memory"
    seed_sample = True
    data_file = "unused.json"


def test_build_store_memory_is_seeded():
    store = build_store(_Cfg())
    assert len(store) == 34
    assert store.get("305").status is DefectStatus.FIXED_WAIT_APPROVAL


def test_build_store_json(tmp_path):
    cfg = _Cfg()
    cfg.store_backend = "json"
    cfg.seed_sample = False
    cfg.data_file = str(tmp_path / "d.json")
    store = build_store(cfg)
    assert isinstance(store, JsonFileDefectStore)
    assert store.snapshot() == []


def test_build_store_unknown_backend():
    cfg = _Cfg()
    cfg.store_backend = "sqlite"
    with pytest.raises(ValueError):
        build_store(cfg)
