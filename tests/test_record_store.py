import pytest

from analytics.config import DEFAULT_CONFIG
from analytics.exceptions import DataUnavailableError, ImportFailedError
from analytics.filters import FilterSpec
from analytics.record_store import RecordStore
from tests.helpers import make_row


def test_loads_snapshot_from_csv(store):
    records = store.load_all_records()
    assert [record.id for record in records] == ["1", "2", "3", "4", "5", "6"]
    assert records[0].price == 12_000_000
    assert records[4].price is None


def test_snapshot_is_immutable_tuple(store):
    assert isinstance(store.snapshot(), tuple)
    assert store.snapshot() is store.snapshot()


def test_load_with_filters(store):
    assert [record.id for record in store.load_all_records(FilterSpec(city="Mumbai"))] == ["4", "5"]


def test_load_record_by_id(store):
    assert store.load_record_by_id("3").title == "Golf View Villa"
    assert store.load_record_by_id(" 3 ").id == "3"
    assert store.load_record_by_id("404") is None


def test_missing_file_is_data_unavailable(tmp_path):
    store = RecordStore(tmp_path / "missing.csv", retries=1, retry_delay=0)
    with pytest.raises(DataUnavailableError):
        store.load_all_records()


def test_import_replaces_snapshot(store, write_csv):
    store.load_all_records()
    new_path = write_csv([make_row(ID="9", Price="100", **{"Carpet Area": "10"})], name="new.csv")
    assert store.replace_from_csv(new_path) == 1
    assert [record.id for record in store.load_all_records()] == ["9"]


def test_failed_import_keeps_previous_snapshot(store, tmp_path):
    before = store.snapshot()
    empty = tmp_path / "empty.csv"
    empty.write_text("")
    with pytest.raises(ImportFailedError):
        store.replace_from_csv(empty)
    with pytest.raises(ImportFailedError):
        store.replace_from_csv(tmp_path / "missing.csv")
    assert store.snapshot() is before


def test_header_only_import_is_rejected(store, tmp_path):
    header_only = tmp_path / "header.csv"
    header_only.write_text("ID,Price\n")
    with pytest.raises(ImportFailedError):
        store.replace_from_csv(header_only)
    assert len(store.snapshot()) == 6


def test_import_is_written_to_the_store_csv(store, write_csv):
    new_path = write_csv([make_row(ID="9", Price="100", **{"Carpet Area": "10"})], name="new.csv")
    store.replace_from_csv(new_path)

    fresh = RecordStore(store.path, config=DEFAULT_CONFIG, retries=0, retry_delay=0)
    assert [record.id for record in fresh.load_all_records()] == ["9"]
    assert fresh.load_record_by_id("9").price == 100
    assert not list(store.path.parent.glob("*.tmp"))


def test_failed_import_leaves_the_csv_alone(store, tmp_path):
    with pytest.raises(ImportFailedError):
        store.replace_from_csv(tmp_path / "missing.csv")
    fresh = RecordStore(store.path, config=DEFAULT_CONFIG, retries=0, retry_delay=0)
    assert len(fresh.load_all_records()) == 6


def test_store_reloads_a_replaced_csv(store, write_csv):
    assert len(store.load_all_records()) == 6
    other = RecordStore(store.path, config=DEFAULT_CONFIG, retries=0, retry_delay=0)
    other.replace_from_csv(write_csv([make_row(ID="10", Price="500")], name="other.csv"))
    assert [record.id for record in store.load_all_records()] == ["10"]


def test_unreadable_reload_keeps_previous_snapshot(store):
    before = store.snapshot()
    store.path.write_text("")
    assert store.snapshot() is before
    assert store.reload() is before
