"""
Tests for the data directory scan: discovery, bucketing, ordering, warnings.
"""
from conftest import write_task
from yearboard.scanner import scan_board, list_task_files
from yearboard.store import TaskFileStore


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Discovery
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_finds_top_level_and_one_subdirectory_level(data_dir):
    write_task(data_dir, "a-2026-01-01.json", {"deadline": "2026-01-01"})
    write_task(data_dir, "prog/b-2026-01-02.json", {"deadline": "2026-01-02"})
    write_task(data_dir, "prog/deeper/c-2026-01-03.json", {"deadline": "2026-01-03"})
    write_task(data_dir, "prog/readme.txt", "not json")

    names = [p.relative_to(data_dir).as_posix() for p in list_task_files(data_dir)]
    assert names == ["a-2026-01-01.json", "prog/b-2026-01-02.json"]


def test_missing_data_directory_is_a_warning(tmp_path):
    scan = scan_board(tmp_path / "nope", 2026)
    assert scan.total == 0
    assert len(scan.warnings) == 1
    assert scan.warnings[0].startswith("Data directory not found:")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Bucketing
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_items_land_in_month_week_buckets(data_dir):
    write_task(data_dir, "p/a-2026-03-07.json", {"title": "A", "deadline": "2026-03-07"})
    write_task(data_dir, "p/b-2026-03-08.json", {"title": "B", "deadline": "2026-03-08"})
    write_task(data_dir, "p/c-2026-02-28.json", {"title": "C", "deadline": "2026-02-28"})
    write_task(data_dir, "p/d-2026-12-31.json", {"title": "D", "deadline": "2026-12-31T09:00:00Z"})

    scan = scan_board(data_dir, 2026)

    assert [i.title for i in scan.bucket(3, 1)] == ["A"]
    assert [i.title for i in scan.bucket(3, 2)] == ["B"]
    assert [i.title for i in scan.bucket(2, 4)] == ["C"]
    assert [i.title for i in scan.bucket(12, 4)] == ["D"]
    assert scan.bucket(12, 4)[0].deadline == "2026-12-31"
    assert scan.total == 4
    assert scan.month_count(3) == 2


def test_all_48_buckets_exist_when_empty(data_dir):
    scan = scan_board(data_dir, 2026)
    assert len(scan.items) == 48
    assert all(bucket == [] for bucket in scan.items.values())


def test_other_years_are_skipped(data_dir):
    write_task(data_dir, "p/a-2025-03-01.json", {"deadline": "2025-03-01"})
    write_task(data_dir, "p/b-2026-03-01.json", {"deadline": "2026-03-01"})

    scan = scan_board(data_dir, 2026)
    assert scan.total == 1
    assert scan.warnings == []


def test_other_years_kept_when_filter_off(data_dir):
    write_task(data_dir, "p/a-2025-03-01.json", {"deadline": "2025-03-01"})
    write_task(data_dir, "p/b-2026-03-01.json", {"deadline": "2026-03-01"})

    scan = scan_board(data_dir, 2026, only_this_year=False)
    assert len(scan.bucket(3, 1)) == 2


def test_bucket_sorted_by_deadline_then_title(data_dir):
    write_task(data_dir, "p/1.json", {"title": "zeta", "deadline": "2026-05-03"})
    write_task(data_dir, "p/2.json", {"title": "beta", "deadline": "2026-05-05"})
    write_task(data_dir, "p/3.json", {"title": "alpha", "deadline": "2026-05-05"})
    write_task(data_dir, "p/4.json", {"title": "Omega", "deadline": "2026-05-05"})

    scan = scan_board(data_dir, 2026)
    # Plain string comparison: uppercase sorts before lowercase
    assert [i.title for i in scan.bucket(5, 1)] == ["zeta", "Omega", "alpha", "beta"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Item fields
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_title_falls_back_to_name_then_basename(data_dir):
    write_task(data_dir, "p/t.json", {"title": "From title", "name": "ignored", "deadline": "2026-01-01"})
    write_task(data_dir, "p/n.json", {"name": "From name", "deadline": "2026-01-02"})
    write_task(data_dir, "p/x-2026-01-03.json", {"title": None, "deadline": "2026-01-03"})

    titles = [i.title for i in scan_board(data_dir, 2026).bucket(1, 1)]
    assert titles == ["From title", "From name", "x-2026-01-03"]


def test_item_keeps_relative_file_and_raw_payload(data_dir):
    payload = {"name": "Review", "deadline": "2026-04-10", "status": "notDone", "program": "ops"}
    write_task(data_dir, "ops/42-2026-04-10.json", payload)

    item = scan_board(data_dir, 2026).bucket(4, 2)[0]
    assert item.file == "ops/42-2026-04-10.json"
    assert item.raw == payload
    assert item.program == "ops"


def test_programs_collected_and_sorted(data_dir):
    write_task(data_dir, "b/1.json", {"program": "beta", "deadline": "2026-01-01"})
    write_task(data_dir, "a/2.json", {"program": "alpha", "deadline": "2019-01-01"})
    write_task(data_dir, "a/3.json", {"program": "alpha", "deadline": "garbage"})
    write_task(data_dir, "c/4.json", {"program": "", "deadline": "2026-01-01"})

    assert scan_board(data_dir, 2026).programs == ["alpha", "beta"]


def test_program_zero_counts_as_empty(data_dir):
    write_task(data_dir, "a/1.json", {"program": "0", "deadline": "2026-01-01"})
    write_task(data_dir, "b/2.json", {"program": 0, "deadline": "2026-01-01"})
    write_task(data_dir, "c/3.json", {"program": "ops", "deadline": "2026-01-01"})

    scan = scan_board(data_dir, 2026)
    assert scan.programs == ["ops"]
    assert scan.total == 3


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Warnings
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_invalid_and_non_object_json_are_warnings(data_dir):
    write_task(data_dir, "p/broken.json", "{not json")
    write_task(data_dir, "p/list.json", "[1, 2, 3]")
    write_task(data_dir, "p/ok.json", {"deadline": "2026-01-01"})

    scan = scan_board(data_dir, 2026)
    assert scan.total == 1
    assert "Invalid JSON: broken.json" in scan.warnings
    assert "Invalid JSON: list.json" in scan.warnings


def test_unreadable_file_is_a_warning(data_dir):
    (data_dir / "p").mkdir()
    (data_dir / "p" / "latin1.json").write_bytes(b'{"deadline": "2026-01-01", "name": "caf\xe9"}')

    scan = scan_board(data_dir, 2026)
    assert scan.warnings == ["Could not read: latin1.json"]


def test_unparseable_deadline_is_a_warning(data_dir):
    write_task(data_dir, "p/bad.json", {"deadline": "next tuesday"})
    write_task(data_dir, "p/none.json", {"title": "no deadline at all"})

    scan = scan_board(data_dir, 2026)
    assert scan.total == 0
    assert scan.warnings == ["Invalid deadline: p/bad.json"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Round trip with the store
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_added_item_shows_up_in_its_bucket(data_dir):
    store = TaskFileStore(data_dir, clock=lambda: 1700000000)
    store.add_item("ops", "2026-09-23", "Quarterly review")

    scan = scan_board(data_dir, 2026)
    items = scan.bucket(9, 4)
    assert [i.title for i in items] == ["Quarterly review"]
    assert items[0].file == "ops/1700000000___2026-09-23-importMe.json"
    assert scan.programs == ["ops"]


def test_rescheduled_item_moves_bucket(data_dir):
    write_task(data_dir, "ops/7-2026-02-03.json", {"name": "Audit", "deadline": "2026-02-03"})
    TaskFileStore(data_dir).reschedule("ops/7-2026-02-03.json", "2026-06-16")

    scan = scan_board(data_dir, 2026)
    # Deprecated copy keeps the old date, the new copy carries the new one
    assert [i.file for i in scan.bucket(2, 1)] == ["ops/7-2026-02-03-depr.json"]
    assert [i.file for i in scan.bucket(6, 3)] == ["ops/7-2026-06-16-updateMe.json"]
