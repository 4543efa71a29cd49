import logging

from catalog.types import GLOBAL_SCOPE
from fakes import FakeCatalog, make_items
from offvocal.config import ExecutionMode
from offvocal.gate import DeletionGate


def test_audit_mode_never_deletes(caplog):
    items = make_items(3, "karaoke")
    catalog = FakeCatalog.with_items(items)
    gate = DeletionGate(catalog, ExecutionMode.AUDIT)

    with caplog.at_level(logging.DEBUG, logger="offvocal.gate"):
        report = gate.process("karaoke", items, scope=GLOBAL_SCOPE)

    assert catalog.delete_calls == []
    assert report.matched == 3
    assert report.deleted == 0
    assert report.outcomes == []
    assert "Keyword karaoke matched 3 file(s)." in caplog.messages
    assert items[0].path in caplog.text


def test_destructive_mode_deletes_each_item_once_with_file_removal():
    items = make_items(4, "karaoke")
    catalog = FakeCatalog.with_items(items)

    report = DeletionGate(catalog, ExecutionMode.DESTRUCTIVE).process("karaoke", items, scope=GLOBAL_SCOPE)

    assert [item for item, _ in catalog.delete_calls] == items
    assert all(options.remove_file_from_disk for _, options in catalog.delete_calls)
    assert report.deleted == 4
    assert report.failed == []


def test_failed_delete_does_not_stop_the_rest(caplog):
    items = make_items(3, "karaoke")
    catalog = FakeCatalog.with_items(items, fail_delete={items[1].id})

    with caplog.at_level(logging.ERROR, logger="offvocal.gate"):
        report = DeletionGate(catalog, ExecutionMode.DESTRUCTIVE).process(
            "karaoke", items, scope=GLOBAL_SCOPE
        )

    assert len(catalog.delete_calls) == 3
    assert catalog.deleted_ids == [items[0].id, items[2].id]
    assert report.deleted == 2
    assert [outcome.item for outcome in report.failed] == [items[1]]
    assert "file is locked" in str(report.failed[0].error)
    assert f"Error deleting item: {items[1].id} ({items[1].path})" in caplog.messages


def test_destructive_mode_with_no_matches_is_a_no_op():
    catalog = FakeCatalog()

    report = DeletionGate(catalog, ExecutionMode.DESTRUCTIVE).process("orchestra", [], scope=GLOBAL_SCOPE)

    assert report.matched == 0
    assert catalog.delete_calls == []
