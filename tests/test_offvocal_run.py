import logging

import pytest

from catalog.errors import CatalogError
from catalog.types import GLOBAL_SCOPE, CatalogItem, LibraryRoot, LibraryScope
from fakes import FakeCatalog, make_items
from offvocal.cancellation import CancellationToken
from offvocal.config import ExecutionMode, ScanConfiguration
from offvocal.run import CleanupRunner, RunStatus, run_cleanup

ROOTS = [
    LibraryRoot(name="Audiobooks", id="root-books"),
    LibraryRoot(name="Music", id="root-music"),
    LibraryRoot(name="Anime OST", id="root-ost"),
    LibraryRoot(name="Orphan", id=None),
]


def _config(mode=ExecutionMode.AUDIT, libraries=(), keywords=("karaoke", "instrumental")):
    return ScanConfiguration(execution_mode=mode, selected_libraries=tuple(libraries), keywords=tuple(keywords))


def _library():
    entries = [("root-music", item) for item in make_items(2, "karaoke", prefix="music")]
    entries += [("root-ost", item) for item in make_items(1, "karaoke", prefix="ost")]
    return FakeCatalog(entries, roots=ROOTS)


def test_no_selection_scans_the_global_scope():
    catalog = _library()

    assert CleanupRunner(catalog, _config()).resolve_scopes() == [GLOBAL_SCOPE]
    assert catalog.list_roots_calls == 0


def test_selected_library_restricts_every_query():
    catalog = _library()

    outcome = run_cleanup(catalog, _config(libraries=["Music"]))

    assert outcome.scopes == [LibraryScope.scoped("root-music")]
    assert {query.scope.parent_id for query in catalog.count_calls} == {"root-music"}
    assert outcome.matched == 2


def test_unknown_library_falls_back_to_global_scope(caplog):
    catalog = _library()

    with caplog.at_level(logging.INFO, logger="offvocal.run"):
        scopes = CleanupRunner(catalog, _config(libraries=["Nonexistent"])).resolve_scopes()

    assert scopes == [GLOBAL_SCOPE]
    assert "Nonexistent" in caplog.text


def test_scopes_follow_catalog_listing_order_and_skip_roots_without_id():
    catalog = _library()

    scopes = CleanupRunner(catalog, _config(libraries=["Anime OST", "Orphan", "Music"])).resolve_scopes()

    assert scopes == [LibraryScope.scoped("root-music"), LibraryScope.scoped("root-ost")]


def test_audit_run_logs_counts_and_keeps_everything(caplog):
    catalog = FakeCatalog.with_items(make_items(3, "karaoke"))
    seen = []

    with caplog.at_level(logging.INFO, logger="offvocal"):
        outcome = run_cleanup(catalog, _config(), progress_callback=seen.append)

    assert outcome.status is RunStatus.COMPLETED
    assert catalog.delete_calls == []
    assert "Keyword karaoke matched 3 file(s)." in caplog.messages
    assert "Keyword instrumental matched 0 file(s)." in caplog.messages
    assert "Execution mode: Audit" in caplog.messages
    assert seen[-1] == 100.0


def test_destructive_run_deletes_all_matches_and_isolates_failures():
    items = make_items(3, "karaoke")
    catalog = FakeCatalog.with_items(items, fail_delete={items[0].id})

    outcome = run_cleanup(catalog, _config(ExecutionMode.DESTRUCTIVE))

    assert outcome.status is RunStatus.COMPLETED
    assert sorted(item.id for item, _ in catalog.delete_calls) == sorted(item.id for item in items)
    assert outcome.matched == 3
    assert outcome.deleted == 2
    assert outcome.failed == 1


def test_progress_is_bounded_monotonic_and_ends_at_100():
    catalog = _library()
    seen = []

    run_cleanup(
        catalog,
        _config(libraries=["Music", "Anime OST"], keywords=("karaoke", "instrumental", "acapella")),
        progress_callback=seen.append,
    )

    assert seen
    assert all(0.0 <= value <= 100.0 for value in seen)
    assert seen == sorted(seen)
    assert seen[-1] == 100.0
    # Second scope starts at 50%: its single karaoke match reports 50 + 50 * (1/3).
    assert seen[-2] == pytest.approx(50 + 50 / 3)


def test_progress_reaches_100_even_without_matches():
    seen = []

    run_cleanup(FakeCatalog(), _config(), progress_callback=seen.append)

    assert seen == [100.0]


def test_failing_progress_sink_does_not_abort_the_run():
    def broken(value):
        raise RuntimeError("sink down")

    outcome = run_cleanup(FakeCatalog.with_items(make_items(2, "karaoke")), _config(), progress_callback=broken)

    assert outcome.status is RunStatus.COMPLETED
    assert outcome.matched == 2


def test_cancellation_mid_pagination_reports_cancelled_without_deleting(caplog):
    catalog = FakeCatalog.with_items(make_items(250, "karaoke"))
    token = CancellationToken()
    seen = []

    def on_progress(value):
        seen.append(value)
        if len(seen) == 150:
            token.set()

    with caplog.at_level(logging.WARNING, logger="offvocal.run"):
        outcome = run_cleanup(
            catalog,
            _config(ExecutionMode.DESTRUCTIVE),
            progress_callback=on_progress,
            cancellation=token,
        )

    assert outcome.status is RunStatus.CANCELLED
    assert outcome.reports == []
    assert catalog.delete_calls == []
    assert len(catalog.page_calls) == 2
    assert len(catalog.count_calls) == 1
    assert 100.0 not in seen
    assert "Cleanup cancelled" in caplog.text


def test_catalog_errors_propagate():
    catalog = FakeCatalog(fail_count=CatalogError("connection refused"))

    with pytest.raises(CatalogError):
        run_cleanup(catalog, _config())


def test_outcome_summary_lists_each_keyword():
    catalog = FakeCatalog.with_items([CatalogItem(id="1", path="/m/a.flac", name="a (karaoke)")])

    summary = run_cleanup(catalog, _config()).as_dict()

    assert summary["status"] == "completed"
    assert summary["scopes"] == ["all"]
    assert summary["matched"] == 1
    assert [entry["keyword"] for entry in summary["keywords"]] == ["karaoke", "instrumental"]


def test_failed_delete_does_not_stop_later_keywords_or_scopes(caplog):
    first = CatalogItem(id="a-karaoke", path="/music/a/song (karaoke).flac", name="song (karaoke)")
    entries = [
        ("root-a", first),
        ("root-a", CatalogItem(id="a-acapella", path="/music/a/song (acapella).flac", name="song (acapella)")),
        ("root-b", CatalogItem(id="b-karaoke", path="/music/b/tune (karaoke).flac", name="tune (karaoke)")),
        ("root-b", CatalogItem(id="b-acapella", path="/music/b/tune (acapella).flac", name="tune (acapella)")),
    ]
    roots = [LibraryRoot(name="A", id="root-a"), LibraryRoot(name="B", id="root-b")]
    catalog = FakeCatalog(entries, roots=roots, fail_delete={first.id})
    seen = []

    with caplog.at_level(logging.ERROR, logger="offvocal.gate"):
        outcome = run_cleanup(
            catalog,
            _config(ExecutionMode.DESTRUCTIVE, libraries=["A", "B"], keywords=("karaoke", "acapella")),
            progress_callback=seen.append,
        )

    assert outcome.status is RunStatus.COMPLETED
    assert [item.id for item, _ in catalog.delete_calls] == ["a-karaoke", "a-acapella", "b-karaoke", "b-acapella"]
    assert outcome.deleted == 3
    assert outcome.failed == 1
    assert f"Error deleting item: {first.id} ({first.path})" in caplog.messages
    assert seen == sorted(seen)
    assert seen[-1] == 100.0
