import asyncio

from fakes import FakeBackend, FakeDialogs, RecordingNotifier, read_error

from core.config import AppConfig
from core.ingestion import IngestionPipeline
from core.notify import Severity
from core.store import AppStore


def make_pipeline(dialogs=None):
    store = AppStore()
    backend = FakeBackend()
    notifier = RecordingNotifier()
    pipeline = IngestionPipeline(store, backend, notifier, dialogs, AppConfig(thumbnail_size=64))
    return store, backend, notifier, pipeline


def test_valid_and_invalid_files():
    store, backend, notifier, pipeline = make_pipeline()

    report = asyncio.run(pipeline.ingest(["/pics/a.png", "/docs/b.txt"]))

    assert report.added == ["/pics/a.png"]
    assert [r.path for r in report.rejected] == ["/docs/b.txt"]

    images = store.state.images
    assert len(images) == 1
    assert images[0].name == "a.png"
    assert images[0].info.width == 100
    assert images[0].thumbnail == "data:image/png;base64,/pics/a.png"

    warnings = notifier.of(Severity.WARNING)
    assert len(warnings) == 1
    assert warnings[0].description.startswith("b.txt: ")

    successes = notifier.of(Severity.SUCCESS)
    assert len(successes) == 1
    assert successes[0].description == "Added: 1"


def test_validation_called_once_and_enrichment_in_order():
    store, backend, notifier, pipeline = make_pipeline()
    asyncio.run(pipeline.ingest(["/a.png", "/b.jpg"]))

    assert backend.calls == [
        ("validate_images", ["/a.png", "/b.jpg"]),
        ("get_image_info", "/a.png"),
        ("get_image_thumbnail", "/a.png", 64),
        ("get_image_info", "/b.jpg"),
        ("get_image_thumbnail", "/b.jpg", 64),
    ]


def test_items_are_added_before_enrichment():
    store, backend, notifier, pipeline = make_pipeline()
    snapshots = []
    store.subscribe(lambda state, action: snapshots.append(state))

    asyncio.run(pipeline.ingest(["/a.png", "/b.png"]))

    first = snapshots[0]
    assert [i.name for i in first.images] == ["a.png", "b.png"]
    assert all(i.info is None for i in first.images)


def test_enrichment_failures_are_skipped():
    store, backend, notifier, pipeline = make_pipeline()
    backend.info_errors["/a.png"] = read_error("/a.png")
    backend.thumbnail_errors["/b.png"] = read_error("/b.png")

    report = asyncio.run(pipeline.ingest(["/a.png", "/b.png", "/c.png"]))

    a, b, c = store.state.images
    assert a.info is None and a.thumbnail is not None
    assert b.info is not None and b.thumbnail is None
    assert c.info is not None and c.thumbnail is not None
    assert report.enrichment_failures == ["/a.png", "/b.png"]
    assert notifier.of(Severity.ERROR) == []
    assert notifier.of(Severity.SUCCESS)[0].description == "Added: 3"


def test_validation_failure_leaves_store_untouched():
    store, backend, notifier, pipeline = make_pipeline()
    backend.validate_error = RuntimeError("backend unavailable")

    report = asyncio.run(pipeline.ingest(["/a.png"]))

    assert report.added == []
    assert store.state.images == ()
    errors = notifier.of(Severity.ERROR)
    assert len(errors) == 1
    assert errors[0].description == "backend unavailable"
    assert notifier.of(Severity.SUCCESS) == []


def test_all_invalid_adds_nothing_and_sends_no_summary():
    store, backend, notifier, pipeline = make_pipeline()
    asyncio.run(pipeline.ingest(["/a.txt", "/b.pdf"]))

    assert store.state.images == ()
    assert len(notifier.of(Severity.WARNING)) == 2
    assert notifier.of(Severity.SUCCESS) == []
    assert backend.called("get_image_info") == []


def test_picker_cancel_is_silent():
    for result in (None, []):
        store, backend, notifier, pipeline = make_pipeline(FakeDialogs(images=result))
        assert asyncio.run(pipeline.ingest_from_picker()) is None
        assert backend.calls == []
        assert notifier.notifications == []


def test_picker_failure_notifies():
    dialogs = FakeDialogs()
    dialogs.error = OSError("portal not available")
    store, backend, notifier, pipeline = make_pipeline(dialogs)

    assert asyncio.run(pipeline.ingest_from_picker()) is None
    assert notifier.of(Severity.ERROR)[0].message == "Failed to select files"
    assert store.state.images == ()


def test_picker_results_are_ingested():
    store, backend, notifier, pipeline = make_pipeline(FakeDialogs(images=["/x.gif", "/y.tif"]))
    report = asyncio.run(pipeline.ingest_from_picker())
    assert report.added == ["/x.gif", "/y.tif"]
    assert store.state.image_count == 2
