import itertools

import pytest

from core.models import (
    DEFAULT_PDF_SETTINGS,
    AppState,
    FitMode,
    ImageInfo,
    ImageItem,
    Orientation,
    PageSize,
    PdfSettings,
)
from core.store import (
    AddImages,
    AppStore,
    ReorderImages,
    SetProgress,
    UpdateSettings,
    reduce,
)


def make_store(**kwargs):
    counter = itertools.count(1)
    return AppStore(id_factory=lambda: f"id{next(counter)}", **kwargs)


class RecordingRepository:
    def __init__(self, initial=DEFAULT_PDF_SETTINGS):
        self.initial = initial
        self.saved = []

    def load(self):
        return self.initial

    def save(self, settings):
        self.saved.append(settings)


def test_add_images_appends_in_order_with_names():
    store = make_store()
    store.add_images(["/photos/a.png", "C:\\pics\\b.jpg"])
    store.add_images(["/photos/c.gif"])

    state = store.state
    assert [i.id for i in state.images] == ["id1", "id2", "id3"]
    assert [i.name for i in state.images] == ["a.png", "b.jpg", "c.gif"]
    assert all(i.info is None and i.thumbnail is None for i in state.images)


def test_add_images_allows_duplicate_paths():
    store = make_store()
    store.add_images(["/a.png", "/a.png"])
    assert store.state.image_count == 2
    assert len({i.id for i in store.state.images}) == 2


def test_generated_ids_are_unique():
    store = AppStore()
    items = store.add_images(["/a.png"] * 50)
    assert len({i.id for i in items}) == 50
    assert all(i.id.startswith("img-") for i in items)


def test_remove_image_and_unknown_id_is_silent():
    store = make_store()
    store.add_images(["/a.png", "/b.png"])
    seen = []
    store.subscribe(lambda state, action: seen.append(action))

    store.remove_image("id1")
    assert [i.name for i in store.state.images] == ["b.png"]

    before = store.state
    store.remove_image("nope")
    assert store.state is before
    assert len(seen) == 1


def test_clear_images_keeps_settings():
    store = make_store()
    store.update_settings(page_size=PageSize.A3)
    store.add_images(["/a.png"])
    store.clear_images()
    assert store.state.images == ()
    assert store.state.settings.page_size == PageSize.A3


@pytest.mark.parametrize(
    "old, new, expected",
    [
        (0, 2, ["b", "c", "a", "d"]),
        (3, 0, ["d", "a", "b", "c"]),
        (1, 1, ["a", "b", "c", "d"]),
    ],
)
def test_reorder_moves_single_item(old, new, expected):
    store = make_store()
    store.add_images([f"/{n}" for n in "abcd"])
    store.reorder_images(old, new)
    assert [i.name for i in store.state.images] == expected


@pytest.mark.parametrize("old, new", [(-1, 0), (0, 4), (5, 1)])
def test_reorder_out_of_range_is_noop(old, new):
    store = make_store()
    store.add_images(["/a", "/b", "/c", "/d"])
    seen = []
    store.subscribe(lambda state, action: seen.append(action))
    before = store.state

    store.reorder_images(old, new)

    assert store.state is before
    assert seen == []


def test_update_info_and_thumbnail_by_path_or_id():
    store = make_store()
    store.add_images(["/a.png", "/b.png", "/a.png"])
    info = ImageInfo(10, 20, "PNG", 99)

    store.update_image_info("/a.png", info)
    store.update_image_thumbnail("id2", "data:image/png;base64,xx")

    images = store.state.images
    assert images[0].info == info and images[2].info == info
    assert images[1].info is None
    assert images[1].thumbnail == "data:image/png;base64,xx"
    assert images[0].thumbnail is None


def test_update_for_missing_image_changes_nothing():
    store = make_store()
    store.add_images(["/a.png"])
    store.update_image_info("/gone.png", ImageInfo(1, 1, "PNG", 1))
    assert store.state.images[0].info is None


def test_update_settings_is_partial_and_coerces_strings():
    store = make_store()
    store.update_settings(orientation="Landscape")
    store.update_settings(fit_mode=FitMode.FILL)

    settings = store.state.settings
    assert settings.orientation == Orientation.LANDSCAPE
    assert settings.fit_mode == FitMode.FILL
    assert settings.page_size == PageSize.A4


def test_update_settings_rejects_unknown_field():
    store = make_store()
    with pytest.raises(TypeError):
        store.update_settings(colour="blue")


def test_reset_settings_restores_defaults():
    store = make_store()
    store.update_settings(page_size=PageSize.CUSTOM, custom_width=100.0, custom_height=50.0)
    store.reset_settings()
    assert store.state.settings == DEFAULT_PDF_SETTINGS


def test_set_progress_is_clamped():
    store = make_store()
    store.set_progress(150)
    assert store.state.progress == 100
    store.set_progress(-5)
    assert store.state.progress == 0
    store.set_progress(42.7)
    assert store.state.progress == 42
    store.set_progress(float("inf"))
    assert store.state.progress == 100
    store.set_progress(float("-inf"))
    assert store.state.progress == 0
    store.set_progress(float("nan"))
    assert store.state.progress == 0


def test_clearing_generating_resets_progress():
    store = make_store()
    store.set_is_generating(True)
    store.set_progress(60)
    store.set_is_generating(False)
    assert store.state.is_generating is False
    assert store.state.progress == 0


def test_can_generate():
    store = make_store()
    assert not store.state.can_generate
    store.add_images(["/a.png"])
    assert store.state.can_generate
    store.set_is_generating(True)
    assert not store.state.can_generate


def test_listeners_receive_state_and_action_and_can_unsubscribe():
    store = make_store()
    seen = []
    unsubscribe = store.subscribe(lambda state, action: seen.append((state, action)))

    store.add_images(["/a.png"])
    unsubscribe()
    store.add_images(["/b.png"])

    assert len(seen) == 1
    state, action = seen[0]
    assert isinstance(action, AddImages)
    assert state.image_count == 1


def test_failing_listener_does_not_break_others():
    store = make_store()
    seen = []

    def broken(state, action):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(lambda state, action: seen.append(action))
    store.add_images(["/a.png"])

    assert len(seen) == 1
    assert store.state.image_count == 1


def test_identical_transition_still_notifies():
    store = make_store()
    seen = []
    store.subscribe(lambda state, action: seen.append(action))
    store.clear_images()
    assert len(seen) == 1


def test_settings_are_loaded_and_persisted_only_on_settings_actions():
    repo = RecordingRepository(initial=PdfSettings(page_size=PageSize.A5))
    store = make_store(repository=repo)
    assert store.state.settings.page_size == PageSize.A5

    store.add_images(["/a.png"])
    store.set_progress(10)
    assert repo.saved == []

    store.update_settings(fit_mode=FitMode.ORIGINAL)
    store.reset_settings()
    assert [s.fit_mode for s in repo.saved] == [FitMode.ORIGINAL, FitMode.FIT]


def test_reduce_is_pure():
    state = AppState()
    item = ImageItem.from_path("/a.png", "x")
    new_state = reduce(state, AddImages((item,)))
    assert state.images == ()
    assert new_state.images == (item,)

    assert reduce(new_state, ReorderImages(0, 3)) is new_state
    assert reduce(new_state, SetProgress(500)).progress == 100
    assert reduce(new_state, UpdateSettings((("page_size", "Legal"),))).settings.page_size == PageSize.LEGAL


def test_reduce_unknown_action():
    with pytest.raises(TypeError):
        reduce(AppState(), object())
