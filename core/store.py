"""Single source of truth for images, settings and generation status.

Every mutation is a named action reduced into a new immutable AppState.
Listeners are called synchronously after each transition with the new state
and the action that produced it.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from core.models import (
    DEFAULT_PDF_SETTINGS,
    AppState,
    ImageInfo,
    ImageItem,
    PdfSettings,
)
from core.settings import SettingsRepository


# ---------------------------------------------------------------- Actions

@dataclass(frozen=True)
class AddImages:
    items: Tuple[ImageItem, ...]


@dataclass(frozen=True)
class RemoveImage:
    image_id: str


@dataclass(frozen=True)
class ClearImages:
    pass


@dataclass(frozen=True)
class ReorderImages:
    old_index: int
    new_index: int


@dataclass(frozen=True)
class UpdateImageInfo:
    key: str
    info: ImageInfo


@dataclass(frozen=True)
class UpdateImageThumbnail:
    key: str
    thumbnail: str


@dataclass(frozen=True)
class UpdateSettings:
    changes: Tuple[Tuple[str, Any], ...]


@dataclass(frozen=True)
class ResetSettings:
    pass


@dataclass(frozen=True)
class SetIsGenerating:
    is_generating: bool


@dataclass(frozen=True)
class SetProgress:
    progress: int


SETTINGS_ACTIONS = (UpdateSettings, ResetSettings)

Listener = Callable[[AppState, Any], None]

# ---------------------------------------------------------------- Reducer

_REDUCERS: Dict[type, Callable[[AppState, Any], AppState]] = {}


def _reducer(action_type):
    def register(fn):
        _REDUCERS[action_type] = fn
        return fn
    return register


def reduce(state: AppState, action) -> AppState:
    """Pure transition function. Unknown actions raise TypeError."""
    try:
        handler = _REDUCERS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown action: {type(action).__name__}") from None
    return handler(state, action)


@_reducer(AddImages)
def _add_images(state: AppState, action: AddImages) -> AppState:
    return replace(state, images=state.images + tuple(action.items))


@_reducer(RemoveImage)
def _remove_image(state: AppState, action: RemoveImage) -> AppState:
    images = tuple(img for img in state.images if img.id != action.image_id)
    if len(images) == len(state.images):
        return state
    return replace(state, images=images)


@_reducer(ClearImages)
def _clear_images(state: AppState, action: ClearImages) -> AppState:
    return replace(state, images=())


@_reducer(ReorderImages)
def _reorder_images(state: AppState, action: ReorderImages) -> AppState:
    count = len(state.images)
    if not (0 <= action.old_index < count and 0 <= action.new_index < count):
        return state
    images = list(state.images)
    moved = images.pop(action.old_index)
    images.insert(action.new_index, moved)
    return replace(state, images=tuple(images))


@_reducer(UpdateImageInfo)
def _update_image_info(state: AppState, action: UpdateImageInfo) -> AppState:
    return replace(state, images=tuple(
        replace(img, info=action.info) if action.key in (img.id, img.path) else img
        for img in state.images
    ))


@_reducer(UpdateImageThumbnail)
def _update_image_thumbnail(state: AppState, action: UpdateImageThumbnail) -> AppState:
    return replace(state, images=tuple(
        replace(img, thumbnail=action.thumbnail) if action.key in (img.id, img.path) else img
        for img in state.images
    ))


@_reducer(UpdateSettings)
def _update_settings(state: AppState, action: UpdateSettings) -> AppState:
    return replace(state, settings=replace(state.settings, **dict(action.changes)))


@_reducer(ResetSettings)
def _reset_settings(state: AppState, action: ResetSettings) -> AppState:
    return replace(state, settings=DEFAULT_PDF_SETTINGS)


@_reducer(SetIsGenerating)
def _set_is_generating(state: AppState, action: SetIsGenerating) -> AppState:
    if action.is_generating:
        return replace(state, is_generating=True)
    return replace(state, is_generating=False, progress=0)


@_reducer(SetProgress)
def _set_progress(state: AppState, action: SetProgress) -> AppState:
    return replace(state, progress=max(0, min(100, action.progress)))


# ---------------------------------------------------------------- Store

class AppStore:
    """Holds the current AppState and applies actions to it atomically."""

    def __init__(
        self,
        repository: Optional[SettingsRepository] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._repository = repository
        self._id_factory = id_factory
        self._listeners: List[Listener] = []
        settings = repository.load() if repository else DEFAULT_PDF_SETTINGS
        self._state = AppState(settings=settings)

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def dispatch(self, action) -> AppState:
        previous = self._state
        new_state = reduce(previous, action)
        if new_state is previous and isinstance(action, (RemoveImage, ReorderImages)):
            return previous

        self._state = new_state
        if isinstance(action, SETTINGS_ACTIONS):
            self._persist_settings(new_state.settings)
        for listener in list(self._listeners):
            try:
                listener(new_state, action)
            except Exception:
                logger.exception("Store listener {!r} failed on {}", listener, type(action).__name__)
        return new_state

    # ------------------------------------------------------------ Images

    def add_images(self, paths: List[str]) -> List[ImageItem]:
        items = tuple(ImageItem.from_path(p, self._new_id()) for p in paths)
        if items:
            self.dispatch(AddImages(items))
        return list(items)

    def remove_image(self, image_id: str):
        self.dispatch(RemoveImage(image_id))

    def clear_images(self):
        self.dispatch(ClearImages())

    def reorder_images(self, old_index: int, new_index: int):
        self.dispatch(ReorderImages(old_index, new_index))

    def update_image_info(self, path_or_id: str, info: ImageInfo):
        self.dispatch(UpdateImageInfo(path_or_id, info))

    def update_image_thumbnail(self, path_or_id: str, thumbnail: str):
        self.dispatch(UpdateImageThumbnail(path_or_id, thumbnail))

    # ------------------------------------------------------------ Settings

    def update_settings(self, **changes):
        unknown = set(changes) - set(PdfSettings.field_names())
        if unknown:
            raise TypeError(f"Unknown settings field(s): {', '.join(sorted(unknown))}")
        self.dispatch(UpdateSettings(tuple(changes.items())))

    def reset_settings(self):
        self.dispatch(ResetSettings())

    # ------------------------------------------------------------ Generation

    def set_is_generating(self, is_generating: bool):
        self.dispatch(SetIsGenerating(bool(is_generating)))

    def set_progress(self, progress):
        if math.isnan(progress):
            progress = 0
        self.dispatch(SetProgress(int(max(0, min(100, progress)))))

    # ------------------------------------------------------------ Internals

    def _new_id(self) -> Optional[str]:
        return self._id_factory() if self._id_factory else None

    def _persist_settings(self, settings: PdfSettings):
        if self._repository is None:
            return
        try:
            self._repository.save(settings)
        except Exception:
            logger.exception("Failed to persist settings")
