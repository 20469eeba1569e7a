"""Re-emits store transitions as a Qt signal for widgets on the GUI thread."""

from PyQt6.QtCore import QObject, pyqtSignal

from core.models import AppState
from core.store import AppStore


class StoreBridge(QObject):
    """Qt face of the AppStore.

    The store notifies on the event-loop thread; connecting widgets to
    `state_changed` gives them a queued delivery on their own thread.
    """

    state_changed = pyqtSignal(object)

    def __init__(self, store: AppStore, parent=None):
        super().__init__(parent)
        self._store = store
        self._unsubscribe = store.subscribe(self._on_transition)

    @property
    def state(self) -> AppState:
        return self._store.state

    def detach(self):
        self._unsubscribe()

    def _on_transition(self, state: AppState, action):
        self.state_changed.emit(state)
