"""Reusable UI components."""

from ui.components.multi_drop_zone import MultiDropZone
from ui.components.image_list_widget import ImageListWidget
from ui.components.progress_widget import ProgressWidget
