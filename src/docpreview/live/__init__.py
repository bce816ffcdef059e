"""Live updates — file watcher, SSE broadcaster and change pipeline."""

from docpreview.live.broadcaster import Broadcaster, SSEConnection
from docpreview.live.pipeline import PreviewPipeline
from docpreview.live.watcher import ChangeEvent, ProjectWatcher, categorize_change

__all__ = [
    "Broadcaster",
    "ChangeEvent",
    "PreviewPipeline",
    "ProjectWatcher",
    "SSEConnection",
    "categorize_change",
]
