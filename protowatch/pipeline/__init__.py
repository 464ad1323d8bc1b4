"""Watch/dispatch pipeline and the shared status surface."""

from .status import INITIAL_STATUS, StatusBoard
from .watcher import PipelineState, WatchPipeline

__all__ = ["INITIAL_STATUS", "PipelineState", "StatusBoard", "WatchPipeline"]
