"""
Indexing Package - face indexing runs.

Modules:
- pipeline.py - One pass over a gallery's photos with progress callback
- state.py - Staleness check and status snapshots
"""

from .pipeline import IndexingProgress, ProgressCallback, run_indexing_pipeline
from .state import (
    STOP_MESSAGE,
    is_stale,
    stale_cutoff,
    stale_message,
    started_state,
    stopped_state,
)

__all__ = [
    # Pipeline
    "IndexingProgress",
    "ProgressCallback",
    "run_indexing_pipeline",

    # State
    "STOP_MESSAGE",
    "is_stale",
    "stale_cutoff",
    "stale_message",
    "started_state",
    "stopped_state",
]
