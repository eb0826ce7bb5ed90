"""Adapters - I/O implementations of ports."""

from .diary_api import DiaryAPIAdapter
from .scheduler_timer import SchedulerDebounceTimer

__all__ = [
    "DiaryAPIAdapter",
    "SchedulerDebounceTimer",
]
