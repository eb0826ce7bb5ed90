"""Ports - interfaces/protocols for external dependencies."""

from .diary_repo import DiaryRepository
from .debounce_timer import DebounceTimer
from .navigator import Navigator

__all__ = [
    "DiaryRepository",
    "DebounceTimer",
    "Navigator",
]
