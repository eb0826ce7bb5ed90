"""Functional core - pure business logic with no I/O."""

from .draft import DiaryEntry, Draft, SaveStatus, today_in
from .entries import format_entry_date, group_by_date, preview, strip_html

__all__ = [
    # Drafts
    "DiaryEntry",
    "Draft",
    "SaveStatus",
    "today_in",
    # Listing
    "format_entry_date",
    "group_by_date",
    "preview",
    "strip_html",
]
