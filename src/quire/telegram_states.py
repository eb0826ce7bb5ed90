"""Conversation states for Telegram bot."""

from enum import IntEnum, auto


class EditorStates(IntEnum):
    """States for the entry editing conversation."""

    EDITING = auto()
