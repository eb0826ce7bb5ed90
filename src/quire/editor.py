"""Editing session wiring shared by the CLI and Telegram hosts."""

import logging
from typing import Callable

from .adapters.diary_api import DiaryAPIAdapter
from .autosave import AutosaveController
from .config import Config, Tokens
from .core.draft import Draft, SaveStatus
from .errors import DiaryError
from .ports.debounce_timer import DebounceTimer
from .ports.diary_repo import DiaryRepository
from .ports.navigator import Navigator

logger = logging.getLogger(__name__)


def get_repository(config: Config, tokens: Tokens | None = None) -> DiaryAPIAdapter:
    """Build the diary API client from config and the stored token."""
    return DiaryAPIAdapter(config=config, tokens=tokens or Tokens.load())


def open_session(
    repo: DiaryRepository,
    timer: DebounceTimer,
    navigator: Navigator,
    config: Config,
    entry_id: int | None = None,
    on_status: Callable[[SaveStatus], None] | None = None,
) -> AutosaveController | None:
    """
    Start an editing session on a blank draft or an existing entry.

    If the entry can't be fetched the user is told, sent back to the
    list, and None is returned.
    """
    controller = AutosaveController(
        repo,
        timer,
        navigator,
        draft=Draft.blank(config.timezone),
        delay=config.autosave_delay,
        on_status=on_status,
    )
    if entry_id is None:
        return controller

    try:
        entry = repo.get(entry_id)
    except DiaryError as e:
        logger.warning(f"Could not open entry {entry_id}: {e}")
        controller.close()
        navigator.notify(f"Could not open entry {entry_id}: {e}")
        navigator.exit_to_list()
        return None

    controller.load(entry)
    return controller
