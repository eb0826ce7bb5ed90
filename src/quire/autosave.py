"""Autosave controller for a single editing session.

Keeps the server's copy of a draft converging on the in-memory one:
edits are debounced into one background save, and an explicit
save-and-exit path runs alongside it. All state changes happen on the
event loop; blocking repository calls run in a worker thread.
"""

import asyncio
import logging
from datetime import date
from typing import Callable

from quire.config import DEFAULT_AUTOSAVE_DELAY
from quire.core.draft import DiaryEntry, Draft, SaveStatus
from quire.errors import DiaryError, ValidationError
from quire.ports.debounce_timer import DebounceTimer
from quire.ports.diary_repo import DiaryRepository
from quire.ports.navigator import Navigator

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "Failed to save entry. Please try again."


class SessionClosedError(RuntimeError):
    """Raised when a closed editing session is edited."""

    pass


class AutosaveController:
    """
    Owns the draft, its save status and the debounce timer of one session.

    The draft given at construction (or via load()) is the baseline and
    never triggers a save by itself; only a later change does.
    """

    def __init__(
        self,
        repo: DiaryRepository,
        timer: DebounceTimer,
        navigator: Navigator,
        draft: Draft | None = None,
        delay: float = DEFAULT_AUTOSAVE_DELAY,
        on_status: Callable[[SaveStatus], None] | None = None,
    ):
        self.repo = repo
        self.timer = timer
        self.navigator = navigator
        self.delay = delay
        self.draft = draft if draft is not None else Draft.blank()
        self.status = SaveStatus.SAVED
        self.closed = False
        self.exiting = False
        self._on_status = on_status
        # Bumped on every real edit; a save only reports "saved" for the revision it sent
        self._revision = 0
        # One request at a time, so a later snapshot never lands before an earlier one
        self._save_lock = asyncio.Lock()

    # ============== Edits ==============

    def load(self, entry: DiaryEntry) -> None:
        """Replace the draft with a fetched entry as the new baseline."""
        self.timer.cancel()
        self.draft = Draft.from_entry(entry)
        self._set_status(SaveStatus.SAVED)

    def edit(
        self,
        *,
        title: str | None = None,
        content: str | None = None,
        date: date | None = None,
    ) -> bool:
        """
        Apply a user edit to the draft.

        Returns True if an autosave was (re)scheduled. Setting a field to
        the value it already has is not an edit.
        """
        if self.closed:
            raise SessionClosedError("Editing session is closed")

        before = self.draft.fields()
        if title is not None:
            self.draft.title = title
        if content is not None:
            self.draft.content = content
        if date is not None:
            self.draft.date = date
        if self.draft.fields() == before:
            return False

        self._revision += 1

        if not self.draft.has_title():
            logger.debug("Title is empty, autosave not scheduled")
            return False

        self._set_status(SaveStatus.UNSAVED)
        self.timer.cancel()
        self.timer.schedule(self.delay, self.autosave)
        return True

    # ============== Saving ==============

    async def autosave(self) -> None:
        """Debounce timer callback: push the current draft in the background."""
        if self.closed:
            return
        if not self.draft.has_title():
            logger.debug("Autosave skipped: title is empty")
            return

        self._set_status(SaveStatus.SAVING)
        revision = self._revision
        try:
            await self._dispatch(relocate=True)
        except DiaryError as e:
            logger.warning(f"Autosave failed: {e}")
            self._set_status(SaveStatus.UNSAVED)
            return

        if revision == self._revision:
            self._set_status(SaveStatus.SAVED)
        else:
            # Edited while the request was in flight; a newer save is pending
            self._set_status(SaveStatus.UNSAVED)

    async def save_and_exit(self) -> bool:
        """
        Explicit save. On success the session ends and the shell returns
        to the entry list; on failure the user stays with the draft intact.
        """
        self.timer.cancel()
        try:
            self.draft.validate()
        except ValidationError as e:
            self.navigator.notify(str(e))
            return False

        self.exiting = True
        try:
            await self._dispatch(relocate=False)
        except DiaryError as e:
            logger.error(f"Save failed: {e}")
            self._set_status(SaveStatus.UNSAVED)
            self.navigator.notify(SAVE_FAILED_NOTICE)
            return False
        finally:
            self.exiting = False

        self._set_status(SaveStatus.SAVED)
        self.close()
        self.navigator.exit_to_list()
        return True

    def close(self) -> None:
        """End the session. A pending autosave will not fire."""
        self.timer.cancel()
        self.closed = True

    async def _dispatch(self, relocate: bool) -> DiaryEntry:
        """
        Create or update from a snapshot of the draft.

        Saves are serialized. A save queued behind an in-flight create
        takes its snapshot after the id is bound, so it becomes an update.
        """
        async with self._save_lock:
            payload = self.draft.to_payload()
            if self.draft.id is not None:
                return await asyncio.to_thread(self.repo.update, self.draft.id, payload)

            entry = await asyncio.to_thread(self.repo.create, payload)
            self._bind(entry.id, relocate)
            return entry

    def _bind(self, entry_id: int, relocate: bool) -> None:
        """The draft's one-time move from unidentified to identified."""
        if self.draft.id is None:
            self.draft.id = entry_id
            logger.info(f"Draft bound to entry {entry_id}")
            if relocate and not self.closed:
                self.navigator.replace_location(entry_id)
        elif self.draft.id != entry_id:
            logger.warning(
                f"Create returned entry {entry_id} but draft is already entry {self.draft.id}"
            )

    def _set_status(self, status: SaveStatus) -> None:
        if status is self.status:
            return
        logger.debug(f"Save status {self.status.value} -> {status.value}")
        self.status = status
        if self._on_status is not None:
            self._on_status(status)
