"""Tests for the Telegram editing host."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram.ext import ConversationHandler

from quire.autosave import AutosaveController
from quire.config import Config
from quire.core.draft import DiaryEntry, Draft, SaveStatus
from quire.telegram_format import format_draft_status, format_entry, format_entry_list
from quire.telegram_handlers import (
    EDITOR_KEY,
    TelegramNavigator,
    content_handler,
    date_handler,
    discard_handler,
    edit_handler,
    new_handler,
    save_handler,
    title_handler,
)
from quire.telegram_states import EditorStates


def make_update(text=""):
    update = MagicMock()
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.effective_chat.id = 42
    return update


def make_context(args=None, controller=None):
    context = MagicMock()
    context.args = args or []
    context.user_data = {}
    context.bot_data = {"scheduler": MagicMock()}
    if controller is not None:
        context.user_data[EDITOR_KEY] = controller
    return context


@pytest.fixture
def repo():
    repo = MagicMock()
    repo.create.return_value = DiaryEntry(id=7, title="Trip", content="", date=date(2024, 5, 1))
    return repo


@pytest.fixture
def controller(repo):
    return AutosaveController(repo, MagicMock(), MagicMock(), draft=Draft(date=date(2024, 5, 1)))


class TestFormatting:
    def test_entry_list_groups_by_date(self):
        entries = [
            DiaryEntry(id=1, title="Older", content="<p>a</p>", date=date(2024, 4, 30)),
            DiaryEntry(id=7, title="Trip", content="<p>Day one</p>", date=date(2024, 5, 1)),
        ]
        text = format_entry_list(entries)

        assert text.index("Wednesday, May 1, 2024") < text.index("Tuesday, April 30, 2024")
        assert "#7 Trip" in text
        assert "_Day one_" in text

    def test_empty_list(self):
        assert "No entries yet" in format_entry_list([])

    def test_entry(self):
        entry = DiaryEntry(id=7, title="Trip", content="<p>Day one</p>", date=date(2024, 5, 1))
        text = format_entry(entry)
        assert "**Trip**" in text
        assert "Day one" in text
        assert "<p>" not in text

    def test_draft_status(self):
        draft = Draft(title="", content="", date=date(2024, 5, 1))
        text = format_draft_status(draft, SaveStatus.SAVED)
        assert "New Entry" in text
        assert "(no title)" in text

        draft.id = 7
        assert "Edit Entry #7" in format_draft_status(draft, SaveStatus.UNSAVED)


class TestNavigator:
    def test_messages_are_sent_as_tasks(self):
        application = MagicMock()
        navigator = TelegramNavigator(application, chat_id=42)

        navigator.replace_location(7)

        application.create_task.assert_called_once()
        kwargs = application.bot.send_message.call_args.kwargs
        assert kwargs["chat_id"] == 42
        assert "#7" in kwargs["text"]


class TestEditingHandlers:
    def test_text_appends_escaped_paragraph(self, controller):
        controller.edit(title="Trip")
        context = make_context(controller=controller)

        state = asyncio.run(content_handler(make_update("Fish & chips"), context))

        assert state == EditorStates.EDITING
        assert controller.draft.content == "<p>Fish &amp; chips</p>"
        assert controller.status == SaveStatus.UNSAVED

    def test_text_without_title_asks_for_one(self, controller):
        update = make_update("Notes")

        asyncio.run(content_handler(update, make_context(controller=controller)))

        assert "/title" in update.message.reply_text.call_args[0][0]
        assert controller.draft.content == "<p>Notes</p>"

    def test_title(self, controller):
        asyncio.run(title_handler(make_update(), make_context(["A", "day", "out"], controller)))
        assert controller.draft.title == "A day out"

    def test_invalid_date(self, controller):
        update = make_update()
        state = asyncio.run(date_handler(update, make_context(["May", "1st"], controller)))

        assert state == EditorStates.EDITING
        assert controller.draft.date == date(2024, 5, 1)
        assert "Usage" in update.message.reply_text.call_args[0][0]

    def test_date(self, controller):
        asyncio.run(date_handler(make_update(), make_context(["2024-06-02"], controller)))
        assert controller.draft.date == date(2024, 6, 2)

    def test_save_ends_conversation(self, controller, repo):
        controller.edit(title="Trip")
        context = make_context(controller=controller)

        state = asyncio.run(save_handler(make_update(), context))

        assert state == ConversationHandler.END
        assert EDITOR_KEY not in context.user_data
        repo.create.assert_called_once()

    def test_failed_save_stays_in_editor(self, controller):
        context = make_context(controller=controller)

        state = asyncio.run(save_handler(make_update(), context))

        assert state == EditorStates.EDITING
        assert context.user_data[EDITOR_KEY] is controller

    def test_discard_closes_session(self, controller):
        controller.edit(title="Trip")
        update = make_update()
        context = make_context(controller=controller)

        state = asyncio.run(discard_handler(update, context))

        assert state == ConversationHandler.END
        assert controller.closed
        assert "discarded" in update.message.reply_text.call_args[0][0]

    def test_no_session_ends_conversation(self):
        state = asyncio.run(content_handler(make_update("x"), make_context()))
        assert state == ConversationHandler.END


class TestOpenEditor:
    @patch("quire.telegram_handlers.send_markdown", new_callable=AsyncMock)
    @patch("quire.telegram_handlers.get_repository")
    @patch("quire.telegram_handlers.load_config")
    def test_new_starts_blank_session(self, mock_config, mock_repo, mock_send):
        mock_config.return_value = Config()
        context = make_context()

        state = asyncio.run(new_handler(make_update(), context))

        assert state == EditorStates.EDITING
        controller = context.user_data[EDITOR_KEY]
        assert controller.draft.id is None
        assert controller.timer.job_id == "autosave-42"
        mock_send.assert_awaited_once()

    @patch("quire.telegram_handlers.send_markdown", new_callable=AsyncMock)
    @patch("quire.telegram_handlers.get_repository")
    @patch("quire.telegram_handlers.load_config")
    def test_edit_loads_entry(self, mock_config, mock_repo, mock_send):
        mock_config.return_value = Config()
        mock_repo.return_value.get.return_value = DiaryEntry(
            id=3, title="Existing", content="", date=date(2024, 5, 1)
        )
        context = make_context(["3"])

        state = asyncio.run(edit_handler(make_update(), context))

        assert state == EditorStates.EDITING
        assert context.user_data[EDITOR_KEY].draft.id == 3

    def test_edit_requires_id(self):
        update = make_update()
        state = asyncio.run(edit_handler(update, make_context()))

        assert state == ConversationHandler.END
        assert "Usage" in update.message.reply_text.call_args[0][0]

    @patch("quire.telegram_handlers.send_markdown", new_callable=AsyncMock)
    @patch("quire.telegram_handlers.get_repository")
    @patch("quire.telegram_handlers.load_config")
    def test_reopening_closes_previous_session(self, mock_config, mock_repo, mock_send, controller):
        mock_config.return_value = Config()
        context = make_context(controller=controller)

        asyncio.run(new_handler(make_update(), context))

        assert controller.closed
        assert context.user_data[EDITOR_KEY] is not controller
