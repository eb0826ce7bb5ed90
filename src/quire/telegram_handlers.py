"""Telegram command handlers."""

import html
import logging
from datetime import date

from telegram import Update
from telegram.ext import Application, ContextTypes, ConversationHandler

from .adapters.scheduler_timer import SchedulerDebounceTimer
from .autosave import AutosaveController
from .config import load_config
from .core.draft import SaveStatus
from .core.entries import format_entry_date
from .editor import get_repository, open_session
from .errors import AuthenticationError, DiaryError
from .telegram_format import format_draft_status, format_entry, format_entry_list, send_markdown
from .telegram_states import EditorStates

logger = logging.getLogger(__name__)

EDITOR_KEY = "editor"


class TelegramNavigator:
    """
    Chat-backed navigation for an editing session.

    Implements Navigator protocol. The controller calls it synchronously,
    so messages are sent as tasks on the application's event loop.
    """

    def __init__(self, application: Application, chat_id: int):
        self.application = application
        self.chat_id = chat_id

    def _send(self, text: str) -> None:
        self.application.create_task(
            self.application.bot.send_message(chat_id=self.chat_id, text=text)
        )

    def replace_location(self, entry_id: int) -> None:
        self._send(f"Saved as entry #{entry_id}. Keep writing, /save when you're done.")

    def exit_to_list(self) -> None:
        self._send("Back to your entries. Use /list to see them.")

    def notify(self, message: str) -> None:
        self._send(message)


def _editor(context: ContextTypes.DEFAULT_TYPE) -> AutosaveController | None:
    return context.user_data.get(EDITOR_KEY)


def _close_editor(context: ContextTypes.DEFAULT_TYPE) -> None:
    """End the current session, cancelling any pending autosave."""
    controller = context.user_data.pop(EDITOR_KEY, None)
    if controller is not None:
        controller.close()


def _parse_entry_id(context: ContextTypes.DEFAULT_TYPE) -> int | None:
    if not context.args:
        return None
    try:
        return int(context.args[0].lstrip("#"))
    except ValueError:
        return None


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! I'm Quire, your diary.\n\n"
        "Commands:\n"
        "/new - Write a new entry\n"
        "/edit <id> - Edit an entry\n"
        "/list - Your entries\n"
        "/show <id> - Read an entry\n"
        "/delete <id> - Delete an entry\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*Quire Commands*\n\n"
        "/new - Write a new entry\n"
        "/edit <id> - Edit an entry\n"
        "/list - Your entries, newest first\n"
        "/show <id> - Read an entry\n"
        "/delete <id> - Delete an entry\n\n"
        "*While editing*\n"
        "Send text to add a paragraph\n"
        "/title <text> - Set the title\n"
        "/date <YYYY-MM-DD> - Set the date\n"
        "/status - Show save status\n"
        "/save - Save and exit\n"
        "/discard - Leave without saving\n\n"
        "Changes are saved automatically a couple of seconds after you stop typing, "
        "once the entry has a title.",
        parse_mode="Markdown",
    )


async def list_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /list command - entries grouped by date."""
    config = load_config()
    try:
        entries = get_repository(config).list_entries()
    except AuthenticationError:
        await update.message.reply_text("Not logged in. Run `quire login` on CLI.")
        return
    except DiaryError as e:
        logger.error(f"Failed to list entries: {e}")
        await update.message.reply_text(f"Failed to fetch entries: {e}")
        return

    await send_markdown(update.message, format_entry_list(entries))


async def show_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /show <id> command."""
    entry_id = _parse_entry_id(context)
    if entry_id is None:
        await update.message.reply_text("Usage: /show <id>")
        return

    config = load_config()
    try:
        entry = get_repository(config).get(entry_id)
    except DiaryError as e:
        await update.message.reply_text(f"Could not open entry {entry_id}: {e}")
        return

    await send_markdown(update.message, format_entry(entry))


async def delete_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /delete <id> command."""
    entry_id = _parse_entry_id(context)
    if entry_id is None:
        await update.message.reply_text("Usage: /delete <id>")
        return

    config = load_config()
    try:
        get_repository(config).delete(entry_id)
    except DiaryError as e:
        await update.message.reply_text(f"Could not delete entry {entry_id}: {e}")
        return

    await update.message.reply_text(f"Entry #{entry_id} deleted.")


# ============== Editing Conversation ==============


async def new_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Start editing a blank entry."""
    return await _open_editor(update, context, entry_id=None)


async def edit_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Start editing an existing entry."""
    entry_id = _parse_entry_id(context)
    if entry_id is None:
        await update.message.reply_text("Usage: /edit <id>")
        return ConversationHandler.END
    return await _open_editor(update, context, entry_id=entry_id)


async def _open_editor(update: Update, context: ContextTypes.DEFAULT_TYPE, entry_id: int | None):
    _close_editor(context)

    config = load_config()
    chat_id = update.effective_chat.id
    timer = SchedulerDebounceTimer(context.bot_data["scheduler"], job_id=f"autosave-{chat_id}")
    navigator = TelegramNavigator(context.application, chat_id)

    controller = open_session(
        get_repository(config), timer, navigator, config, entry_id=entry_id
    )
    if controller is None:
        return ConversationHandler.END

    context.user_data[EDITOR_KEY] = controller
    await send_markdown(update.message, format_draft_status(controller.draft, controller.status))
    await update.message.reply_text(
        "Send text to write. /title and /date set the heading, /save to finish."
    )
    return EditorStates.EDITING


async def content_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Append a message to the entry as a paragraph."""
    controller = _editor(context)
    if controller is None:
        return ConversationHandler.END

    text = update.message.text.strip()
    if not text:
        return EditorStates.EDITING

    paragraph = f"<p>{html.escape(text)}</p>"
    controller.edit(content=controller.draft.content + paragraph)
    if not controller.draft.has_title():
        await update.message.reply_text("Added. Set a /title so it can be saved.")
    return EditorStates.EDITING


async def title_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /title <text>."""
    controller = _editor(context)
    if controller is None:
        return ConversationHandler.END

    title = " ".join(context.args or [])
    controller.edit(title=title)
    if controller.draft.has_title():
        await update.message.reply_text(f"Title: {controller.draft.title}")
    else:
        await update.message.reply_text("Title cleared. Autosave is paused until the entry has a title.")
    return EditorStates.EDITING


async def date_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /date <YYYY-MM-DD>."""
    controller = _editor(context)
    if controller is None:
        return ConversationHandler.END

    try:
        new_date = date.fromisoformat(context.args[0]) if context.args else None
    except ValueError:
        new_date = None
    if new_date is None:
        await update.message.reply_text("Usage: /date YYYY-MM-DD")
        return EditorStates.EDITING

    controller.edit(date=new_date)
    await update.message.reply_text(f"Date: {format_entry_date(new_date)}")
    return EditorStates.EDITING


async def editor_status_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /status while editing."""
    controller = _editor(context)
    if controller is None:
        return ConversationHandler.END

    await send_markdown(update.message, format_draft_status(controller.draft, controller.status))
    return EditorStates.EDITING


async def save_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /save - save and exit."""
    controller = _editor(context)
    if controller is None:
        return ConversationHandler.END

    if controller.exiting:
        await update.message.reply_text("Already saving...")
        return EditorStates.EDITING

    if await controller.save_and_exit():
        context.user_data.pop(EDITOR_KEY, None)
        return ConversationHandler.END
    return EditorStates.EDITING


async def discard_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /discard and /cancel - leave the editor without saving."""
    controller = _editor(context)
    unsaved = controller is not None and controller.status is not SaveStatus.SAVED
    _close_editor(context)
    if unsaved:
        await update.message.reply_text("Left the editor. Unsaved changes were discarded.")
    else:
        await update.message.reply_text("Left the editor.")
    return ConversationHandler.END
