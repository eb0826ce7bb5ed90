"""Quire Telegram Bot."""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ConversationHandler,
    MessageHandler,
    filters,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .config import Config, load_config
from .telegram_handlers import (
    start_handler,
    help_handler,
    list_handler,
    show_handler,
    delete_handler,
    new_handler,
    edit_handler,
    content_handler,
    title_handler,
    date_handler,
    editor_status_handler,
    save_handler,
    discard_handler,
)
from .telegram_states import EditorStates

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to quire.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()

    auth_filter = AuthFilter(config.telegram_allowed_users)

    # Simple commands (with auth filter)
    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))
    app.add_handler(CommandHandler("list", list_handler, filters=auth_filter))
    app.add_handler(CommandHandler("show", show_handler, filters=auth_filter))
    app.add_handler(CommandHandler("delete", delete_handler, filters=auth_filter))

    # Editing session: one live draft per user
    editor_conv = ConversationHandler(
        entry_points=[
            CommandHandler("new", new_handler, filters=auth_filter),
            CommandHandler("edit", edit_handler, filters=auth_filter),
        ],
        states={
            EditorStates.EDITING: [
                CommandHandler("title", title_handler),
                CommandHandler("date", date_handler),
                CommandHandler("status", editor_status_handler),
                CommandHandler("save", save_handler),
                CommandHandler("discard", discard_handler),
                MessageHandler(filters.TEXT & ~filters.COMMAND, content_handler),
            ],
        },
        fallbacks=[CommandHandler("cancel", discard_handler)],
        per_user=True,
        allow_reentry=True,
    )
    app.add_handler(editor_conv)

    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in quire.conf"
        )

    # Add catch-all for unauthorized users if we have an allowlist
    if config.telegram_allowed_users:
        app.add_handler(
            MessageHandler(~auth_filter & filters.ALL, unauthorized_handler)
        )

    return app


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Set up the scheduler that runs autosave timers on the bot's event loop."""
    if config is None:
        config = load_config()

    scheduler = AsyncIOScheduler(timezone=config.timezone)
    app.bot_data["scheduler"] = scheduler
    return scheduler


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    async def post_shutdown(application: Application) -> None:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

    app.post_init = post_init
    app.post_shutdown = post_shutdown

    # Log startup info
    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info(f"Starting Quire Telegram bot against {config.api_base_url}")

    app.run_polling(allowed_updates=Update.ALL_TYPES)
