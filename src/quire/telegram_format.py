"""Telegram message formatting utilities."""

import telegramify_markdown

from .core.draft import DiaryEntry, Draft, SaveStatus
from .core.entries import format_entry_date, group_by_date, preview, strip_html

MESSAGE_LIMIT = 4000


async def send_markdown(bot_or_msg, text: str, *, chat_id: int | None = None):
    """Send markdown text to Telegram, converting to MarkdownV2.

    bot_or_msg: a Bot instance (pass chat_id) or an Update.message (calls reply_text).
    """
    converted = telegramify_markdown.markdownify(text)
    chunks = [converted[i : i + MESSAGE_LIMIT] for i in range(0, len(converted), MESSAGE_LIMIT)]
    for chunk in chunks:
        if chat_id is not None:
            await bot_or_msg.send_message(chat_id=chat_id, text=chunk, parse_mode="MarkdownV2")
        else:
            await bot_or_msg.reply_text(chunk, parse_mode="MarkdownV2")


def format_entry_list(entries: list[DiaryEntry]) -> str:
    """Entries grouped under their dates, newest first."""
    if not entries:
        return "No entries yet. Use /new to write one."

    lines = []
    for day, day_entries in group_by_date(entries):
        if lines:
            lines.append("")
        lines.append(f"**{format_entry_date(day)}**")
        for entry in day_entries:
            lines.append(f"- #{entry.id} {entry.title}")
            text = preview(entry.content, length=80)
            if text:
                lines.append(f"  _{text}_")
    return "\n".join(lines)


def format_entry(entry: DiaryEntry) -> str:
    """Full entry as markdown, content reduced to plain text."""
    body = strip_html(entry.content) or "(empty)"
    return f"**{entry.title}**\n{format_entry_date(entry.date)} · #{entry.id}\n\n{body}"


def format_draft_status(draft: Draft, status: SaveStatus) -> str:
    heading = f"Edit Entry #{draft.id}" if draft.is_persisted else "New Entry"
    title = draft.title.strip() or "(no title)"
    return (
        f"**{heading}** · {status.label()}\n"
        f"Title: {title}\n"
        f"Date: {draft.date.isoformat()}\n"
        f"Content: {preview(draft.content, length=200) or '(empty)'}"
    )
