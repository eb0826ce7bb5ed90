"""Pure entry listing logic - no I/O dependencies."""

from datetime import date
from html.parser import HTMLParser

from .draft import DiaryEntry

# Block elements that read as a line break in a plain-text preview
_BLOCK_TAGS = {"p", "br", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre"}


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag in _BLOCK_TAGS:
            self.parts.append(" ")

    def handle_endtag(self, tag):
        if tag in _BLOCK_TAGS:
            self.parts.append(" ")

    def handle_data(self, data):
        self.parts.append(data)


def strip_html(markup: str) -> str:
    """Plain text of an HTML fragment, whitespace collapsed."""
    if not markup:
        return ""
    parser = _TextExtractor()
    parser.feed(markup)
    parser.close()
    return " ".join("".join(parser.parts).split())


def preview(markup: str, length: int = 150) -> str:
    """Truncated plain-text preview of HTML content."""
    text = strip_html(markup)
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "..."


def group_by_date(entries: list[DiaryEntry]) -> list[tuple[date, list[DiaryEntry]]]:
    """
    Group entries by date, newest date first.

    Entries within a day keep the order they were given in.
    Pure function - no I/O.
    """
    groups: dict[date, list[DiaryEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.date, []).append(entry)
    return sorted(groups.items(), key=lambda item: item[0], reverse=True)


def format_entry_date(d: date) -> str:
    """Long human-readable date, e.g. 'Wednesday, May 1, 2024'."""
    return f"{d:%A, %B} {d.day}, {d:%Y}"
