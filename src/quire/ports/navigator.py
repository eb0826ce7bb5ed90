"""Host shell navigation interface."""

from typing import Protocol


class Navigator(Protocol):
    """What the editing session may ask of the shell hosting it."""

    def replace_location(self, entry_id: int) -> None:
        """Point the visible location at a now-persisted entry, without leaving."""
        ...

    def exit_to_list(self) -> None:
        """Leave the editor and go back to the entry list."""
        ...

    def notify(self, message: str) -> None:
        """Show a blocking notice to the user."""
        ...
