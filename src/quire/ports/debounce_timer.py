"""Debounce timer interface."""

from typing import Awaitable, Callable, Protocol


class DebounceTimer(Protocol):
    """A single cancellable delayed call, replaced wholesale on reschedule."""

    def schedule(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        """Run callback after delay seconds, cancelling any pending call."""
        ...

    def cancel(self) -> None:
        """Cancel the pending call, if any."""
        ...

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not fired."""
        ...
