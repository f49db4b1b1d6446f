from __future__ import annotations

from abc import ABC, abstractmethod


class Navigator(ABC):
    """The page's address bar: where it is, where it goes next."""

    @property
    @abstractmethod
    def current_url(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def assign(self, href: str) -> None:
        """Full-page navigation away from the current page."""
        raise NotImplementedError

    @abstractmethod
    def replace_state(self, url: str) -> None:
        """Swap the visible URL without reloading or adding a history entry."""
        raise NotImplementedError


class RecordingNavigator(Navigator):
    def __init__(self, url: str) -> None:
        self._url = url
        self.navigated_to: str | None = None
        self.history: list[str] = [url]

    @property
    def current_url(self) -> str:
        return self._url

    def assign(self, href: str) -> None:
        self.navigated_to = href

    def replace_state(self, url: str) -> None:
        self._url = url
        self.history[-1] = url
