from __future__ import annotations

import enum
import logging
import re
import time
from dataclasses import dataclass
from typing import Callable

from mailauth.redirect import RedirectCoordinator
from mailauth.session import NeedsAuth, resolve
from mailauth.storage import TokenStore

from .constants import (
    INVALID_EMAIL_MESSAGE,
    LOADING_MESSAGE,
    LOGGER,
    SUCCESS_MESSAGE,
)
from .fetcher import AttachmentFetcher, Failure, Success

# something@something.something, searched anywhere in the input.
EMAIL_PATTERN = re.compile(r".+@.+\..+")


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return EMAIL_PATTERN.search(value) is not None


class PagePhase(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    REDIRECTING = "redirecting"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SessionState:
    email_input: str = ""
    loading: bool = False
    error: str | None = None
    resolved: bool = False

    @property
    def message(self) -> str | None:
        if self.error:
            return self.error
        if self.resolved:
            return SUCCESS_MESSAGE
        if self.loading:
            return LOADING_MESSAGE
        return None


class PageController:
    """UI state for one page instance, from first load until it navigates away."""

    def __init__(
        self,
        *,
        token_store: TokenStore,
        coordinator: RedirectCoordinator,
        fetcher: AttachmentFetcher,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self.token_store = token_store
        self.coordinator = coordinator
        self.fetcher = fetcher
        self.state = SessionState()
        self.phase = PagePhase.IDLE
        self._clock = clock
        self._logger = logger or LOGGER

    @property
    def is_terminal(self) -> bool:
        return self.phase is PagePhase.REDIRECTING

    def change_email(self, value: str) -> None:
        self.state.email_input = value

    async def load(self) -> SessionState:
        """Initial page-load check for a token handed back by the provider."""
        if self.coordinator.returned_token() is not None:
            self._logger.info("Provider returned a fresh token; resuming pending download")
        await self.coordinator.resume_from_redirect(self._download)
        return self.state

    async def submit(self, email: str | None = None) -> SessionState:
        if self.is_terminal:
            return self.state
        if email is not None:
            self.change_email(email)

        email = self.state.email_input
        if not is_valid_email(email):
            self.phase = PagePhase.FAILED
            self.state.resolved = False
            self.state.error = INVALID_EMAIL_MESSAGE
            return self.state

        self.phase = PagePhase.VALIDATING
        stored_token = await self.token_store.get_token()
        decision = resolve(stored_token, now=self._clock())

        if isinstance(decision, NeedsAuth):
            self._logger.info("Re-authentication required (%s); redirecting", decision.reason)
            self.phase = PagePhase.REDIRECTING
            await self.coordinator.begin_reauth(email)
            return self.state

        await self._download(email, stored_token)
        return self.state

    async def _download(self, email: str, token: str) -> Success | Failure:
        self.phase = PagePhase.LOADING
        self.state.loading = True
        self.state.error = None
        self.state.resolved = False

        result = await self.fetcher.fetch_attachments(token, email)

        self.state.loading = False
        if isinstance(result, Success):
            self.phase = PagePhase.SUCCEEDED
            self.state.error = None
            self.state.resolved = True
        else:
            self.phase = PagePhase.FAILED
            self.state.resolved = False
            self.state.error = result.message
        return result
