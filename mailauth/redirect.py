from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from mailauth.navigation import Navigator
from mailauth.storage import TokenStore
from mailauth.urls import get_query_param, join_url, strip_query_param

LOGIN_PATH = "/auth/google/login"
ACCESS_TOKEN_PARAM = "access_token"

T = TypeVar("T")


class RedirectCoordinator:
    def __init__(
        self,
        *,
        api_base_url: str,
        token_store: TokenStore,
        navigator: Navigator,
    ) -> None:
        self.api_base_url = api_base_url.rstrip("/")
        self.token_store = token_store
        self.navigator = navigator

    @property
    def login_url(self) -> str:
        return join_url(self.api_base_url, LOGIN_PATH)

    async def begin_reauth(self, email: str) -> None:
        # Pending email must be durable before the page goes away.
        await self.token_store.set_pending_email(email)
        self.navigator.assign(self.login_url)

    def returned_token(self) -> str | None:
        return get_query_param(self.navigator.current_url, ACCESS_TOKEN_PARAM)

    async def resume_from_redirect(
        self,
        on_resume: Callable[[str, str], Awaitable[T]],
    ) -> T | None:
        """Commit a token delivered by the provider and resume the pending email.

        ``on_resume`` receives ``(email, token)`` and is only awaited when an
        email was pending. Returns its result, or None when nothing resumed.
        """
        token = self.returned_token()
        if token is None:
            return None

        await self.token_store.set_token(token)
        self.navigator.replace_state(
            strip_query_param(self.navigator.current_url, ACCESS_TOKEN_PARAM)
        )

        email = await self.token_store.take_pending_email()
        if not email:
            return None
        return await on_resume(email, token)
