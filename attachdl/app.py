from __future__ import annotations

import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import Callable

import httpx
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.routing import Route

from mailauth.navigation import RecordingNavigator
from mailauth.redirect import RedirectCoordinator
from mailauth.storage import TokenStore

from .constants import APP_VERSION, INVALID_EMAIL_MESSAGE
from .controller import PageController, PagePhase
from .fetcher import AttachmentFetcher


@dataclass
class Page:
    navigator: RecordingNavigator
    controller: PageController


def state_payload(page: Page) -> dict:
    state = page.controller.state
    return {
        "phase": page.controller.phase.value,
        "email": state.email_input,
        "loading": state.loading,
        "error": state.error,
        "resolved": state.resolved,
        "message": state.message,
        "url": page.navigator.current_url,
    }


def _status_for(page: Page) -> int:
    controller = page.controller
    if controller.phase is PagePhase.FAILED:
        if controller.state.error == INVALID_EMAIL_MESSAGE:
            return 400
        return 502
    return 200


class AttachmentPageHost:
    """Serves the download page; one page instance is live at a time."""

    def __init__(
        self,
        *,
        api_base_url: str,
        token_store: TokenStore,
        fetcher: AttachmentFetcher,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.api_base_url = api_base_url.rstrip("/")
        self.token_store = token_store
        self.fetcher = fetcher
        self.page: Page | None = None
        self._clock = clock
        self._lock = asyncio.Lock()

    def open_page(self, url: str) -> Page:
        navigator = RecordingNavigator(url)
        coordinator = RedirectCoordinator(
            api_base_url=self.api_base_url,
            token_store=self.token_store,
            navigator=navigator,
        )
        controller = PageController(
            token_store=self.token_store,
            coordinator=coordinator,
            fetcher=self.fetcher,
            clock=self._clock,
        )
        self.page = Page(navigator=navigator, controller=controller)
        return self.page

    # -- routes ----------------------------------------------------------------

    def routes(self) -> list[Route]:
        return [
            Route("/", self._handle_load, methods=["GET"], name="page"),
            Route("/download", self._handle_download, methods=["POST"]),
            Route("/health", self._handle_health, methods=["GET"]),
        ]

    # -- handlers --------------------------------------------------------------

    async def _handle_load(self, request: Request) -> Response:
        async with self._lock:
            page = self.open_page(str(request.url))
            await page.controller.load()
            return JSONResponse(state_payload(page), status_code=_status_for(page))

    async def _handle_download(self, request: Request) -> Response:
        email = await self._read_email(request)

        async with self._lock:
            page = self.page
            if page is None or page.controller.is_terminal:
                page = self.open_page(str(request.url_for("page")))

            await page.controller.submit(email)

            if page.navigator.navigated_to is not None:
                return RedirectResponse(url=page.navigator.navigated_to, status_code=303)
            return JSONResponse(state_payload(page), status_code=_status_for(page))

    async def _handle_health(self, request: Request) -> Response:
        del request
        return JSONResponse(
            {
                "status": "ok",
                "version": APP_VERSION,
                "api_base_url": self.api_base_url,
            }
        )

    # -- helpers ---------------------------------------------------------------

    async def _read_email(self, request: Request) -> str:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                payload = await request.json()
            except ValueError:
                return ""
            if not isinstance(payload, dict):
                return ""
            value = payload.get("email")
        else:
            form = await request.form()
            value = form.get("email")
        return value if isinstance(value, str) else ""


def create_app(
    host: AttachmentPageHost,
    *,
    client: httpx.AsyncClient | None = None,
) -> Starlette:
    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        del app
        try:
            yield
        finally:
            if client is not None:
                await client.aclose()

    app = Starlette(routes=host.routes(), lifespan=lifespan)
    app.state.host = host
    return app
