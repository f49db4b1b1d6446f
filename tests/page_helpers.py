import datetime as dt
from pathlib import Path

import httpx

from attachdl.controller import PageController
from attachdl.downloads import FileSaver
from attachdl.fetcher import AttachmentFetcher, build_http_client
from mailauth.navigation import RecordingNavigator
from mailauth.redirect import RedirectCoordinator
from mailauth.storage import MemoryStorage, TokenStore

API_BASE_URL = "https://apibaseurl.com"
PAGE_URL = "http://127.0.0.1:8000/"
TODAY = dt.date(2024, 6, 5)


class RecordingFileSaver(FileSaver):
    def __init__(self) -> None:
        self.saved: list[tuple[str, bytes]] = []

    def save(self, payload: bytes, filename: str) -> Path:
        self.saved.append((filename, payload))
        return Path("/downloads") / filename


def make_handler(status: int = 200, content: bytes = b"PK\x03\x04zip-bytes"):
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, request=request, content=content)

    return handler, seen


def failing_handler():
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    return handler, seen


def build_fetcher(handler, *, storage: MemoryStorage | None = None):
    store = TokenStore(storage if storage is not None else MemoryStorage())
    saver = RecordingFileSaver()
    client = build_http_client(
        API_BASE_URL,
        debug_enabled=False,
        transport=httpx.MockTransport(handler),
    )
    fetcher = AttachmentFetcher(
        client=client,
        token_store=store,
        file_saver=saver,
        today=lambda: TODAY,
    )
    return fetcher, store, saver


def build_page(handler, *, url: str = PAGE_URL, storage: MemoryStorage | None = None):
    fetcher, store, saver = build_fetcher(handler, storage=storage)
    navigator = RecordingNavigator(url)
    coordinator = RedirectCoordinator(
        api_base_url=API_BASE_URL,
        token_store=store,
        navigator=navigator,
    )
    controller = PageController(
        token_store=store,
        coordinator=coordinator,
        fetcher=fetcher,
    )
    return controller, navigator, store, saver
