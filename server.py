from __future__ import annotations

import httpx
from starlette.applications import Starlette

from attachdl.app import AttachmentPageHost, create_app
from attachdl.constants import LOGGER
from attachdl.downloads import DirectoryFileSaver, FileSaver
from attachdl.env import Settings, load_env, load_settings, setup_logging, validate_env
from attachdl.fetcher import AttachmentFetcher, build_http_client
from mailauth.storage import FileStorage, KeyValueStorage, TokenStore


def build_app(
    settings: Settings,
    *,
    storage: KeyValueStorage | None = None,
    file_saver: FileSaver | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Starlette:
    token_store = TokenStore(storage or FileStorage(settings.storage_path))
    client = build_http_client(
        settings.api_base_url,
        timeout=settings.timeout,
        debug_enabled=settings.debug,
        transport=transport,
    )
    fetcher = AttachmentFetcher(
        client=client,
        token_store=token_store,
        file_saver=file_saver or DirectoryFileSaver(settings.download_dir),
    )
    host = AttachmentPageHost(
        api_base_url=settings.api_base_url,
        token_store=token_store,
        fetcher=fetcher,
    )
    return create_app(host, client=client)


def create_server_app() -> Starlette:
    load_env()
    setup_logging()
    validate_env()

    settings = load_settings()
    LOGGER.info(
        "Attachment API %s, downloads saved to %s",
        settings.api_base_url,
        settings.download_dir,
    )
    return build_app(settings)


def main() -> None:
    import uvicorn

    app = create_server_app()
    settings = load_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
