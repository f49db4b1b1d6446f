from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import httpx

from mailauth.storage import TokenStore

from .constants import (
    ATTACHMENT_PATH,
    EMAIL_QUERY_PARAM,
    LOGGER,
    REQUEST_FAILED_MESSAGE,
)
from .downloads import FileSaver, attachment_filename

REQUEST_FAILED = "request_failed"


@dataclass
class Success:
    payload: bytes
    filename: str
    path: Path | None = None


@dataclass
class Failure:
    kind: str = REQUEST_FAILED
    message: str = REQUEST_FAILED_MESSAGE
    status_code: int | None = None


def bearer_authorization(token: str) -> str:
    return f"Bearer {token}"


def build_http_client(
    api_base_url: str,
    *,
    timeout: float = 30.0,
    debug_enabled: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> httpx.AsyncClient:
    log = logger or LOGGER

    async def log_request(request: httpx.Request) -> None:
        if not debug_enabled:
            return
        log.info("Attachment API request %s %s", request.method, request.url)

    async def log_response(response: httpx.Response) -> None:
        if not debug_enabled:
            return
        log.info(
            "Attachment API response %s %s -> %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )

    return httpx.AsyncClient(
        base_url=api_base_url,
        timeout=timeout,
        transport=transport,
        event_hooks={"request": [log_request], "response": [log_response]},
    )


class AttachmentFetcher:
    def __init__(
        self,
        *,
        client: httpx.AsyncClient,
        token_store: TokenStore,
        file_saver: FileSaver,
        today: Callable[[], dt.date] = dt.date.today,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._token_store = token_store
        self._file_saver = file_saver
        self._today = today
        self._logger = logger or LOGGER

    async def fetch_attachments(self, credential: str, email: str) -> Success | Failure:
        """Download the archive of attachments sent by ``email``.

        Any outcome other than a 200 caches ``email`` for the next re-auth and
        drops the stored token, on the assumption that it may have been
        revoked.
        """
        result = await self._request(credential, email)
        if isinstance(result, Success):
            return result

        await self._token_store.set_pending_email(email)
        await self._token_store.remove_token()
        return result

    async def _request(self, credential: str, email: str) -> Success | Failure:
        try:
            response = await self._client.get(
                ATTACHMENT_PATH,
                params={EMAIL_QUERY_PARAM: email},
                headers={"Authorization": bearer_authorization(credential)},
            )
        except (httpx.HTTPError, ValueError) as error:
            # ValueError covers credentials that cannot be encoded into a header.
            self._logger.warning("Attachment request failed before a response: %s", error)
            return Failure()

        if response.status_code != 200:
            self._logger.warning(
                "Attachment request rejected status=%s",
                response.status_code,
            )
            return Failure(status_code=response.status_code)

        filename = attachment_filename(self._today())
        try:
            path = self._file_saver.save(response.content, filename)
        except OSError as error:
            self._logger.warning("Could not save %s: %s", filename, error)
            return Failure(status_code=response.status_code)

        self._logger.info("Saved %s (%s bytes)", path, len(response.content))
        return Success(payload=response.content, filename=filename, path=path)
