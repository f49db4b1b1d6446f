from __future__ import annotations

import json
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

LOGIN_TOKEN_KEY = "login-token"
PENDING_EMAIL_KEY = "email"


class KeyValueStorage(ABC):
    @abstractmethod
    async def get(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileStorage(KeyValueStorage):
    """JSON-file storage; every write replaces the whole file atomically."""

    def __init__(self, path: str | Path = ".attachdl-storage.json") -> None:
        self._path = Path(path)

    async def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        self._dump({**self._load(), key: value})

    async def remove(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self._dump(values)

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        values = json.loads(text)
        if isinstance(values, dict):
            return values
        raise RuntimeError(f"{self._path} must hold a top-level JSON object.")

    def _dump(self, values: dict[str, str]) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, suffix=".partial", delete=False
        ) as handle:
            json.dump(values, handle, sort_keys=True)
            staged = Path(handle.name)
        try:
            staged.replace(self._path)
        except OSError:
            staged.unlink(missing_ok=True)
            raise


class TokenStore:
    """Typed accessors for the bearer token and the email pending re-auth."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    async def get_token(self) -> str | None:
        return await self._storage.get(LOGIN_TOKEN_KEY)

    async def set_token(self, token: str) -> None:
        await self._storage.set(LOGIN_TOKEN_KEY, token)

    async def remove_token(self) -> None:
        await self._storage.remove(LOGIN_TOKEN_KEY)

    async def get_pending_email(self) -> str | None:
        return await self._storage.get(PENDING_EMAIL_KEY)

    async def set_pending_email(self, email: str) -> None:
        await self._storage.set(PENDING_EMAIL_KEY, email)

    async def clear_pending_email(self) -> None:
        await self._storage.remove(PENDING_EMAIL_KEY)

    async def take_pending_email(self) -> str | None:
        """Read the pending email and clear it, whether or not one was set."""
        email = await self.get_pending_email()
        await self.clear_pending_email()
        return email or None
