import json

import pytest

from mailauth.storage import (
    LOGIN_TOKEN_KEY,
    PENDING_EMAIL_KEY,
    FileStorage,
    MemoryStorage,
    TokenStore,
)


@pytest.mark.asyncio
async def test_memory_storage_set_get() -> None:
    storage = MemoryStorage()

    await storage.set("login-token", "abc")

    assert await storage.get("login-token") == "abc"


@pytest.mark.asyncio
async def test_memory_storage_get_missing() -> None:
    storage = MemoryStorage()

    assert await storage.get("missing") is None


@pytest.mark.asyncio
async def test_memory_storage_remove_missing_is_noop() -> None:
    storage = MemoryStorage({"email": "a@b.com"})

    await storage.remove("login-token")

    assert await storage.get("email") == "a@b.com"


@pytest.mark.asyncio
async def test_file_storage_persists(tmp_path) -> None:
    path = tmp_path / "storage.json"
    await FileStorage(path).set("login-token", "abc")

    assert await FileStorage(path).get("login-token") == "abc"


@pytest.mark.asyncio
async def test_file_storage_remove(tmp_path) -> None:
    path = tmp_path / "storage.json"
    storage = FileStorage(path)
    await storage.set("login-token", "abc")
    await storage.set("email", "a@b.com")

    await storage.remove("login-token")

    assert await storage.get("login-token") is None
    assert json.loads(path.read_text(encoding="utf-8")) == {"email": "a@b.com"}


@pytest.mark.asyncio
async def test_file_storage_missing_file(tmp_path) -> None:
    path = tmp_path / "missing.json"
    storage = FileStorage(path)

    assert await storage.get("login-token") is None
    await storage.remove("login-token")
    assert not path.exists()


@pytest.mark.asyncio
async def test_file_storage_rejects_non_object(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(RuntimeError, match="top-level JSON object"):
        await FileStorage(path).get("login-token")


@pytest.mark.asyncio
async def test_token_store_uses_browser_keys() -> None:
    storage = MemoryStorage()
    store = TokenStore(storage)

    await store.set_token("token-1")
    await store.set_pending_email("a@b.com")

    assert await storage.get(LOGIN_TOKEN_KEY) == "token-1"
    assert await storage.get(PENDING_EMAIL_KEY) == "a@b.com"
    assert LOGIN_TOKEN_KEY == "login-token"
    assert PENDING_EMAIL_KEY == "email"


@pytest.mark.asyncio
async def test_token_store_remove_token() -> None:
    store = TokenStore(MemoryStorage({"login-token": "token-1"}))

    await store.remove_token()

    assert await store.get_token() is None


@pytest.mark.asyncio
async def test_take_pending_email_reads_once() -> None:
    store = TokenStore(MemoryStorage({"email": "a@b.com"}))

    assert await store.take_pending_email() == "a@b.com"
    assert await store.take_pending_email() is None
    assert await store.get_pending_email() is None


@pytest.mark.asyncio
async def test_take_pending_email_treats_empty_as_absent() -> None:
    storage = MemoryStorage({"email": ""})
    store = TokenStore(storage)

    assert await store.take_pending_email() is None
    assert await storage.get("email") is None


@pytest.mark.asyncio
async def test_file_storage_leaves_no_staging_files(tmp_path) -> None:
    path = tmp_path / "nested" / "storage.json"
    storage = FileStorage(path)

    await storage.set("login-token", "abc")
    await storage.set("email", "a@b.com")

    assert [child.name for child in path.parent.iterdir()] == ["storage.json"]
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "email": "a@b.com",
        "login-token": "abc",
    }
