import pytest

from auth.token_store import MemoryTokenStore, TokenRecord


def test_record_to_dict_merges_realm() -> None:
    record = TokenRecord({"access_token": "A", "refresh_token": "R"}, realm_id="123")

    assert record.to_dict() == {"realmId": "123", "access_token": "A", "refresh_token": "R"}


def test_record_accessors() -> None:
    record = TokenRecord(
        {"access_token": "A", "refresh_token": "R", "token_type": "bearer", "expires_in": 3600}
    )

    assert record.access_token == "A"
    assert record.refresh_token == "R"
    assert record.token_type == "bearer"
    assert record.expires_in == 3600


def test_revocable_token_prefers_refresh_token() -> None:
    assert TokenRecord({"access_token": "A", "refresh_token": "R"}).revocable_token == "R"
    assert TokenRecord({"access_token": "A"}).revocable_token == "A"
    assert TokenRecord({"access_token": "A", "refresh_token": ""}).revocable_token == "A"
    assert TokenRecord({}).revocable_token is None


@pytest.mark.asyncio
async def test_memory_store_set_get() -> None:
    store = MemoryTokenStore()
    record = TokenRecord({"access_token": "A"}, realm_id="123")

    await store.set(record)

    assert await store.get() == record


@pytest.mark.asyncio
async def test_memory_store_get_missing() -> None:
    store = MemoryTokenStore()

    assert await store.get() is None


@pytest.mark.asyncio
async def test_memory_store_overwrites() -> None:
    store = MemoryTokenStore()
    await store.set(TokenRecord({"access_token": "first"}))

    await store.set(TokenRecord({"access_token": "second"}))

    record = await store.get()
    assert record.access_token == "second"


@pytest.mark.asyncio
async def test_memory_store_clear() -> None:
    store = MemoryTokenStore()
    await store.set(TokenRecord({"access_token": "A"}))

    await store.clear()

    assert await store.get() is None
