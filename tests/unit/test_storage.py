"""Unit tests for record stores (studytrack/storage)"""
import json
import pytest
from unittest.mock import AsyncMock, patch

from studytrack.exceptions import ConfigurationError, MalformedStateError, StorageError, StorageWriteError
from studytrack.storage import FileStore, MemoryStore, RedisStore, create_store


# ============================================================================
# Shared Behaviour (memory + file)
# ============================================================================

@pytest.fixture(params=["memory", "file"])
def store(request, temp_data_dir):
    if request.param == "memory":
        return MemoryStore()
    return FileStore(temp_data_dir)


@pytest.mark.asyncio
async def test_load_missing_key_returns_none(store):
    assert await store.load("studyStreak") is None


@pytest.mark.asyncio
async def test_save_then_load(store):
    record = {"xp": 40, "level": 1, "badges": ["first-streak"]}

    result = await store.save("studyGamification", record)

    assert result.success is True
    assert result.error is None
    assert await store.load("studyGamification") == record


@pytest.mark.asyncio
async def test_delete(store):
    await store.save("studyStreak", {"currentStreak": 1})

    assert await store.delete("studyStreak") is True
    assert await store.delete("studyStreak") is False
    assert await store.load("studyStreak") is None


@pytest.mark.asyncio
async def test_unserializable_record_fails_save(store):
    result = await store.save("studyStreak", {"when": object()})

    assert result.success is False
    assert isinstance(result.error, StorageWriteError)
    assert await store.load("studyStreak") is None


@pytest.mark.asyncio
async def test_write_error_returns_failed_result(store):
    store._write = AsyncMock(side_effect=PermissionError("read-only"))

    result = await store.save("studyStreak", {"currentStreak": 1})

    assert result.success is False
    assert result.error.key == "studyStreak"
    assert "read-only" in result.error.message


# ============================================================================
# MemoryStore
# ============================================================================

@pytest.mark.asyncio
async def test_memory_store_invalid_json_is_malformed():
    store = MemoryStore()
    store.put_raw("studyStreak", "{\"currentStreak\": ")

    with pytest.raises(MalformedStateError) as exc_info:
        await store.load("studyStreak")

    assert exc_info.value.key == "studyStreak"


@pytest.mark.asyncio
async def test_memory_store_non_object_is_malformed():
    store = MemoryStore()
    store.put_raw("studyStreak", "\"just a string\"")

    with pytest.raises(MalformedStateError):
        await store.load("studyStreak")


# ============================================================================
# FileStore
# ============================================================================

@pytest.mark.asyncio
async def test_file_store_writes_json_file(temp_data_dir):
    store = FileStore(temp_data_dir / "nested")

    await store.save("studyStreak", {"currentStreak": 3})

    path = temp_data_dir / "nested" / "studyStreak.json"
    assert json.loads(path.read_text()) == {"currentStreak": 3}
    # No temp files left behind
    assert [p.name for p in path.parent.iterdir()] == ["studyStreak.json"]


@pytest.mark.asyncio
async def test_file_store_corrupt_file_is_malformed(temp_data_dir):
    (temp_data_dir / "studyGamification.json").write_text("xp=10")
    store = FileStore(temp_data_dir)

    with pytest.raises(MalformedStateError):
        await store.load("studyGamification")


@pytest.mark.asyncio
async def test_file_store_rejects_path_keys(temp_data_dir):
    store = FileStore(temp_data_dir)

    with pytest.raises(StorageError):
        await store.load("../etc/passwd")

    result = await store.save("../escape", {})
    assert result.success is False


# ============================================================================
# RedisStore
# ============================================================================

@pytest.fixture
def mock_redis_client():
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_redis_store_namespaces_keys(mock_redis_client):
    store = RedisStore(namespace="user-42", client=mock_redis_client)

    await store.save("studyStreak", {"currentStreak": 2})

    mock_redis_client.set.assert_awaited_once_with("user-42:studyStreak", json.dumps({"currentStreak": 2}))


@pytest.mark.asyncio
async def test_redis_store_load(mock_redis_client):
    mock_redis_client.get.return_value = json.dumps({"xp": 10, "level": 1, "badges": []})
    store = RedisStore(namespace="studytrack", client=mock_redis_client)

    assert await store.load("studyGamification") == {"xp": 10, "level": 1, "badges": []}
    mock_redis_client.get.assert_awaited_once_with("studytrack:studyGamification")


@pytest.mark.asyncio
async def test_redis_store_connection_error_on_save(mock_redis_client):
    mock_redis_client.set.side_effect = ConnectionError("Connection refused")
    store = RedisStore(client=mock_redis_client)

    result = await store.save("studyStreak", {"currentStreak": 1})

    assert result.success is False
    assert "Connection refused" in result.error.message


@pytest.mark.asyncio
async def test_redis_store_connection_error_on_load(mock_redis_client):
    mock_redis_client.get.side_effect = ConnectionError("Connection refused")
    store = RedisStore(client=mock_redis_client)

    with pytest.raises(StorageError):
        await store.load("studyStreak")


@pytest.mark.asyncio
async def test_redis_store_delete_and_close(mock_redis_client):
    store = RedisStore(client=mock_redis_client)

    assert await store.delete("studyStreak") is True

    await store.close()
    mock_redis_client.aclose.assert_awaited_once()


# ============================================================================
# Factory
# ============================================================================

def test_create_store_backends(temp_data_dir):
    assert isinstance(create_store("memory"), MemoryStore)

    file_store = create_store("file", data_path=temp_data_dir)
    assert isinstance(file_store, FileStore)
    assert file_store.data_path == temp_data_dir

    redis_store = create_store("redis", redis_url="redis://example:6379/1", namespace="ns")
    assert isinstance(redis_store, RedisStore)
    assert redis_store.redis_url == "redis://example:6379/1"
    assert redis_store.namespace == "ns"


def test_create_store_unknown_backend():
    with pytest.raises(ConfigurationError):
        create_store("sqlite")


# ============================================================================
# Undecodable Records
# ============================================================================

@pytest.mark.asyncio
async def test_file_store_invalid_utf8_is_malformed(temp_data_dir):
    (temp_data_dir / "studyStreak.json").write_bytes(b'{"currentStreak": 3\xff\xfe}')
    store = FileStore(temp_data_dir)

    with pytest.raises(MalformedStateError) as exc_info:
        await store.load("studyStreak")

    assert exc_info.value.key == "studyStreak"


@pytest.mark.asyncio
async def test_redis_store_undecodable_value_is_malformed(mock_redis_client):
    mock_redis_client.get.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
    store = RedisStore(client=mock_redis_client)

    with pytest.raises(MalformedStateError):
        await store.load("studyStreak")


# ============================================================================
# Redis Connection
# ============================================================================

@pytest.mark.asyncio
async def test_redis_store_failed_ping_is_not_kept(mock_redis_client):
    """A client that failed its ping is closed and the next call reconnects"""
    unreachable = AsyncMock()
    unreachable.ping = AsyncMock(side_effect=ConnectionError("Connection refused"))
    unreachable.aclose = AsyncMock()
    mock_redis_client.get.return_value = json.dumps({"currentStreak": 2})

    with patch("studytrack.storage.redis_store.redis.from_url", side_effect=[unreachable, mock_redis_client]) as mock_from_url:
        store = RedisStore(redis_url="redis://example:6379/0")

        with pytest.raises(StorageError):
            await store.load("studyStreak")
        assert store._client is None
        unreachable.aclose.assert_awaited_once()

        assert await store.load("studyStreak") == {"currentStreak": 2}
        assert mock_from_url.call_count == 2
        mock_redis_client.ping.assert_awaited_once()
